# chanbench

Throughput benchmarks for bounded asynchronous message channels.

Every benchmark pushes a large number of messages through bounded channels
and reports the throughput, in messages per microsecond, for each channel
kind and each parameter value. The benchmarks run on the event-loop runtime
you choose: `asyncio` or `trio`, both driven through anyio.

## Benchmarks

- **funnel**: 61 independent channels, each fed by 13 sender tasks and
  drained by one receiver task, about one million messages per channel.
  The channel capacity varies over 1, 10, 100, 1000 and 10000.
- **pinball**: "balls" (visitors) bounce at random between the 13 nodes of
  61 fully connected graphs. Each node is a task with its own inbox; a ball
  is forwarded until its path is complete, and the node that halts the last
  ball of a graph tells the other nodes to wind down. The number of balls
  varies over 1, 3, 7, 17, 41, 101 and 241.

Each benchmark runs once per channel kind. The kinds, from
`chanbench.channels.channel_names()`, are:

- `memory_stream`: anyio memory object streams.
- `deque`: a buffer held in a `collections.deque`, with waiting senders and
  receivers parked on anyio events.

The full names of the benches are `<group>-<channel>`, for example
`funnel-deque` or `pinball-memory_stream`. With the default sizes a single
run takes a while.

## Installation

```
pip install .
```

The `trio` runtime needs trio installed as well:

```
pip install trio
```

## Usage

```
chanbench [OPTIONS] [BENCHNAME ...]
```

If you give one or more `BENCHNAME` arguments, only benches whose full name
contains one of them are run. If none matches, the command prints
`No matching benches found`.

| Option | Meaning |
| --- | --- |
| `-h`, `--help` | Print help information |
| `-l`, `--list` | List available benches |
| `-s`, `--samples SAMPLES` | Repeat each bench SAMPLES times (at least 1) and average the result |
| `-o`, `--output FILE` | Save the results to FILE |
| `-e`, `--exec EXECUTOR` | Run on the EXECUTOR runtime: `asyncio` (the default) or `trio` |

Option values may also be attached, as in `--samples=5` or `-s5`. A bad
option or value prints an error and exits with status 1.

Examples:

```
chanbench --list
chanbench funnel
chanbench -s 5 -e trio pinball -o pinball.dat
```

With one sample a line reads `capacity=100   <mean> msg/µs`. With several,
it reads `capacity: 100   <mean> msg/µs [±<std dev>]`, the population
standard deviation of the samples.

## Output file

With `--output`, each benchmark group is written as a block: a `#` comment
line naming the group and the runtime, a `#` header row (the parameter label
followed by the channel names), then one row per parameter value. The first
column holds the parameter and the others the mean throughput of each channel
in messages per second, all right-aligned in 15-character columns. A blank
line ends the block, a layout that plotting tools such as gnuplot read as is.

## Using it as a library

```python
from chanbench.executors import ExecutorId
from chanbench.funnel import bench, run_funnel

# One small sample, in messages per second.
rate = run_funnel("deque", "asyncio", 10,
                  messages_per_channel=1000, channels=2, senders_per_channel=4)

# The full sweep over capacities, three samples each.
for result in bench("memory_stream", ExecutorId.parse("trio"), 3):
    print(result.label, result.parameter, result.mean(), result.std_dev())
```

`chanbench.pinball` offers `run_pinball` and `bench` in the same way.
`chanbench.channels.make_channel(name, capacity)` returns a `(Sender,
Receiver)` pair; `Sender.clone()` adds a sender, `Sender.close()` closes one,
and `Receiver.recv()` returns `None` once every sender is closed and the
buffer is empty. `chanbench.executors.make_executor` returns an executor whose
`spawn` queues async callables and whose `join_all` runs them all
concurrently.