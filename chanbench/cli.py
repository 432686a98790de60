"""Command-line runner for the channel benchmarks."""

from __future__ import annotations

import contextlib
import functools
import sys
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Optional, Sequence, TextIO, Tuple, Union

from . import funnel, pinball
from .channels import channel_names
from .executors import ExecutorId
from .results import BenchResult

HELP_MESSAGE = """\
chanbench
Benchmark runner for async channels

USAGE:
    chanbench [OPTIONS] <BENCHNAME>

ARGS:
    <BENCHNAME>    If specified, only run benches containing this string in their names

OPTIONS:
    -h, --help             Print help information
    -l, --list             List available benches
    -s, --samples SAMPLES  Repeat benches SAMPLES times and average the result
    -o, --output FILE      Save the results to FILE
    -e, --exec EXECUTOR    Run the bench with the EXECUTOR runtime;
                           possible values:
                               asyncio [default],
                               trio"""

BenchRunner = Callable[[int], Iterator[BenchResult]]

_GROUPS: Dict[str, Callable[[str, ExecutorId, int], Iterator[BenchResult]]] = {
    "funnel": funnel.bench,
    "pinball": pinball.bench,
}

BENCHES: Tuple[Tuple[str, str], ...] = tuple(
    (group, channel) for group in _GROUPS for channel in channel_names()
)

_SHORT = {"h": "help", "l": "list", "s": "samples", "o": "output", "e": "exec"}
_LONG = {"help", "list", "samples", "output", "exec"}
_FLAGS = {"help", "list"}


class UsageError(ValueError):
    """Raised when the command line cannot be understood."""


@dataclass
class BenchArgs:
    """Options selected on the command line."""

    bench_substrings: List[str] = field(default_factory=list)
    executor: ExecutorId = ExecutorId.ASYNCIO
    samples: int = 1
    output: Optional[str] = None


def _parse_samples(value: str) -> int:
    try:
        samples = int(value)
    except ValueError:
        raise UsageError(f"cannot parse argument {value!r}: not an integer") from None
    if samples < 1:
        raise UsageError(f"cannot parse argument {value!r}: must be at least 1")
    return samples


def parse_args(argv: Optional[Sequence[str]] = None) -> Optional[BenchArgs]:
    """Parse the command line; return ``None`` when help or the list was printed."""
    args = list(sys.argv[1:] if argv is None else argv)
    result = BenchArgs()
    remaining = iter(args)
    positional_only = False

    for arg in remaining:
        if positional_only or arg == "-" or not arg.startswith("-"):
            result.bench_substrings.append(arg)
            continue
        if arg == "--":
            positional_only = True
            continue

        if arg.startswith("--"):
            name, eq, inline = arg[2:].partition("=")
            if name not in _LONG:
                raise UsageError(f"invalid option '--{name}'")
            option = name
            attached = inline if eq else None
            if option in _FLAGS and attached is not None:
                raise UsageError(f"unexpected argument for option '--{name}'")
            display = f"--{name}"
        else:
            letter = arg[1]
            option = _SHORT.get(letter)
            if option is None:
                raise UsageError(f"invalid option '-{letter}'")
            rest = arg[2:]
            if rest.startswith("="):
                rest = rest[1:]
            attached = rest if rest else None
            display = f"-{letter}"

        if option == "help":
            print(HELP_MESSAGE)
            return None
        if option == "list":
            for group, item in BENCHES:
                print(f"    {group}-{item}")
            return None

        if attached is None:
            value = next(remaining, None)
            if value is None:
                raise UsageError(f"missing argument for option '{display}'")
        else:
            value = attached

        if option == "samples":
            result.samples = _parse_samples(value)
        elif option == "output":
            result.output = value
        else:
            try:
                result.executor = ExecutorId.parse(value)
            except ValueError:
                raise UsageError(f"invalid value {value!r} for option 'exec'") from None

    return result


def select_benches(
    substrings: Sequence[str], executor_id: Union[ExecutorId, str]
) -> Dict[str, Dict[str, BenchRunner]]:
    """Return the requested benches by group then channel, both in sorted order."""
    if isinstance(executor_id, str):
        executor_id = ExecutorId.parse(executor_id)

    selected: Dict[str, Dict[str, BenchRunner]] = {}
    for group, item in BENCHES:
        name = f"{group}-{item}"
        if not substrings or any(sub in name for sub in substrings):
            runner = functools.partial(_GROUPS[group], item, executor_id)
            selected.setdefault(group, {})[item] = runner

    return {
        group: dict(sorted(items.items())) for group, items in sorted(selected.items())
    }


def format_result_line(result: BenchResult) -> str:
    """Render one result as a line of the console report."""
    mean = result.mean()
    if len(result.throughput) == 1:
        name = f"{result.label}={result.parameter}"
        return f"        {name:<20} {mean / 1e6:>12.3f} msg/µs"
    name = f"{result.label}: {result.parameter}"
    return (
        f"        {name:<20} {mean * 1e-6:>12.3f} msg/µs "
        f"[±{result.std_dev() * 1e-6:.3f}]"
    )


def write_table(
    file: TextIO,
    group: str,
    executor_name: str,
    headers: Sequence[str],
    columns: Sequence[Sequence[str]],
) -> None:
    """Write one benchmark group as a whitespace-aligned table."""
    file.write(f"# '{group}' benchmark with {executor_name} runtime\n")
    file.write("#" + "".join(f"{header:>15} " for header in headers) + "\n")
    for row in zip(*columns):
        file.write("".join(f" {cell:>15}" for cell in row) + "\n")
    file.write("\n")


def _run_group(
    group: str,
    benches: Dict[str, BenchRunner],
    executor: ExecutorId,
    samples: int,
    output: Optional[TextIO],
) -> None:
    print(f"Running benchmark '{group}' with the {executor.value} runtime.")
    if samples != 1:
        print(f"All results are averaged over {samples} runs.")

    headers: List[str] = []
    parameter_column: List[str] = []
    columns: List[List[str]] = []

    for bench_id, (name, run) in enumerate(benches.items()):
        print(f"    {name}:")
        data_column: List[str] = []

        for parameter_id, result in enumerate(run(samples)):
            mean = result.mean()
            if output is not None:
                if bench_id == 0 and parameter_id == 0:
                    headers.append(result.label)
                if bench_id == 0:
                    parameter_column.append(result.parameter)
                data_column.append(f"{mean:.0f}")
            print(format_result_line(result))

        if output is not None:
            columns.append(data_column)
            headers.append(name)
        print()

    if output is not None:
        write_table(output, group, executor.value, headers, [parameter_column, *columns])


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the benchmark command and return its exit status."""
    try:
        args = parse_args(argv)
    except UsageError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    if args is None:
        return 0

    benches = select_benches(args.bench_substrings, args.executor)
    if not benches:
        print("No matching benches found")
        return 0

    output: Optional[TextIO] = None
    if args.output is not None:
        try:
            output = open(args.output, "w", encoding="utf-8")
        except OSError:
            print(f"Error: Could not open file <{args.output}>", file=sys.stderr)
            return 1

    with output if output is not None else contextlib.nullcontext():
        for group, group_benches in benches.items():
            _run_group(group, group_benches, args.executor, args.samples, output)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())