"""Pinball benchmark: visitors bouncing randomly between graph nodes.

Each graph is a fully connected set of nodes, one task and one inbound
channel per node.  Visitors start spread evenly over the nodes and are
forwarded to random other nodes until their path reaches its full length.
When the last visitor of a graph halts, its node tells every other node
to wind down.  The benchmark is repeated for a range of visitor counts.
"""

from __future__ import annotations

import functools
import random
import sys
import time
from typing import Iterator, List, Union

from .channels import Receiver, Sender, channel_names, make_channel
from .executors import ExecutorId, make_executor
from .results import BenchResult

TOTAL_PATH_LENGTH = 1_000_000
GRAPH_COUNT = 61
NODES_PER_GRAPH = 13
VISITOR_COUNTS = (1, 3, 7, 17, 41, 101, 241)
LABEL = "ball count"

_WIND_DOWN = object()


class _HaltCounter:
    """Number of visitors of one graph that have completed their journey."""

    def __init__(self) -> None:
        self.count = 0


async def _node(
    inbox: Receiver,
    own: Sender,
    others: List[Sender],
    initial_visitors: int,
    path_limit: int,
    visitor_count: int,
    rng: random.Random,
    halted: _HaltCounter,
) -> None:
    try:
        for _ in range(initial_visitors):
            await own.send(0)

        while True:
            message = await inbox.recv()
            if message is None or message is _WIND_DOWN:
                break

            path_length = message + 1
            if path_length < path_limit:
                await others[rng.randrange(len(others))].send(path_length)
            else:
                halted.count += 1
                if halted.count == visitor_count:
                    for sender in others:
                        await sender.send(_WIND_DOWN)
                    break
    finally:
        own.close()
        for sender in others:
            sender.close()


def run_pinball(
    channel_name: str,
    executor_id: Union[ExecutorId, str],
    visitor_count: int,
    total_path_length: int = TOTAL_PATH_LENGTH,
    graph_count: int = GRAPH_COUNT,
    nodes_per_graph: int = NODES_PER_GRAPH,
) -> float:
    """Run one pinball sample and return its throughput in messages per second."""
    if visitor_count < 1:
        raise ValueError(f"visitor count must be at least 1, got {visitor_count}")
    if graph_count < 1:
        raise ValueError(f"graph count must be at least 1, got {graph_count}")
    if nodes_per_graph < 2:
        raise ValueError(f"a graph needs at least 2 nodes, got {nodes_per_graph}")
    if total_path_length < 0:
        raise ValueError(
            f"total path length must not be negative, got {total_path_length}"
        )

    path_limit = total_path_length // visitor_count
    total_messages = path_limit * visitor_count * graph_count
    base, extra = divmod(visitor_count, nodes_per_graph)

    executor = make_executor(executor_id)
    for graph_id in range(graph_count):
        pairs = [make_channel(channel_name, visitor_count) for _ in range(nodes_per_graph)]
        senders = [sender for sender, _ in pairs]
        halted = _HaltCounter()

        for i, (own_sender, inbox) in enumerate(pairs):
            others = [s.clone() for j, s in enumerate(senders) if j != i]
            rng = random.Random(graph_id + graph_count * i)
            executor.spawn(
                functools.partial(
                    _node,
                    inbox,
                    own_sender.clone(),
                    others,
                    base + 1 if i < extra else base,
                    path_limit,
                    visitor_count,
                    rng,
                    halted,
                )
            )

        for sender in senders:
            sender.close()

    start = time.perf_counter()
    executor.join_all()
    duration = max(time.perf_counter() - start, sys.float_info.min)

    return total_messages / duration


def bench(
    channel_name: str, executor_id: Union[ExecutorId, str], samples: int
) -> Iterator[BenchResult]:
    """Yield one result per visitor count, each holding ``samples`` runs."""
    if samples < 1:
        raise ValueError(f"sample count must be at least 1, got {samples}")
    if channel_name not in channel_names():
        raise ValueError(f"unknown channel kind {channel_name!r}")
    if isinstance(executor_id, str):
        executor_id = ExecutorId.parse(executor_id)
    return _results(channel_name, executor_id, samples)


def _results(
    channel_name: str, executor_id: ExecutorId, samples: int
) -> Iterator[BenchResult]:
    for visitor_count in VISITOR_COUNTS:
        throughput = [
            run_pinball(
                channel_name,
                executor_id,
                visitor_count,
                TOTAL_PATH_LENGTH,
                GRAPH_COUNT,
                NODES_PER_GRAPH,
            )
            for _ in range(samples)
        ]
        yield BenchResult(LABEL, str(visitor_count), tuple(throughput))