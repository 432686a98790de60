"""Funnel benchmark: many senders feeding one receiver per channel.

Several independent channels are exercised at once.  Each channel has a
fixed number of sender tasks sharing its message budget and one receiver
task draining it.  The benchmark is repeated for a range of channel
capacities.
"""

from __future__ import annotations

import functools
import sys
import time
from typing import Iterator, Union

from .channels import Receiver, Sender, channel_names, make_channel
from .executors import ExecutorId, make_executor
from .results import BenchResult

MESSAGES_PER_CHANNEL = 1_000_000
CHANNELS = 61
SENDERS_PER_CHANNEL = 13
CAPACITIES = (1, 10, 100, 1000, 10000)
LABEL = "capacity"


async def _produce(sender: Sender, count: int) -> None:
    try:
        for i in range(count):
            await sender.send(i)
    finally:
        sender.close()


async def _consume(receiver: Receiver, count: int) -> None:
    for _ in range(count):
        if await receiver.recv() is None:
            raise RuntimeError("channel closed before all messages were received")


def run_funnel(
    channel_name: str,
    executor_id: Union[ExecutorId, str],
    capacity: int,
    messages_per_channel: int = MESSAGES_PER_CHANNEL,
    channels: int = CHANNELS,
    senders_per_channel: int = SENDERS_PER_CHANNEL,
) -> float:
    """Run one funnel sample and return its throughput in messages per second."""
    if channels < 1:
        raise ValueError(f"channel count must be at least 1, got {channels}")
    if senders_per_channel < 1:
        raise ValueError(
            f"senders per channel must be at least 1, got {senders_per_channel}"
        )
    if messages_per_channel < 0:
        raise ValueError(
            f"messages per channel must not be negative, got {messages_per_channel}"
        )

    per_sender = messages_per_channel // senders_per_channel
    per_channel = per_sender * senders_per_channel
    total_messages = per_channel * channels

    executor = make_executor(executor_id)
    for _ in range(channels):
        sender, receiver = make_channel(channel_name, capacity)
        for _ in range(senders_per_channel):
            executor.spawn(functools.partial(_produce, sender.clone(), per_sender))
        sender.close()
        executor.spawn(functools.partial(_consume, receiver, per_channel))

    start = time.perf_counter()
    executor.join_all()
    duration = max(time.perf_counter() - start, sys.float_info.min)

    return total_messages / duration


def bench(
    channel_name: str, executor_id: Union[ExecutorId, str], samples: int
) -> Iterator[BenchResult]:
    """Yield one result per channel capacity, each holding ``samples`` runs."""
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
    for capacity in CAPACITIES:
        throughput = [
            run_funnel(
                channel_name,
                executor_id,
                capacity,
                MESSAGES_PER_CHANNEL,
                CHANNELS,
                SENDERS_PER_CHANNEL,
            )
            for _ in range(samples)
        ]
        yield BenchResult(LABEL, str(capacity), tuple(throughput))