"""Bounded multi-producer, single-consumer async channels.

Every channel kind offers the same interface: a cloneable :class:`Sender`
and a single :class:`Receiver`.  ``Receiver.recv`` returns ``None`` once
every sender has been closed and the buffer is drained.  The channels are
built on anyio, so they work under both the asyncio and trio backends, and
they may be created before an event loop is running.
"""

from __future__ import annotations

import abc
from collections import deque
from typing import Any, Callable, Deque, Dict, Optional, Tuple

import anyio


class ChannelClosedError(Exception):
    """Raised when a closed sender is used."""


class Sender(abc.ABC):
    """Sending half of a bounded channel."""

    @abc.abstractmethod
    async def send(self, message: Any) -> None:
        """Send a message, waiting while the channel is full."""

    @abc.abstractmethod
    def clone(self) -> "Sender":
        """Return another sender feeding the same channel."""

    @abc.abstractmethod
    def close(self) -> None:
        """Close this sender; closing it again has no effect."""


class Receiver(abc.ABC):
    """Receiving half of a bounded channel."""

    @abc.abstractmethod
    async def recv(self) -> Optional[Any]:
        """Return the next message, or ``None`` once all senders are closed."""


class _StreamSender(Sender):
    def __init__(self, stream: Any) -> None:
        self._stream = stream

    async def send(self, message: Any) -> None:
        try:
            await self._stream.send(message)
        except (anyio.ClosedResourceError, anyio.BrokenResourceError) as exc:
            raise ChannelClosedError("cannot send on a closed channel") from exc

    def clone(self) -> "_StreamSender":
        try:
            return _StreamSender(self._stream.clone())
        except anyio.ClosedResourceError as exc:
            raise ChannelClosedError("cannot clone a closed sender") from exc

    def close(self) -> None:
        self._stream.close()


class _StreamReceiver(Receiver):
    def __init__(self, stream: Any) -> None:
        self._stream = stream

    async def recv(self) -> Optional[Any]:
        try:
            return await self._stream.receive()
        except (anyio.EndOfStream, anyio.ClosedResourceError):
            return None


def _memory_stream_channel(capacity: int) -> Tuple[Sender, Receiver]:
    send_stream, receive_stream = anyio.create_memory_object_stream(capacity)
    return _StreamSender(send_stream), _StreamReceiver(receive_stream)


class _QueueState:
    """Shared buffer and wait lists of a deque-backed channel."""

    def __init__(self, capacity: int) -> None:
        self.capacity = capacity
        self.items: Deque[Any] = deque()
        self.senders = 1
        self.send_waiters: Deque[anyio.Event] = deque()
        self.recv_waiters: Deque[anyio.Event] = deque()

    @staticmethod
    def wake_one(waiters: Deque[anyio.Event]) -> None:
        if waiters:
            waiters.popleft().set()

    @staticmethod
    def wake_all(waiters: Deque[anyio.Event]) -> None:
        while waiters:
            waiters.popleft().set()

    async def park(self, waiters: Deque[anyio.Event]) -> None:
        event = anyio.Event()
        waiters.append(event)
        try:
            await event.wait()
        except BaseException:
            try:
                waiters.remove(event)
            except ValueError:
                # The wake-up was already handed to us; pass it on.
                self.wake_one(waiters)
            raise


class _QueueSender(Sender):
    def __init__(self, state: _QueueState) -> None:
        self._state = state
        self._closed = False

    async def send(self, message: Any) -> None:
        if self._closed:
            raise ChannelClosedError("cannot send on a closed sender")
        state = self._state
        while len(state.items) >= state.capacity:
            await state.park(state.send_waiters)
        state.items.append(message)
        state.wake_one(state.recv_waiters)

    def clone(self) -> "_QueueSender":
        if self._closed:
            raise ChannelClosedError("cannot clone a closed sender")
        self._state.senders += 1
        return _QueueSender(self._state)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        state = self._state
        state.senders -= 1
        if state.senders == 0:
            state.wake_all(state.recv_waiters)


class _QueueReceiver(Receiver):
    def __init__(self, state: _QueueState) -> None:
        self._state = state

    async def recv(self) -> Optional[Any]:
        state = self._state
        while not state.items:
            if state.senders == 0:
                return None
            await state.park(state.recv_waiters)
        item = state.items.popleft()
        state.wake_one(state.send_waiters)
        return item


def _deque_channel(capacity: int) -> Tuple[Sender, Receiver]:
    state = _QueueState(capacity)
    return _QueueSender(state), _QueueReceiver(state)


_FACTORIES: Dict[str, Callable[[int], Tuple[Sender, Receiver]]] = {
    "memory_stream": _memory_stream_channel,
    "deque": _deque_channel,
}


def channel_names() -> Tuple[str, ...]:
    """Names of the available channel kinds, in listing order."""
    return tuple(_FACTORIES)


def make_channel(name: str, capacity: int) -> Tuple[Sender, Receiver]:
    """Create a channel of the given kind holding at most ``capacity`` messages."""
    try:
        factory = _FACTORIES[name]
    except KeyError:
        raise ValueError(f"unknown channel kind {name!r}") from None
    if capacity < 1:
        raise ValueError(f"channel capacity must be at least 1, got {capacity}")
    return factory(capacity)