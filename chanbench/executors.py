"""Runtimes that run a batch of spawned tasks to completion."""

from __future__ import annotations

import abc
import enum
from typing import Any, Awaitable, Callable, List, Union

import anyio

TaskFactory = Callable[[], Awaitable[Any]]


class ExecutorId(enum.Enum):
    """Identifier of an async runtime."""

    ASYNCIO = "asyncio"
    TRIO = "trio"

    @classmethod
    def parse(cls, name: str) -> "ExecutorId":
        """Return the runtime with the given name."""
        try:
            return cls(name)
        except ValueError:
            raise ValueError(f"unknown executor {name!r}") from None


class Executor(abc.ABC):
    """Collects tasks and runs them all concurrently on one event loop."""

    @property
    @abc.abstractmethod
    def backend(self) -> str:
        """Name of the anyio backend used to run tasks."""

    def __init__(self) -> None:
        self._tasks: List[TaskFactory] = []

    def spawn(self, coro_fn: TaskFactory) -> None:
        """Queue a zero-argument async callable to run at the next ``join_all``."""
        if not callable(coro_fn):
            raise TypeError("spawn() expects an async callable")
        self._tasks.append(coro_fn)

    def join_all(self) -> None:
        """Run every queued task concurrently and wait until all have finished."""
        tasks, self._tasks = self._tasks, []

        async def run_all() -> None:
            async with anyio.create_task_group() as tg:
                for task in tasks:
                    tg.start_soon(task)

        try:
            anyio.run(run_all, backend=self.backend)
        except Exception as exc:
            inner = getattr(exc, "exceptions", None)
            if inner and len(inner) == 1:
                raise inner[0] from exc
            raise


class AsyncioExecutor(Executor):
    """Executor running on the asyncio event loop."""

    backend = "asyncio"


class TrioExecutor(Executor):
    """Executor running on the trio event loop."""

    backend = "trio"


_EXECUTORS = {
    ExecutorId.ASYNCIO: AsyncioExecutor,
    ExecutorId.TRIO: TrioExecutor,
}


def make_executor(executor_id: Union[ExecutorId, str]) -> Executor:
    """Create a fresh executor for the given runtime."""
    if isinstance(executor_id, str):
        executor_id = ExecutorId.parse(executor_id)
    return _EXECUTORS[executor_id]()