"""Callback delivery with at-most-once semantics.

:meth:`TypedFetch.submit <fetchkit.client.typed_fetch.TypedFetch.submit>`
runs a fetch as an :class:`asyncio.Task` and hands back a
:class:`FetchHandle`. The handle delivers the task's result to a callback
once, and never after :meth:`FetchHandle.cancel` -- even when the task had
already finished but the loop had not yet run its done-callbacks.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Generator, Generic, TypeVar

T = TypeVar("T")


class FetchHandle(Generic[T]):
    """Handle on an in-flight fetch.

    Args:
        task: The task producing the result.
        callback: Called with the task's result exactly once on success,
            never after :meth:`cancel`.
    """

    def __init__(self, task: asyncio.Task[T], callback: Callable[[T], Any]) -> None:
        self._task = task
        self._callback = callback
        self._cancelled = False
        self._delivered = False
        task.add_done_callback(self._on_done)

    @property
    def delivered(self) -> bool:
        """Whether the callback has been invoked."""
        return self._delivered

    def cancel(self) -> bool:
        """Cancel the fetch and suppress delivery.

        Returns:
            ``False`` if the callback had already been invoked, ``True``
            otherwise.
        """
        if self._delivered:
            return False
        self._cancelled = True
        self._task.cancel()
        return True

    def cancelled(self) -> bool:
        return self._cancelled or self._task.cancelled()

    def done(self) -> bool:
        return self._task.done()

    def __await__(self) -> Generator[Any, None, T]:
        return self._task.__await__()

    def _on_done(self, task: asyncio.Task[T]) -> None:
        if self._cancelled or task.cancelled() or self._delivered:
            return
        exc = task.exception()
        if exc is not None:
            task.get_loop().call_exception_handler(
                {
                    "message": "Unhandled exception in fetch task",
                    "exception": exc,
                    "task": task,
                }
            )
            return
        self._delivered = True
        self._callback(task.result())
