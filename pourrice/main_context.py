"""Single execution context for user-facing state.

State exposed to the UI is mutated only on one thread: session state,
loading flags, errors and search results. A ``MainContext`` binds to the
thread that created it, and to that thread's event loop once one is
running. Calls arriving from other threads are marshalled onto it.
"""

import asyncio
import logging
import threading
from collections.abc import Callable, Coroutine
from concurrent.futures import Future
from typing import Any

logger = logging.getLogger(__name__)


class MainContext:
    """The execution context that owns user-facing state."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._thread_id = threading.get_ident()
        self._loop = loop
        self._tasks: set[asyncio.Task] = set()

    @property
    def loop(self) -> asyncio.AbstractEventLoop | None:
        return self._loop

    def is_current(self) -> bool:
        """Whether the caller runs on this context's thread."""
        return threading.get_ident() == self._thread_id

    def check(self) -> None:
        """Raise if called off this context.

        Raises:
            RuntimeError: When invoked from another thread
        """
        if not self.is_current():
            raise RuntimeError(
                "User-facing state must be mutated on the main context; "
                "marshal the call with MainContext.call_soon or spawn"
            )

    def _bind_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def call_soon(self, fn: Callable[..., Any], *args: Any) -> None:
        """Run ``fn`` on this context.

        On the owning thread the call happens immediately. From any other
        thread it is queued on the bound event loop.
        """
        if self.is_current():
            fn(*args)
            return
        if self._loop is None:
            raise RuntimeError("MainContext has no event loop to marshal onto")
        self._loop.call_soon_threadsafe(fn, *args)

    def spawn(self, coro: Coroutine[Any, Any, Any]) -> "asyncio.Task | Future":
        """Schedule a coroutine on this context.

        Returns an ``asyncio.Task`` when called on the owning thread, or a
        ``concurrent.futures.Future`` when called from elsewhere.
        """
        if self.is_current():
            task = self._bind_loop().create_task(coro)
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
            return task
        if self._loop is None:
            coro.close()
            raise RuntimeError("MainContext has no event loop to marshal onto")
        return asyncio.run_coroutine_threadsafe(coro, self._loop)

    async def drain(self) -> None:
        """Wait for every task spawned on this context to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
