"""Marshal callbacks onto the event loop that owns hub state."""

import asyncio
from collections.abc import Callable


class LoopDispatcher:
    """Runs callbacks on the owner loop.

    Calls made on the owner loop's thread run inline; calls from any other
    thread are queued with ``call_soon_threadsafe``. Until a loop is bound,
    every call runs inline.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop | None:
        return self._loop

    def bind(self, loop: asyncio.AbstractEventLoop) -> None:
        """Make ``loop`` the owner loop."""
        self._loop = loop

    def dispatch(self, func: Callable[..., object], *args: object) -> None:
        """Run ``func(*args)`` on the owner loop."""
        loop = self._loop
        if loop is None or loop.is_closed() or _running_loop() is loop:
            func(*args)
            return
        loop.call_soon_threadsafe(func, *args)


def _running_loop() -> asyncio.AbstractEventLoop | None:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None
