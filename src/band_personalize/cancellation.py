from __future__ import annotations

import asyncio

from .exceptions import OperationCanceledError


class CancellationToken:
    """Cooperative cancellation signal shared by a caller and a device call."""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        """Request cancellation.

        Must be called from the thread running the event loop. Use
        cancel_threadsafe from any other thread.
        """
        self._event.set()

    def cancel_threadsafe(self, loop: asyncio.AbstractEventLoop) -> None:
        """Request cancellation from a thread other than the loop's."""
        loop.call_soon_threadsafe(self._event.set)

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise OperationCanceledError("Operation was cancelled")

    async def wait(self) -> None:
        """Wait until cancellation is requested."""
        await self._event.wait()

    async def sleep(self, delay: float) -> None:
        """Sleep for delay seconds, raising as soon as cancellation is requested."""
        self.raise_if_cancelled()
        if delay <= 0:
            return
        try:
            await asyncio.wait_for(self._event.wait(), delay)
        except asyncio.TimeoutError:
            return
        self.raise_if_cancelled()
