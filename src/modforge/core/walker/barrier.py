from __future__ import annotations

"""
Join Barrier Synchronization Primitive.

Counts the asynchronous branches of a traversal that are still running.
Branches may spawn further branches while they run (a directory listing
discovers subdirectories), so the barrier only releases once every branch
ever started has reported back. The barrier releases exactly once: on the
transition of the pending count to zero, or on the first failure reported
by a branch, in which case `wait()` re-raises that failure.
"""

import asyncio
import logging
from typing import Callable, List, Optional

from modforge.domain.errors import BarrierError

logger = logging.getLogger(__name__)


class JoinBarrier:
    """
    Wait-group over a dynamically growing set of coroutines.

    Every `add()` must precede the branch it guards, and every branch must
    report exactly once through `done()` or `fail()`. All calls happen on the
    event loop thread, so the counters need no locking.
    """

    def __init__(self) -> None:
        self._pending = 0
        self._started = 0
        self._finished = 0
        self._error: Optional[BaseException] = None
        self._released = asyncio.Event()
        self._listeners: List[Callable[["JoinBarrier"], None]] = []

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    @property
    def pending(self) -> int:
        return self._pending

    @property
    def started(self) -> int:
        """Total number of increments since creation."""
        return self._started

    @property
    def finished(self) -> int:
        """Total number of branches that reported back."""
        return self._finished

    @property
    def released(self) -> bool:
        return self._released.is_set()

    @property
    def error(self) -> Optional[BaseException]:
        return self._error

    def on_release(self, listener: Callable[["JoinBarrier"], None]) -> None:
        """Register a callback invoked once when the barrier releases."""
        if self.released:
            listener(self)
        else:
            self._listeners.append(listener)

    # -------------------------------------------------------------------------
    # Counting
    # -------------------------------------------------------------------------

    def add(self) -> None:
        """
        Account for a branch about to start.

        Raises:
            BarrierError: If the barrier has already released.
        """
        if self.released:
            raise BarrierError("Cannot add a branch to a released barrier.")
        self._pending += 1
        self._started += 1

    def done(self) -> None:
        """
        Report the successful completion of one branch.

        Raises:
            BarrierError: If no branch is pending.
        """
        if self._pending <= 0:
            raise BarrierError("done() called without a matching add().")
        self._pending -= 1
        self._finished += 1
        if self._pending == 0:
            self._release()

    def fail(self, exc: BaseException) -> None:
        """
        Report a failed branch and release the barrier with its error.

        Only the first failure is kept; later ones are logged and dropped.
        """
        if self._pending > 0:
            self._pending -= 1
            self._finished += 1

        if self._error is None and not self.released:
            self._error = exc
            self._release()
        else:
            logger.debug(f"Additional branch failure ignored: {exc!r}")

    async def wait(self) -> None:
        """
        Block until every branch reported back.

        A barrier that was never incremented releases immediately.

        Raises:
            BaseException: The first failure reported by a branch.
        """
        if self._started == 0 and not self.released:
            self._release()

        await self._released.wait()

        if self._error is not None:
            raise self._error

    # -------------------------------------------------------------------------
    # Private Helpers
    # -------------------------------------------------------------------------

    def _release(self) -> None:
        if self.released:
            return
        self._released.set()
        listeners, self._listeners = self._listeners, []
        for listener in listeners:
            listener(self)
