"""In-flight request deduplication for remote translation calls."""

import asyncio
import logging
from typing import Awaitable, Callable, Dict, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RequestDeduplicator:
    """
    Coalesces concurrent calls that share a key into one execution.

    The first caller for a key starts the factory as a task and registers
    it; later callers await the same task. The registration is removed as
    soon as the task settles, whether it succeeded or failed, so the next
    call after a failure starts a fresh attempt.

    Lookup and registration happen without an await in between, which
    keeps the check-then-act atomic on a single event loop.
    """

    def __init__(self):
        self._pending: Dict[str, asyncio.Task] = {}

    async def dedupe(self, key: str, factory: Callable[[], Awaitable[T]]) -> T:
        """
        Run factory() once per key among concurrent callers.

        Args:
            key: Deduplication key.
            factory: Zero-argument callable returning an awaitable.

        Returns:
            The factory result, shared by every caller of this key.

        Raises:
            Whatever the factory raised; every waiter sees the same exception.
        """
        task = self._pending.get(key)
        if task is None:
            task = asyncio.ensure_future(self._run(key, factory))
            self._pending[key] = task
        else:
            logger.debug("Joining in-flight request for %r", key)

        # Shield so one waiter being cancelled does not cancel the others.
        return await asyncio.shield(task)

    async def _run(self, key: str, factory: Callable[[], Awaitable[T]]) -> T:
        try:
            return await factory()
        finally:
            if self._pending.get(key) is asyncio.current_task():
                del self._pending[key]

    def is_pending(self, key: str) -> bool:
        return key in self._pending

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def clear(self) -> None:
        """Forget registrations; tasks already running keep running for their waiters."""
        self._pending.clear()
