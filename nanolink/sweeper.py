"""Periodic deletion of old links."""

import asyncio
import logging
from datetime import timedelta
from typing import Optional

from .database.base import ShortLinkStoreBase
from .errors import ShortLinkError


class RetentionSweeper:
    """Background task deleting links older than ``max_age`` every ``interval_seconds``.

    Each sweep is bounded by ``timeout_seconds``; a failed sweep is logged and
    the next one still runs. ``stop()`` interrupts an in-flight sweep and
    returns only after the background task has exited.
    """

    def __init__(
        self,
        store: ShortLinkStoreBase,
        interval_seconds: float = 24 * 60 * 60,
        max_age: timedelta = timedelta(days=30),
        timeout_seconds: float = 60.0,
        logger: Optional[logging.Logger] = None,
    ):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        if max_age <= timedelta(0):
            raise ValueError("max_age must be positive")
        self.store = store
        self.interval_seconds = interval_seconds
        self.max_age = max_age
        self.timeout_seconds = timeout_seconds
        self.logger = logger or logging.getLogger(__name__)

        self.last_deleted: Optional[int] = None
        self._task: Optional[asyncio.Task] = None
        self._stop_event: Optional[asyncio.Event] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start the timer. Must be called from a running event loop."""
        if self.running:
            return
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self._run_loop(), name="retention-sweeper")
        self.logger.info(
            f"Retention sweeper started (interval={self.interval_seconds}s, max_age={self.max_age})"
        )

    async def run_once(self) -> Optional[int]:
        """Run one sweep now.

        Returns:
            Number of links deleted, or None if the sweep failed
        """
        try:
            deleted = await asyncio.wait_for(
                self.store.delete_older_than(self.max_age, timeout=self.timeout_seconds),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            self.logger.error(f"Retention sweep timed out after {self.timeout_seconds}s")
            return None
        except ShortLinkError as e:
            self.logger.error(f"Retention sweep failed: {e}")
            return None
        except Exception:
            self.logger.exception("Retention sweep failed unexpectedly")
            return None

        self.last_deleted = deleted
        self.logger.info(f"Retention sweep completed: deleted {deleted} links")
        return deleted

    async def _run_loop(self) -> None:
        while not self._stop_event.is_set():
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval_seconds)
            except asyncio.TimeoutError:
                await self.run_once()

    async def stop(self) -> None:
        """Cancel the timer and any in-flight sweep, then wait for the task to finish."""
        if self._task is None:
            return

        self._stop_event.set()
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        except Exception:
            self.logger.exception("Retention sweeper task ended with an error")
        self._task = None
        self.logger.info("Retention sweeper stopped")
