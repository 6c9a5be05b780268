"""Background visit counting.

Redirects hand the code to ``VisitRecorder.record()`` and return at once.
Worker tasks owned by the recorder, not by the request, apply the
increments, so a client that has already followed its redirect cannot
cancel or fail the count.
"""

import asyncio
import logging
from typing import List, Optional

from .errors import NotFoundError, ShortLinkError
from .service import ShortLinkService


class VisitRecorder:
    """Queue of pending visit increments drained by worker tasks."""

    def __init__(
        self,
        service: ShortLinkService,
        logger: Optional[logging.Logger] = None,
        workers: int = 2,
        drain_timeout_seconds: float = 5.0,
        max_pending: int = 10000,
    ):
        """Initialize the recorder.

        Args:
            service: Service whose ``increment_visits`` applies each visit
            logger: Optional logger
            workers: Number of concurrent worker tasks
            drain_timeout_seconds: How long ``stop()`` waits for queued visits
            max_pending: Queue capacity; visits beyond it are dropped
        """
        if workers < 1:
            raise ValueError("workers must be at least 1")
        if max_pending < 1:
            raise ValueError("max_pending must be at least 1")
        self.service = service
        self.logger = logger or logging.getLogger(__name__)
        self.worker_count = workers
        self.drain_timeout_seconds = drain_timeout_seconds
        self.max_pending = max_pending

        self._queue: Optional[asyncio.Queue] = None
        self._workers: List[asyncio.Task] = []
        self._accepting = False

    @property
    def running(self) -> bool:
        return bool(self._workers)

    @property
    def pending(self) -> int:
        """Visits queued or in progress."""
        return self._queue.qsize() if self._queue else 0

    def start(self) -> None:
        """Spawn the worker tasks. Must be called from a running event loop."""
        if self._workers:
            return
        self._queue = asyncio.Queue(maxsize=self.max_pending)
        self._accepting = True
        self._workers = [
            asyncio.create_task(self._worker(i), name=f"visit-recorder-{i}")
            for i in range(self.worker_count)
        ]
        self.logger.info(f"Visit recorder started with {self.worker_count} workers")

    def record(self, short_code: str) -> bool:
        """Queue one visit without waiting for it.

        Returns:
            False if the visit was dropped (recorder not running or queue full)
        """
        if not self._accepting or self._queue is None:
            self.logger.warning(f"Visit recorder not running, dropped visit for {short_code}")
            return False
        try:
            self._queue.put_nowait(short_code)
        except asyncio.QueueFull:
            self.logger.warning(f"Visit queue full ({self.max_pending}), dropped visit for {short_code}")
            return False
        return True

    async def join(self) -> None:
        """Wait until every queued visit has been applied."""
        if self._queue is not None:
            await self._queue.join()

    async def _worker(self, index: int) -> None:
        while True:
            short_code = await self._queue.get()
            try:
                await self.service.increment_visits(short_code)
            except NotFoundError:
                # Swept between the redirect and the increment
                self.logger.debug(f"Visit for unknown short code {short_code} ignored")
            except ShortLinkError as e:
                self.logger.error(f"Failed to increment visits for {short_code}: {e}")
            except Exception:
                self.logger.exception(f"Unexpected error incrementing visits for {short_code}")
            finally:
                self._queue.task_done()

    async def stop(self) -> None:
        """Stop accepting visits, drain the queue, and wait for the workers to exit."""
        self._accepting = False
        if not self._workers:
            return

        try:
            await asyncio.wait_for(self._queue.join(), timeout=self.drain_timeout_seconds)
        except asyncio.TimeoutError:
            self.logger.warning(f"Visit recorder stopped with {self.pending} visits unapplied")

        for task in self._workers:
            task.cancel()
        await asyncio.gather(*self._workers, return_exceptions=True)
        self._workers = []
        self.logger.info("Visit recorder stopped")
