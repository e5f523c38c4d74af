"""Background snapshot writer."""

import asyncio
import logging
from typing import Any

from xiaoniu.domain.repositories import SnapshotKind, SnapshotRepository

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_SIZE = 256


class SnapshotWriter:
    """Single persistence worker for one entity type.

    Stores hand over full snapshots with ``schedule`` and move on; the
    worker writes them to the repository in order. The queue is bounded, so
    a slow backend applies backpressure to writers instead of piling up
    unbounded tasks. ``flush`` waits until every scheduled snapshot has been
    written (or has failed and been logged).
    """

    def __init__(
        self,
        repository: SnapshotRepository,
        kind: SnapshotKind,
        max_pending: int = DEFAULT_QUEUE_SIZE,
    ) -> None:
        """Initialize the writer.

        Args:
            repository: Backend that receives the snapshots.
            kind: Entity type handled by this writer.
            max_pending: Queue capacity.
        """
        self._repository = repository
        self._kind = kind
        self._queue: asyncio.Queue[tuple[int, dict[str, Any]]] = asyncio.Queue(
            maxsize=max_pending
        )
        self._task: asyncio.Task[None] | None = None
        self._stop_event = asyncio.Event()
        self._stop_event.set()  # Initially stopped
        self._failures = 0
        self._busy = False

    @property
    def kind(self) -> SnapshotKind:
        return self._kind

    @property
    def pending(self) -> int:
        """Number of snapshots not yet written."""
        return self._queue.qsize()

    @property
    def failures(self) -> int:
        """Number of snapshots that failed to write since start."""
        return self._failures

    @property
    def is_running(self) -> bool:
        """Check if the worker is running."""
        return not self._stop_event.is_set()

    async def schedule(self, key: int, snapshot: dict[str, Any]) -> None:
        """Queue a snapshot for writing.

        Blocks only while the queue is full.

        Args:
            key: Entity key.
            snapshot: Full snapshot of the entity.
        """
        await self._queue.put((key, snapshot))
        logger.debug("Scheduled %s snapshot: key=%s", self._kind.value, key)

    async def flush(self) -> None:
        """Wait until every scheduled snapshot has been processed."""
        await self._queue.join()

    def start(self) -> None:
        """Start the worker task."""
        if self.is_running:
            logger.warning("SnapshotWriter(%s) already running", self._kind.value)
            return
        self._stop_event.clear()
        self._task = asyncio.create_task(
            self._run(), name=f"snapshot-writer-{self._kind.value}"
        )

    async def stop(self) -> None:
        """Stop the worker after the snapshot it is currently writing.

        Call ``flush`` first to write everything still queued.
        """
        logger.info("Stopping SnapshotWriter(%s)", self._kind.value)
        self._stop_event.set()
        if self._task is not None:
            if not self._busy:
                # Idle: no need to wait for the poll timeout
                self._task.cancel()
            await asyncio.gather(self._task, return_exceptions=True)
            self._task = None

    async def _run(self) -> None:
        logger.info("SnapshotWriter(%s) started", self._kind.value)

        while not self._stop_event.is_set():
            try:
                # Use a timeout to periodically check stop_event
                try:
                    key, snapshot = await asyncio.wait_for(
                        self._queue.get(), timeout=1.0
                    )
                except asyncio.TimeoutError:
                    continue

                self._busy = True
                try:
                    await self._repository.save(self._kind, key, snapshot)
                    logger.debug("Wrote %s snapshot: key=%s", self._kind.value, key)
                except Exception:
                    self._failures += 1
                    logger.exception(
                        "Failed to write %s snapshot: key=%s", self._kind.value, key
                    )
                finally:
                    self._busy = False
                    self._queue.task_done()

            except asyncio.CancelledError:
                break

        logger.info("SnapshotWriter(%s) stopped", self._kind.value)
