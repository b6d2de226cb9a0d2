"""Self-scheduling maintenance loops.

Each worker runs one pass at start, then sleeps a fixed interval after every
completed pass (no drift correction). An exception inside a pass is logged
and the loop carries on.
"""

import asyncio
from collections.abc import Awaitable, Callable

import structlog

from maintenance.garbage_collection import GarbageCollector
from maintenance.log_rotation import LogArchive, rotate_logs

logger = structlog.get_logger(__name__)


class PeriodicWorker:
    def __init__(self, name: str, interval: float, job: Callable[[], Awaitable]) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.name = name
        self.interval = interval
        self.job = job
        self.passes = 0
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run_once(self):
        try:
            result = await self.job()
        except Exception:
            logger.exception("Maintenance pass failed", worker=self.name)
            result = None
        self.passes += 1
        return result

    async def run(self) -> None:
        logger.info("Worker started", worker=self.name, interval=self.interval)
        while True:
            await self.run_once()
            await asyncio.sleep(self.interval)

    def start(self) -> asyncio.Task:
        if not self.running:
            self._task = asyncio.create_task(self.run(), name=f"worker-{self.name}")
        return self._task

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Worker stopped", worker=self.name)


class MaintenanceWorkers:
    """The log rotation and garbage collection loops, started and stopped together."""

    def __init__(
        self,
        archive: LogArchive,
        collector: GarbageCollector,
        rotation_interval: float,
        gc_interval: float,
    ) -> None:
        self.log_rotation = PeriodicWorker("logs", rotation_interval, lambda: rotate_logs(archive))
        self.garbage_collection = PeriodicWorker("gc", gc_interval, collector.sweep)

    @property
    def workers(self) -> list[PeriodicWorker]:
        return [self.log_rotation, self.garbage_collection]

    def select(self, name: str | None) -> list[PeriodicWorker]:
        if name is None:
            return self.workers
        selected = [worker for worker in self.workers if worker.name == name]
        if not selected:
            raise ValueError(f"Unknown worker: {name}")
        return selected

    def start(self, name: str | None = None) -> None:
        for worker in self.select(name):
            worker.start()

    async def stop(self) -> None:
        for worker in self.workers:
            await worker.stop()
