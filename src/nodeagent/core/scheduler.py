import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, Coroutine, Dict, List, Optional

from ..models.status import JobStatus
from ..utils.date_utils import parse_duration

logger = logging.getLogger(__name__)


class Scheduler:
    """
    Manages the scheduling and execution of periodic async tasks using asyncio.

    Each job runs on a fixed-rate timer. A tick is awaited inline by the job's
    loop, so two ticks of the same job never overlap; ticks that come due while
    one is still running are dropped rather than queued.
    """

    def __init__(self):
        self.tasks: List[asyncio.Task] = []
        self.statuses: Dict[str, JobStatus] = {}
        self._stopping = False
        logger.info("AsyncScheduler initialized.")

    async def _run_job(self, job_func: Callable[[], Coroutine], status: JobStatus):
        status.in_flight = True
        status.last_started_at = datetime.now(timezone.utc)
        try:
            await job_func()
        except Exception as e:
            status.failures += 1
            status.last_error = str(e)
            logger.error(f"Error in scheduled job '{status.name}': {e}", exc_info=True)
        else:
            status.last_success_at = datetime.now(timezone.utc)
            status.last_error = None
        finally:
            status.in_flight = False
            status.runs += 1
            status.last_finished_at = datetime.now(timezone.utc)

    async def _run_periodically(
        self, interval_seconds: float, job_func: Callable[[], Coroutine], status: JobStatus, run_immediately: bool
    ):
        """Internal loop to run a job periodically."""
        loop = asyncio.get_running_loop()
        next_run = loop.time() + (0 if run_immediately else interval_seconds)
        try:
            while not self._stopping:
                delay = next_run - loop.time()
                if delay > 0:
                    await asyncio.sleep(delay)
                if self._stopping:
                    break

                await self._run_job(job_func, status)

                next_run += interval_seconds
                now = loop.time()
                if now > next_run:
                    missed = int((now - next_run) // interval_seconds) + 1
                    status.skipped_ticks += missed
                    next_run += missed * interval_seconds
                    logger.warning(
                        f"Job '{status.name}' overran its {interval_seconds}s interval, skipped {missed} tick(s)."
                    )
        except asyncio.CancelledError:
            logger.info(f"Job '{status.name}' cancelled.")
            raise

    def add_job(
        self,
        job_func: Callable[[], Coroutine],
        interval_hours: int = 0,
        interval_minutes: int = 0,
        interval_seconds: float = 0,
        name: Optional[str] = None,
        run_immediately: bool = False,
    ) -> Optional[JobStatus]:
        """
        Adds a new async job to the schedule. The first tick fires one
        interval after scheduling unless ``run_immediately`` is set.
        """
        name = name or job_func.__name__
        if interval_hours > 0:
            interval_seconds = interval_hours * 3600
        elif interval_minutes > 0:
            interval_seconds = interval_minutes * 60

        if interval_seconds <= 0:
            logger.warning(f"Job '{name}' has no positive interval; not scheduled.")
            return None

        status = JobStatus(name=name, interval_seconds=interval_seconds)
        self.statuses[name] = status
        task = asyncio.create_task(self._run_periodically(interval_seconds, job_func, status, run_immediately))
        self.tasks.append(task)
        logger.info(f"Scheduled job '{name}' to run every {interval_seconds} second(s).")
        return status

    def add_job_from_string(
        self, job_func: Callable[[], Coroutine], interval_str: str, name: Optional[str] = None, **kwargs
    ) -> Optional[JobStatus]:
        """
        Adds a job based on a duration string like '10s', '5m' or '1h'.
        """
        interval = parse_duration(interval_str)
        return self.add_job(job_func, interval_seconds=interval.total_seconds(), name=name, **kwargs)

    def get_status(self) -> List[JobStatus]:
        """Snapshots of the status of every scheduled job."""
        return [status.model_copy() for status in self.statuses.values()]

    async def stop(self):
        """Cancels all scheduled tasks. No tick starts after this is called."""
        logger.info("Stopping scheduler...")
        self._stopping = True
        for task in self.tasks:
            task.cancel()
        if self.tasks:
            await asyncio.gather(*self.tasks, return_exceptions=True)
        self.tasks.clear()
