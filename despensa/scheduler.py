"""Scheduled expiry sweeps for a long-running tracker."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from .config import TrackerConfig
    from .tracker import FoodTracker

logger = logging.getLogger(__name__)


class ExpirySweepScheduler:
    """Runs the tracker's expiry sweep on a cron schedule.

    Uses APScheduler's asyncio scheduler so the sweep executes on the same
    event loop as every other tracker mutation.
    """

    def __init__(
        self,
        tracker: FoodTracker,
        config: TrackerConfig,
        on_swept: Callable[[FoodTracker], None] | None = None,
    ) -> None:
        """Initialize scheduler.

        Args:
            tracker: The tracker whose inventory is swept.
            config: TrackerConfig instance.
            on_swept: Called after a sweep that expired something, e.g. to
                persist the new state.

        Raises:
            ImportError: If apscheduler is not installed.
        """
        try:
            from apscheduler.schedulers.asyncio import AsyncIOScheduler
            from apscheduler.triggers.cron import CronTrigger
        except ImportError:
            raise ImportError(
                "apscheduler é necessário: pip install 'despensa[scheduler]'"
            )

        self._tracker = tracker
        self._config = config
        self._on_swept = on_swept
        self._scheduler = AsyncIOScheduler()
        self._CronTrigger = CronTrigger
        self._running = False

    def setup_jobs(self) -> None:
        """Register the sweep job based on config."""
        schedule = self._config.scheduler.sweep_schedule
        self._scheduler.add_job(
            self._job_sweep,
            trigger=self._parse_cron(schedule),
            id="sweep_expired",
            name="Verificação de vencidos",
            replace_existing=True,
        )
        logger.info("Sweep job registered: %s", schedule)

    def start(self) -> None:
        self.setup_jobs()
        self._scheduler.start()
        self._running = True
        logger.info("Scheduler started")

    def stop(self) -> None:
        if self._running:
            self._scheduler.shutdown(wait=False)
            self._running = False
            logger.info("Scheduler stopped")

    @property
    def running(self) -> bool:
        return self._running

    def get_jobs(self) -> list[dict]:
        """Return info about scheduled jobs."""
        jobs = []
        for job in self._scheduler.get_jobs():
            next_run = getattr(job, "next_run_time", None)
            jobs.append({
                "id": job.id,
                "name": job.name,
                "next_run": str(next_run) if next_run else None,
            })
        return jobs

    def _parse_cron(self, expr: str):
        """Parse a cron expression into a CronTrigger."""
        parts = expr.split()
        if len(parts) == 5:
            return self._CronTrigger(
                minute=parts[0],
                hour=parts[1],
                day=parts[2],
                month=parts[3],
                day_of_week=parts[4],
            )
        raise ValueError(f"Expressão cron inválida: {expr}")

    async def _job_sweep(self) -> None:
        try:
            expired = self._tracker.sweep()
            if expired:
                logger.info("Expired %d item(s)", len(expired))
                if self._on_swept is not None:
                    self._on_swept(self._tracker)
        except Exception:
            logger.exception("Expiry sweep job failed")
