"""Periodic maintenance tasks owned by the application lifespan."""

import asyncio
import datetime
import logging
from typing import Awaitable, Callable

from sqlalchemy.ext.asyncio import AsyncSession

from . import activity
from .db import async_session
from .enrollment import complete_expired_enrollments

logger = logging.getLogger(__name__)

SweepJob = Callable[[AsyncSession, datetime.datetime], Awaitable[int]]


async def run_once(name: str, job: SweepJob, now=None) -> int:
    """Run a job in its own session, returning how many rows it touched."""
    now = now or datetime.datetime.now()
    async with async_session() as session:
        count = await job(session, now)
    logger.debug("Sweep %s touched %d rows", name, count)
    return count


class Sweeper:
    """Runs each maintenance job on a fixed interval until stopped."""

    def __init__(self, interval: float, enabled: bool = True):
        self.interval = interval
        self.enabled = enabled
        self.jobs: dict[str, SweepJob] = {
            "complete-enrollments": complete_expired_enrollments,
            "purge-activity-feed": activity.purge,
        }
        self.tasks: list[asyncio.Task] = []

    @classmethod
    def from_config(cls, config) -> "Sweeper":
        """Build a sweeper from the [sweeps] configuration section."""
        interval_hours = config.getfloat("sweeps", "interval_hours", fallback=24.0)
        enabled = config.getboolean("sweeps", "enabled", fallback=True)
        return cls(interval=interval_hours * 3600, enabled=enabled)

    async def _loop(self, name: str, job: SweepJob):
        while True:
            try:
                await run_once(name, job)
            except asyncio.CancelledError:
                raise
            except Exception:  # pylint: disable=broad-exception-caught
                logger.exception("Sweep %s failed", name)
            await asyncio.sleep(self.interval)

    def start(self):
        """Schedule every job as a background task."""
        if not self.enabled:
            logger.info("Background sweeps disabled")
            return
        for name, job in self.jobs.items():
            task = asyncio.create_task(self._loop(name, job), name=f"sweep-{name}")
            self.tasks.append(task)
        logger.info("Started %d background sweeps", len(self.tasks))

    async def stop(self):
        """Cancel the background tasks and wait for them to finish."""
        for task in self.tasks:
            task.cancel()
        await asyncio.gather(*self.tasks, return_exceptions=True)
        self.tasks.clear()
