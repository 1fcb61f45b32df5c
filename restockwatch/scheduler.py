# restockwatch/scheduler.py
# Fixed-interval runner around a no-argument job (PageWatcher.run_once).
# The watcher itself owns no timer; all scheduling policy lives here.

from __future__ import annotations
import signal
from datetime import datetime
from typing import Callable, Optional

from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_MISSED, JobExecutionEvent
from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.interval import IntervalTrigger

from .utils.log import get_logger

logger = get_logger("restockwatch.scheduler")

JOB_ID = "restockwatch-poll"


def build_scheduler(job: Callable[[], None], interval_seconds: int, start_now: bool = True) -> BlockingScheduler:
    """Register ``job`` on a BlockingScheduler without starting it.

    One instance at a time; a run that overlaps the next tick is skipped and
    missed ticks coalesce into a single run.
    """
    scheduler = BlockingScheduler()
    kw = {}
    if start_now:
        # next_run_time=None would pause the job, so only pass it to fire immediately
        kw["next_run_time"] = datetime.now(scheduler.timezone)
    scheduler.add_job(
        job,
        trigger=IntervalTrigger(seconds=interval_seconds),
        id=JOB_ID,
        max_instances=1,
        coalesce=True,
        **kw,
    )

    def _on_event(event: JobExecutionEvent) -> None:
        if event.code == EVENT_JOB_ERROR:
            logger.error("Job %s raised: %s", event.job_id, event.exception)
        else:
            logger.warning("Job %s missed its run time %s", event.job_id, event.scheduled_run_time)

    scheduler.add_listener(_on_event, EVENT_JOB_ERROR | EVENT_JOB_MISSED)
    return scheduler


def run_forever(job: Callable[[], None], interval_seconds: int, scheduler: Optional[BlockingScheduler] = None) -> None:
    """Run ``job`` every ``interval_seconds`` until SIGINT/SIGTERM."""
    scheduler = scheduler or build_scheduler(job, interval_seconds)

    def _stop(signum, frame):
        logger.info("Received signal %s, shutting down...", signum)
        if scheduler.running:
            scheduler.shutdown(wait=False)

    signal.signal(signal.SIGTERM, _stop)
    logger.info("Polling every %ss (Ctrl+C to stop)", interval_seconds)
    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        logger.info("Interrupted, shutting down...")
        if scheduler.running:
            scheduler.shutdown(wait=False)
    logger.info("Scheduler stopped")
