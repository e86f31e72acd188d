"""Cooperative periodic scheduler over a pluggable clock.

Nothing here spawns threads: callers drive the scheduler by calling
``run_pending()`` (or ``run_for``), and every due job runs
to completion on the caller's thread before the next one starts.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


class MonotonicClock:
    """Wall-clock time source for live sessions."""

    def now(self) -> float:
        return time.monotonic()

    def sleep(self, seconds: float) -> None:
        time.sleep(seconds)


class ManualClock:
    """Clock that only moves when told to (tests, offline simulation)."""

    def __init__(self, start: float = 0.0):
        self._now = start

    def now(self) -> float:
        return self._now

    def advance(self, seconds: float) -> None:
        assert seconds >= 0, f"Cannot move clock backwards by {seconds}"
        self._now += seconds

    def sleep(self, seconds: float) -> None:
        self.advance(seconds)


@dataclass
class PeriodicJob:
    name: str
    interval: float
    callback: Callable[[], None]
    next_run: float
    runs: int = 0


class SimulationScheduler:
    """Runs named periodic jobs when their deadline passes."""

    def __init__(self, clock=None):
        self.clock = clock or MonotonicClock()
        self.jobs: Dict[str, PeriodicJob] = {}
        self.stopped = False

    def every(self, interval: float, name: str, callback: Callable[[], None]) -> PeriodicJob:
        """Register ``callback`` to run every ``interval`` seconds, first after one interval."""
        assert interval > 0, f"Interval for {name!r} must be positive, got {interval}"
        job = PeriodicJob(name=name, interval=interval, callback=callback,
                          next_run=self.clock.now() + interval)
        self.jobs[name] = job
        self.stopped = False
        logger.debug(f"Scheduled {name} every {interval}s")
        return job

    def next_deadline(self) -> Optional[float]:
        if not self.jobs:
            return None
        return min(job.next_run for job in self.jobs.values())

    def run_pending(self) -> int:
        """Run every job whose deadline has passed, catching up missed periods.

        Jobs fire in deadline order; jobs sharing a deadline fire in
        registration order. Returns the number of callbacks executed.
        """
        executed = 0
        now = self.clock.now()
        while not self.stopped:
            due: List[PeriodicJob] = [j for j in self.jobs.values() if j.next_run <= now]
            if not due:
                break
            job = min(due, key=lambda j: j.next_run)
            job.next_run += job.interval
            job.runs += 1
            job.callback()
            executed += 1
        return executed

    def run_for(self, seconds: float) -> int:
        """Drive the clock forward by ``seconds``, sleeping until each deadline."""
        end = self.clock.now() + seconds
        executed = 0
        while not self.stopped:
            deadline = self.next_deadline()
            if deadline is None or deadline > end:
                break
            wait = deadline - self.clock.now()
            if wait > 0:
                self.clock.sleep(wait)
            executed += self.run_pending()
        remaining = end - self.clock.now()
        if remaining > 0 and not self.stopped:
            self.clock.sleep(remaining)
        return executed

    def stop(self) -> None:
        """Cancel every job without running it."""
        self.stopped = True
        self.jobs.clear()
        logger.debug("Scheduler stopped")
