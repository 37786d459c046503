"""Recurring, self-timing execution of the active registered tasks."""

from __future__ import annotations

import logging
import threading
import time
from datetime import datetime, timedelta
from typing import Callable

from django.utils import timezone

from .conf import TaskConfig
from .errors import TaskTimeoutError
from .execution import Execution
from .outcomes import Outcome, OutcomeStatus
from .registry import TaskRegistry, default_registry
from .reporting import ExceptionReporter
from .resources import ResourceScope, connection_scope

logger = logging.getLogger(__name__)

_lock = threading.Lock()  # Protect the process runner
_runner: PeriodicalRunner | None = None

ObserverFactory = Callable[[str], ExceptionReporter]


def first_run_delay(config: TaskConfig, now: float) -> float:
    """
    Seconds from ``now`` (epoch seconds) until the first execution of a task.

    With consistent_start_time the first run lands on a multiple of
    execution_interval counted from the epoch, so an hourly task fires at the
    top of the hour.
    """
    delay: float = 0
    interval = config.execution_interval
    if config.consistent_start_time:
        delay = interval - (int(now) % interval)
    if not config.run_immediately_on_start:
        delay += interval
    return delay


class TimerTask:
    """
    Handle of one active task.

    Fixed-delay scheduling: after an execution settles (success, exception or
    timeout) a new single-shot timer is armed for execution_interval seconds
    later. Executions of the same task never overlap.
    """

    def __init__(
        self,
        config: TaskConfig,
        *,
        observer: ExceptionReporter,
        resource_scope: ResourceScope | None = connection_scope,
    ):
        self.config = config
        self._observer = observer
        self._resource_scope = resource_scope
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._execution: Execution | None = None
        self._stopped = False
        self._next_run_at: datetime | None = None
        self._executions = 0
        self._last_outcome: Outcome | None = None

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def stopped(self) -> bool:
        with self._lock:
            return self._stopped

    def execute(self, delay: float | None = None) -> TimerTask:
        """Arm the first execution; ``delay`` defaults to first_run_delay() from now."""
        if delay is None:
            delay = first_run_delay(self.config, time.time())
        self._arm(delay)
        return self

    def stop(self) -> None:
        """Cancel future executions. A run already in progress is left to finish."""
        with self._lock:
            self._stopped = True
            timer = self._timer
            self._timer = None
            self._next_run_at = None
        if timer is not None:
            timer.cancel()
        logger.info("Task %s stopped", self.name)

    def _arm(self, delay: float) -> None:
        delay = max(0, delay)
        with self._lock:
            if self._stopped:
                return
            timer = threading.Timer(delay, self._fire)
            timer.name = f"periodical-timer-{self.name}"
            timer.daemon = True
            self._timer = timer
            next_run = timezone.now() + timedelta(seconds=delay)
            self._next_run_at = next_run
            timer.start()

        logger.info(
            "Task %s scheduled for %s (in %.0fs)",
            self.name,
            next_run.isoformat(),
            delay,
        )

    def _fire(self) -> None:
        try:
            outcome = self.run_execution()
            self._observer.update(outcome)
        except Exception:
            logger.exception("Task %s execution bookkeeping failed", self.name)
        finally:
            self._arm(self.config.execution_interval)

    def run_execution(self) -> Outcome:
        """Run the work unit once under timeout_interval and return the outcome."""
        with self._lock:
            previous = self._execution
        if previous is not None and previous.running:
            logger.warning("Task %s still running, skipping this execution", self.name)
            outcome = Outcome(task_name=self.name, status=OutcomeStatus.SKIPPED, finished_at=timezone.now())
            with self._lock:
                self._last_outcome = outcome
            return outcome

        execution = Execution(self.name, self.config.work, resource_scope=self._resource_scope)
        with self._lock:
            self._execution = execution
            self._executions += 1

        started_at = timezone.now()
        start_time = time.monotonic()
        logger.info("Task %s starting", self.name)
        execution.start()

        result = None
        exception: BaseException | None = None
        try:
            result = execution.wait(self.config.timeout_interval)
            status = OutcomeStatus.SUCCESS
        except TaskTimeoutError as exc:
            status = OutcomeStatus.TIMEOUT
            exception = exc
        except BaseException as exc:
            status = OutcomeStatus.FAILURE
            exception = exc

        duration = time.monotonic() - start_time
        if status == OutcomeStatus.SUCCESS:
            logger.info("Task %s completed in %.2fs", self.name, duration)
        elif status == OutcomeStatus.TIMEOUT:
            logger.warning("Task %s timed out after %.2fs", self.name, duration)
        else:
            logger.warning("Task %s failed after %.2fs: %s", self.name, duration, exception)

        outcome = Outcome(
            task_name=self.name,
            status=status,
            started_at=started_at,
            finished_at=timezone.now(),
            duration_seconds=round(duration, 6),
            exception=exception,
            result=result,
        )
        with self._lock:
            self._last_outcome = outcome
        return outcome

    def status(self) -> dict[str, object]:
        with self._lock:
            last = self._last_outcome
            next_run_at = self._next_run_at
            return {
                "stopped": self._stopped,
                "next_run_at": next_run_at.isoformat() if next_run_at else None,
                "currently_running": self._execution is not None and self._execution.running,
                "executions": self._executions,
                "last_status": last.status.value if last else None,
                "last_started_at": last.started_at.isoformat() if last and last.started_at else None,
                "last_finished_at": last.finished_at.isoformat() if last and last.finished_at else None,
                "last_duration_seconds": last.duration_seconds if last else None,
                "last_error": str(last.exception) if last and last.exception else None,
            }

    def __repr__(self) -> str:
        return f"<TimerTask {self.name} every {self.config.execution_interval}s>"


class PeriodicalRunner:
    """Starts one TimerTask per active task of a registry."""

    def __init__(
        self,
        registry: TaskRegistry | None = None,
        *,
        resource_scope: ResourceScope | None = connection_scope,
        observer_factory: ObserverFactory = ExceptionReporter,
    ):
        self.registry = registry if registry is not None else default_registry
        self._resource_scope = resource_scope
        self._observer_factory = observer_factory
        self._handles: list[TimerTask] = []

    @property
    def handles(self) -> list[TimerTask]:
        return list(self._handles)

    def run(self) -> list[TimerTask]:
        """Start every active task and return the live handles."""
        handles: list[TimerTask] = []
        for name, config in self.registry.all():
            if not config.active:
                continue
            handle = TimerTask(
                config,
                observer=self._observer_factory(name),
                resource_scope=self._resource_scope,
            )
            handle.execute()
            handles.append(handle)
            logger.info("Started periodical task: %s", name)
        self._handles.extend(handles)
        return handles

    def stop(self) -> None:
        for handle in self._handles:
            handle.stop()


def start_scheduler() -> list[TimerTask]:
    """Start the process runner over the default registry (idempotent)."""
    global _runner

    with _lock:
        if _runner is not None:
            return _runner.handles
        _runner = PeriodicalRunner()
        handles = _runner.run()

    logger.info("Periodical runner started with %d active task(s)", len(handles))
    return handles


def stop_scheduler() -> None:
    """Stop the process runner, if any."""
    global _runner

    with _lock:
        runner = _runner
        _runner = None
    if runner is not None:
        runner.stop()
        logger.info("Periodical runner stopped")


def get_scheduler_status() -> dict:
    """Return runner health for monitoring endpoints."""
    with _lock:
        runner = _runner
    handles = {handle.name: handle for handle in runner.handles} if runner is not None else {}
    registry = runner.registry if runner is not None else default_registry
    return {
        "running": runner is not None,
        "tasks": {
            name: {
                "active": config.active,
                "scheduled": name in handles,
                "runtime": handles[name].status() if name in handles else None,
            }
            for name, config in sorted(registry.all())
        },
    }
