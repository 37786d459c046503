"""Single-shot, synchronous task execution for cron-style triggers.

Run from a system cron as ``python manage.py run_task stop_expired_deploys``;
the command exits non-zero when the task fails or times out.
"""

from __future__ import annotations

from typing import Any

from .errors import TaskTimeoutError
from .execution import Execution
from .outcomes import Outcome, OutcomeStatus
from .registry import TaskRegistry, default_registry
from .reporting import ExceptionReporter


def run_once(name: str, *, registry: TaskRegistry | None = None) -> Any:
    """
    Execute one task now, bounded by its timeout_interval.

    Failures (including TaskTimeoutError) are reported and re-raised so the
    calling process can signal them outward. Unknown names raise
    TaskNotFoundError without being reported.
    """
    registry = registry if registry is not None else default_registry
    config = registry.get(name)

    try:
        return Execution(name, config.work).start().wait(config.timeout_interval)
    except BaseException as exc:
        ExceptionReporter(name).update(
            Outcome(
                task_name=name,
                status=OutcomeStatus.TIMEOUT if isinstance(exc, TaskTimeoutError) else OutcomeStatus.FAILURE,
                exception=exc,
            )
        )
        raise
