"""Failure reporting shared by the recurring runner and run_once."""

from __future__ import annotations

import logging
import traceback
from datetime import datetime

from .outcomes import Outcome
from .signals import task_failed

logger = logging.getLogger(__name__)


def report_failure(task_name: str, timestamp: datetime | None, exception: BaseException | None) -> None:
    """
    Log a failed execution and forward it to error tracking.

    Best-effort: never raises, whatever the logging handlers or the
    ``task_failed`` receivers do.
    """
    if exception is None:
        return

    try:
        error_traceback = "".join(traceback.format_exception(exception))
        when = timestamp.isoformat() if timestamp else None
        logger.error(
            "(%s) Periodical %s failed with error %s",
            when,
            task_name,
            exception,
            exc_info=exception,
            extra={
                "task_name": task_name,
                "task_timestamp": when,
                "error_message": str(exception),
                "error_traceback": error_traceback,
            },
        )

        responses = task_failed.send_robust(
            sender=ExceptionReporter,
            task_name=task_name,
            timestamp=timestamp,
            exception=exception,
            traceback=error_traceback,
            error_message=f"Periodical {task_name} failed",
        )
        for receiver, response in responses:
            if isinstance(response, Exception):
                logger.warning("task_failed receiver %r raised: %s", receiver, response)
    except Exception:
        return


class ExceptionReporter:
    """Observer attached to every execution path of one task."""

    def __init__(self, task_name: str):
        self.task_name = task_name

    def update(self, outcome: Outcome) -> None:
        report_failure(self.task_name, outcome.finished_at, outcome.exception)

    def __repr__(self) -> str:
        return f"ExceptionReporter({self.task_name!r})"
