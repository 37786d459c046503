from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from django.db import models


class OutcomeStatus(models.TextChoices):
    SUCCESS = "success", "Success"
    FAILURE = "failure", "Failure"
    TIMEOUT = "timeout", "Timeout"
    SKIPPED = "skipped", "Skipped"


@dataclass(frozen=True)
class Outcome:
    """Result of one execution of a task, handed to the task's observer."""

    task_name: str
    status: OutcomeStatus
    started_at: datetime | None = None
    finished_at: datetime | None = None
    duration_seconds: float | None = None
    exception: BaseException | None = None
    result: Any = None
