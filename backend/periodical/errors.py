from __future__ import annotations

from config.domain_exceptions import ConfigurationError, NotFoundError, OperationTimeoutError

__all__ = [
    "ConfigurationError",
    "TaskNotFoundError",
    "TaskTimeoutError",
]


class TaskNotFoundError(NotFoundError, KeyError):
    """Lookup of a task name that was never registered."""

    def __init__(self, task_name: str):
        self.task_name = task_name
        super().__init__(f"Task '{task_name}' is not registered.")

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message.
        return str(self.args[0]) if self.args else ""


class TaskTimeoutError(OperationTimeoutError, TimeoutError):
    """A single execution exceeded its timeout_interval."""

    def __init__(self, task_name: str, timeout_seconds: float):
        self.task_name = task_name
        self.timeout_seconds = timeout_seconds
        super().__init__(f"Task '{task_name}' timed out after {timeout_seconds}s")
