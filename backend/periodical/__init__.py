"""In-process periodic task scheduler.

Registers named recurring tasks and runs them on fixed-delay timers inside
the Django process, or once on demand for cron-style setups.

Usage (in any installed app's ``tasks.py``):
    from periodical import register

    @register("stop_expired_deploys", "Stops deploys past their deadline", execution_interval=300)
    def stop_expired_deploys() -> None:
        ...

Activate tasks with ``active=True`` or through the environment:

    PERIODICAL="stop_expired_deploys,report_usage:3600"

Cron-style execution:

    python manage.py run_task stop_expired_deploys
"""

from .conf import TASK_DEFAULTS, TaskConfig
from .errors import ConfigurationError, TaskNotFoundError, TaskTimeoutError
from .invoker import run_once
from .liveness import interval, overdue
from .registry import TaskRegistry, default_registry, get_task, get_tasks, register
from .runner import PeriodicalRunner, TimerTask, get_scheduler_status, start_scheduler, stop_scheduler

__all__ = [
    # Configuration
    "TASK_DEFAULTS",
    "TaskConfig",
    # Registration
    "register",
    "TaskRegistry",
    "default_registry",
    "get_tasks",
    "get_task",
    # Execution
    "PeriodicalRunner",
    "TimerTask",
    "start_scheduler",
    "stop_scheduler",
    "get_scheduler_status",
    "run_once",
    # Liveness
    "overdue",
    "interval",
    # Errors
    "ConfigurationError",
    "TaskNotFoundError",
    "TaskTimeoutError",
]
