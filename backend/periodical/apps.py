"""Django app configuration for periodical tasks."""

from __future__ import annotations

import os
import sys

from django.apps import AppConfig
from django.conf import settings
from django.utils.module_loading import autodiscover_modules


def _should_start() -> bool:
    """Determine if the recurring runner should start in this process."""
    if not getattr(settings, "PERIODICAL_ENABLED", True):
        return False

    # Don't start during testing
    if getattr(settings, "IS_TESTING", False):
        return False

    # Server binaries commonly pass flags as argv[1] (e.g. `daphne -b ...`), so
    # argv[1] must not be read as a Django management command for them.
    argv0 = os.path.basename(sys.argv[0] or "")
    if any(server in argv0 for server in ("gunicorn", "uvicorn", "daphne")):
        return True

    # Management commands (migrate, shell, run_task, ...) never start the runner;
    # only the development server runs tasks in-process.
    if len(sys.argv) > 1:
        return sys.argv[1] == "runserver"

    return False


class PeriodicalConfig(AppConfig):
    """Django app configuration for the periodical task runner."""

    name = "periodical"
    verbose_name = "Periodical Tasks"

    def ready(self) -> None:
        """Register every app's tasks, then start the runner when serving."""
        from .conf import env_overrides

        # A malformed PERIODICAL aborts startup here.
        env_overrides()

        # Registration happens in every process so run_task and the liveness
        # API see the same tasks.
        autodiscover_modules("tasks")

        if _should_start():
            from .runner import start_scheduler

            start_scheduler()
