"""Management command to run a periodical task once (cron entry point)."""

from __future__ import annotations

import time

from django.core.management.base import BaseCommand, CommandError

from periodical import get_task, get_tasks, run_once
from periodical.errors import TaskNotFoundError


class Command(BaseCommand):
    """Run a periodical task once, bounded by its timeout."""

    help = "Run a periodical task once; exits non-zero if it fails or times out"

    def add_arguments(self, parser) -> None:
        parser.add_argument(
            "task_name",
            type=str,
            help="Name of the task to run",
        )

    def handle(self, *args, **options) -> None:
        task_name = options["task_name"]

        try:
            get_task(task_name)
        except TaskNotFoundError:
            available = ", ".join(sorted(get_tasks().keys()))
            raise CommandError(
                f"Task '{task_name}' not found. Available tasks: {available or 'none'}"
            ) from None

        self.stdout.write(f"Running task: {task_name}")
        start_time = time.monotonic()

        try:
            result = run_once(task_name)
        except BaseException as e:
            duration = time.monotonic() - start_time
            raise CommandError(f"Task failed after {duration:.2f}s: {e}") from e

        duration = time.monotonic() - start_time
        self.stdout.write(self.style.SUCCESS(f"Task completed in {duration:.2f}s"))
        if result is not None:
            self.stdout.write(f"Result: {result}")
