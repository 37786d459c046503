"""Management command to show when active tasks would first run."""

from __future__ import annotations

import time
from datetime import timedelta

from django.core.management.base import BaseCommand
from django.utils import timezone

from periodical import get_tasks
from periodical.runner import first_run_delay

from ._formatting import format_duration, format_interval


class Command(BaseCommand):
    """Show the first execution time of each active task if the runner started now."""

    help = "Show the first execution time of each active task if the runner started now"

    def handle(self, *args, **options) -> None:
        tasks = get_tasks()

        if not tasks:
            self.stdout.write(self.style.WARNING("No tasks registered."))
            return

        now = timezone.now()
        now_ts = time.time()
        self.stdout.write(f"Current time: {now.isoformat()}")
        self.stdout.write("")
        self.stdout.write(self.style.SUCCESS("First runs after start:"))
        self.stdout.write("")

        task_runs = []
        for name, config in tasks.items():
            if not config.active:
                continue
            delay = first_run_delay(config, now_ts)
            task_runs.append((delay, name, config))

        task_runs.sort(key=lambda x: (x[0], x[1]))

        for delay, name, config in task_runs:
            first_run = now + timedelta(seconds=delay)
            when = "immediately" if delay <= 0 else f"in {format_duration(delay)}"
            self.stdout.write(f"  {name}")
            self.stdout.write(f"    First run: {first_run.isoformat()} ({when})")
            self.stdout.write(f"    Then:      every {format_interval(config.execution_interval)} after each run")
            self.stdout.write("")

        inactive = [name for name, config in tasks.items() if not config.active]
        if inactive:
            self.stdout.write(self.style.WARNING("Inactive tasks:"))
            for name in sorted(inactive):
                self.stdout.write(f"  {name}")
