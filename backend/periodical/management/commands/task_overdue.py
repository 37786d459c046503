"""Management command for cron health checks: fails when a task is overdue."""

from __future__ import annotations

from datetime import datetime

from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from periodical import interval, overdue
from periodical.errors import TaskNotFoundError


class Command(BaseCommand):
    help = "Exit non-zero when a task last ran more than two intervals before --since"

    def add_arguments(self, parser) -> None:
        parser.add_argument("task_name", type=str, help="Name of the task to check")
        parser.add_argument(
            "--since",
            required=True,
            help="ISO-8601 time the task was last observed running",
        )

    def handle(self, *args, **options) -> None:
        task_name = options["task_name"]

        try:
            since = datetime.fromisoformat(options["since"])
        except ValueError as e:
            raise CommandError(f"Invalid --since value: {options['since']!r}") from e
        if timezone.is_naive(since):
            since = timezone.make_aware(since)

        try:
            is_overdue = overdue(task_name, since)
            task_interval = interval(task_name)
        except TaskNotFoundError as e:
            raise CommandError(str(e)) from e

        if task_interval is False:
            self.stdout.write(self.style.WARNING(f"Task {task_name} is inactive"))

        if is_overdue:
            raise CommandError(f"Task {task_name} is overdue (last seen {since.isoformat()})")

        self.stdout.write(self.style.SUCCESS(f"Task {task_name} is on schedule"))
