"""Management command to list registered periodical tasks."""

from __future__ import annotations

from django.core.management.base import BaseCommand

from periodical import get_tasks

from ._formatting import format_interval


class Command(BaseCommand):
    """List all registered periodical tasks."""

    help = "List all registered periodical tasks"

    def handle(self, *args, **options) -> None:
        tasks = get_tasks()

        if not tasks:
            self.stdout.write(self.style.WARNING("No tasks registered."))
            return

        self.stdout.write(self.style.SUCCESS(f"Registered tasks ({len(tasks)}):"))
        self.stdout.write("")

        for name, config in sorted(tasks.items()):
            status = self.style.SUCCESS("active") if config.active else self.style.ERROR("inactive")
            work = config.work
            work_name = f"{getattr(work, '__module__', '?')}.{getattr(work, '__qualname__', repr(work))}"

            self.stdout.write(f"  {name}")
            if config.description:
                self.stdout.write(f"    About:    {config.description}")
            self.stdout.write(f"    Interval: every {format_interval(config.execution_interval)}")
            self.stdout.write(f"    Timeout:  {format_interval(config.timeout_interval)}")
            self.stdout.write(f"    Status:   {status}")
            if config.consistent_start_time:
                self.stdout.write("    Aligned:  yes")
            if not config.run_immediately_on_start:
                self.stdout.write("    Waits one interval before the first run")
            self.stdout.write(f"    Function: {work_name}")
            self.stdout.write("")
