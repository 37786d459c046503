from __future__ import annotations

from datetime import datetime

from django.utils import timezone
from rest_framework import status
from rest_framework.permissions import IsAdminUser
from rest_framework.response import Response
from rest_framework.views import APIView

from config.domain_exceptions import ValidationError
from periodical import liveness
from periodical.registry import default_registry
from periodical.runner import get_scheduler_status


def _parse_since(raw: str | None) -> datetime:
    if not raw:
        raise ValidationError("Query parameter 'since' is required.")
    try:
        since = datetime.fromisoformat(raw)
    except ValueError as exc:
        raise ValidationError(f"Invalid 'since' timestamp: {raw}") from exc
    if timezone.is_naive(since):
        since = timezone.make_aware(since)
    return since


class PeriodicalStatusView(APIView):
    """GET /api/periodical/status/ - Registered tasks with config and runtime state (admin-only)."""

    permission_classes = [IsAdminUser]

    def get(self, request):
        runtime = get_scheduler_status()

        tasks = []
        for name, config in sorted(default_registry.all()):
            task_runtime = runtime["tasks"].get(name) or {}
            tasks.append(
                {
                    "task_name": name,
                    "description": config.description,
                    "active": config.active,
                    "interval": liveness.interval(name),
                    "execution_interval": config.execution_interval,
                    "timeout_interval": config.timeout_interval,
                    "run_immediately_on_start": config.run_immediately_on_start,
                    "consistent_start_time": config.consistent_start_time,
                    "scheduled": bool(task_runtime.get("scheduled")),
                    "runtime": task_runtime.get("runtime"),
                }
            )

        return Response(
            {
                "running": runtime["running"],
                "tasks": tasks,
            },
            status=status.HTTP_200_OK,
        )


class PeriodicalOverdueView(APIView):
    """GET /api/periodical/tasks/<task_name>/overdue/?since=<iso> - Liveness check (admin-only)."""

    permission_classes = [IsAdminUser]

    def get(self, request, task_name: str):
        since = _parse_since(request.query_params.get("since"))
        is_overdue = liveness.overdue(task_name, since)
        return Response(
            {
                "task_name": task_name,
                "since": since.isoformat(),
                "overdue": is_overdue,
                "interval": liveness.interval(task_name),
            },
            status=status.HTTP_200_OK,
        )
