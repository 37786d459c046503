"""Liveness helpers for health checks, usable with both run() and run_once() setups."""

from __future__ import annotations

from datetime import datetime, timedelta

from django.utils import timezone

from .registry import TaskRegistry, default_registry


def overdue(name: str, since: datetime, *, registry: TaskRegistry | None = None) -> bool:
    """True when ``since`` is older than two execution intervals ago (one missed run is tolerated)."""
    registry = registry if registry is not None else default_registry
    interval_seconds = registry.get(name).execution_interval
    if timezone.is_naive(since):
        since = timezone.make_aware(since)
    return since < timezone.now() - timedelta(seconds=interval_seconds * 2)


def interval(name: str, *, registry: TaskRegistry | None = None) -> float | bool:
    """The task's execution_interval when it is active, False otherwise."""
    registry = registry if registry is not None else default_registry
    config = registry.get(name)
    return config.active and config.execution_interval
