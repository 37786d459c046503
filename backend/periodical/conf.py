"""Task configuration: defaults, PERIODICAL overrides and per-call options.

Layering, lowest to highest precedence:

    TASK_DEFAULTS < PERIODICAL override for the task name < register() options

The ``PERIODICAL`` value is a comma separated list of ``name[:interval]``
entries, e.g. ``PERIODICAL="stop_expired_deploys,remove_old_logs:300"``. Each
entry activates the named task and optionally sets its execution interval.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping, Protocol

from django.conf import settings

from .errors import ConfigurationError


class Work(Protocol):
    """A unit of work the scheduler can invoke; the return value is ignored."""

    def __call__(self) -> Any: ...


@dataclass(frozen=True)
class TaskConfig:
    """Resolved configuration of a registered task."""

    name: str
    work: Work
    description: str | None = None
    execution_interval: float = 60
    timeout_interval: float = 10
    active: bool = False
    run_immediately_on_start: bool = True  # run at startup so a restart leaves a consistent state
    consistent_start_time: bool = False


TASK_DEFAULTS: Mapping[str, Any] = {
    "execution_interval": 60,
    "timeout_interval": 10,
    "active": False,
    "run_immediately_on_start": True,
    "consistent_start_time": False,
}

OPTION_NAMES = frozenset(f.name for f in fields(TaskConfig)) - {"name", "work", "description"}

_ENV_OVERRIDES: dict[str, dict[str, Any]] | None = None


def parse_overrides(raw: str | None) -> dict[str, dict[str, Any]]:
    """Parse a ``name[:interval],...`` string into per-task option dicts."""
    overrides: dict[str, dict[str, Any]] = {}
    for item in (raw or "").split(","):
        item = item.strip()
        if not item:
            continue
        name, sep, value = item.partition(":")
        config: dict[str, Any] = {"active": True}
        if sep:
            try:
                config["execution_interval"] = int(value)
            except ValueError as exc:
                raise ConfigurationError(
                    f"PERIODICAL entry '{item}' has a non-integer interval: {value!r}"
                ) from exc
        overrides[name.strip()] = config
    return overrides


def env_overrides() -> dict[str, dict[str, Any]]:
    """Return the PERIODICAL overrides, parsed on first access and cached for the process."""
    global _ENV_OVERRIDES
    if _ENV_OVERRIDES is None:
        _ENV_OVERRIDES = parse_overrides(getattr(settings, "PERIODICAL", "") or "")
    return _ENV_OVERRIDES


def _validate_interval(name: str, key: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigurationError(f"Task '{name}': {key} must be a positive number of seconds, got {value!r}")


def _validate_flag(name: str, key: str, value: Any) -> None:
    if not isinstance(value, bool):
        raise ConfigurationError(f"Task '{name}': {key} must be True or False, got {value!r}")


def resolve_config(
    name: str,
    *,
    work: Work,
    description: str | None = None,
    defaults: Mapping[str, Any] = TASK_DEFAULTS,
    env_overrides: Mapping[str, Mapping[str, Any]] | None = None,
    options: Mapping[str, Any] | None = None,
) -> TaskConfig:
    """Merge defaults, the override for ``name`` and call options into a TaskConfig."""
    options = dict(options or {})
    unknown = set(options) - OPTION_NAMES
    if unknown:
        raise ConfigurationError(f"Task '{name}': unknown options {sorted(unknown)}")

    merged: dict[str, Any] = dict(defaults)
    merged.update((env_overrides or {}).get(name) or {})
    merged.update(options)

    for key in ("execution_interval", "timeout_interval"):
        _validate_interval(name, key, merged.get(key))
    for key in ("active", "run_immediately_on_start", "consistent_start_time"):
        _validate_flag(name, key, merged.get(key))

    return TaskConfig(
        name=name,
        work=work,
        description=description,
        execution_interval=merged["execution_interval"],
        timeout_interval=merged["timeout_interval"],
        active=merged["active"],
        run_immediately_on_start=merged["run_immediately_on_start"],
        consistent_start_time=merged["consistent_start_time"],
    )
