"""Task registration and lookup."""

from __future__ import annotations

import threading
from typing import Any, Callable, Mapping

from . import conf
from .conf import TASK_DEFAULTS, TaskConfig, Work, resolve_config
from .errors import TaskNotFoundError


def _description_from_doc(func: Callable[..., Any]) -> str | None:
    doc = getattr(func, "__doc__", None)
    if isinstance(doc, str):
        for line in doc.strip().splitlines():
            line = line.strip()
            if line:
                return line[:500]
    return None


class TaskRegistry:
    """
    Mapping of task name to its resolved TaskConfig.

    Written during process startup (tasks modules are imported from
    ``AppConfig.ready()``) and only read afterwards by the runner, the manual
    invoker and the liveness helpers.
    """

    def __init__(
        self,
        *,
        defaults: Mapping[str, Any] | None = None,
        env_overrides: Mapping[str, Mapping[str, Any]] | None = None,
    ):
        self._defaults = dict(TASK_DEFAULTS if defaults is None else defaults)
        # None means the process-wide PERIODICAL overrides.
        self._env_overrides = env_overrides
        self._tasks: dict[str, TaskConfig] = {}
        self._lock = threading.Lock()

    def _overrides(self) -> Mapping[str, Mapping[str, Any]]:
        if self._env_overrides is None:
            return conf.env_overrides()
        return self._env_overrides

    def register(self, name: str, description: str | None, work: Work, **options: Any) -> TaskConfig:
        """Resolve and store the config for ``name``, replacing any previous registration."""
        config = resolve_config(
            name,
            work=work,
            description=description,
            defaults=self._defaults,
            env_overrides=self._overrides(),
            options=options,
        )
        with self._lock:
            self._tasks[name] = config
        return config

    def get(self, name: str) -> TaskConfig:
        with self._lock:
            try:
                return self._tasks[name]
            except KeyError:
                raise TaskNotFoundError(name) from None

    def all(self) -> list[tuple[str, TaskConfig]]:
        with self._lock:
            return list(self._tasks.items())

    def names(self) -> list[str]:
        with self._lock:
            return sorted(self._tasks)

    def clear(self) -> None:
        with self._lock:
            self._tasks.clear()

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._tasks

    def __len__(self) -> int:
        with self._lock:
            return len(self._tasks)


default_registry = TaskRegistry()


def register(
    name: str,
    description: str | None = None,
    *,
    registry: TaskRegistry | None = None,
    **options: Any,
) -> Callable[[Callable[[], Any]], Callable[[], Any]]:
    """Decorator to register a periodical task.

    Usage:
        @register("stop_expired_deploys", "Stops deploys past their deadline", execution_interval=300)
        def stop_expired_deploys() -> None:
            ...

    Tasks start inactive unless ``active=True`` is passed or the task is
    listed in PERIODICAL.
    """

    def decorator(func: Callable[[], Any]) -> Callable[[], Any]:
        (registry if registry is not None else default_registry).register(
            name,
            description or _description_from_doc(func),
            func,
            **options,
        )
        return func

    return decorator


def get_task(name: str) -> TaskConfig:
    """Return a registered task; raises TaskNotFoundError for unknown names."""
    return default_registry.get(name)


def get_tasks() -> dict[str, TaskConfig]:
    """Return a copy of all registered tasks."""
    return dict(default_registry.all())
