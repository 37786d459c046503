"""Timeout-bounded execution of a single work unit."""

from __future__ import annotations

import threading
from typing import Any

from .conf import Work
from .errors import TaskTimeoutError
from .resources import ResourceScope


class Execution:
    """
    One invocation of a work unit on its own daemon thread.

    ``wait()`` gives up after the timeout; the thread itself cannot be
    interrupted and keeps running until the work unit returns, releasing its
    resource scope at that point.
    """

    def __init__(self, name: str, work: Work, *, resource_scope: ResourceScope | None = None):
        self.name = name
        self._work = work
        self._resource_scope = resource_scope
        self._result: Any = None
        self._exception: BaseException | None = None
        self._thread = threading.Thread(
            target=self._target,
            name=f"periodical-{name}",
            daemon=True,
        )

    def _target(self) -> None:
        try:
            if self._resource_scope is None:
                self._result = self._work()
            else:
                with self._resource_scope():
                    self._result = self._work()
        except BaseException as exc:
            # SystemExit and KeyboardInterrupt from the work unit are failures too
            self._exception = exc

    def start(self) -> "Execution":
        self._thread.start()
        return self

    @property
    def running(self) -> bool:
        return self._thread.is_alive()

    def wait(self, timeout: float) -> Any:
        """Return the work unit's result, re-raise its exception, or raise TaskTimeoutError."""
        self._thread.join(timeout)
        if self._thread.is_alive():
            raise TaskTimeoutError(self.name, timeout)
        if self._exception is not None:
            raise self._exception
        return self._result
