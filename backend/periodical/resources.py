from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, ContextManager, Iterator

from django.db import close_old_connections, connections

ResourceScope = Callable[[], ContextManager[None]]


@contextmanager
def connection_scope() -> Iterator[None]:
    """Bracket one execution with Django's per-thread database connection handling."""
    close_old_connections()
    try:
        yield
    finally:
        # Every execution runs on its own thread; nothing reuses its connections.
        connections.close_all()
