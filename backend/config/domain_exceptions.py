from __future__ import annotations


class DomainError(Exception):
    """
    Base class for predictable domain errors raised by the periodical app.
    """


class ValidationError(DomainError):
    pass


class NotFoundError(DomainError):
    pass


class ConfigurationError(DomainError):
    """
    Missing/invalid configuration detected while the process is starting.
    """


class OperationTimeoutError(DomainError):
    """
    Operation did not finish within its allotted time.
    """
