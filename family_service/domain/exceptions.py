"""
Domain Exceptions

Validation errors abort a single construction or mutation and name the
violated invariant. Compliance findings are data, not exceptions.
"""

from typing import Optional


class DomainValidationError(ValueError):
    """An entity or value object invariant was violated"""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class ConcurrencyConflictError(RuntimeError):
    """Optimistic-concurrency version mismatch on save"""

    retryable = True

    def __init__(self, entity_key: tuple, expected_version: int, actual_version: int):
        super().__init__(
            f"Version conflict for {entity_key}: expected v{expected_version}, "
            f"found v{actual_version}"
        )
        self.entity_key = entity_key
        self.expected_version = expected_version
        self.actual_version = actual_version


class EntityNotFoundError(LookupError):
    """No record stored under the requested key"""
