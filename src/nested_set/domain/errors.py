"""Error taxonomy for nested-set traversal.

No framework imports. Every error raised by the library
derives from ``NestedSetError`` so callers can catch the whole family.
Absence of a matching row is never an error: it surfaces as an empty
result or ``None``.
"""

from __future__ import annotations


class NestedSetError(Exception):
    """Base class for all nested-set errors."""


class ConfigurationError(NestedSetError):
    """Raised for a bad attribute mapping or an unresolvable storage handle."""

    def __init__(self, key: str, message: str) -> None:
        self.key = key
        self.message = message
        super().__init__(f"{key}: {message}")


class InvalidNodeError(NestedSetError):
    """Raised when the subject entity lacks a required attribute value."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class InvalidArgumentError(NestedSetError):
    """Raised for invalid traversal parameters (e.g. a negative depth)."""

    def __init__(self, argument: str, message: str) -> None:
        self.argument = argument
        self.message = message
        super().__init__(f"{argument}: {message}")


class ExecutionError(NestedSetError):
    """Raised when the storage engine fails to execute a traversal query.

    The engine's own exception is chained as ``__cause__``.
    """

    def __init__(self, kind: str, message: str) -> None:
        self.kind = kind
        self.message = message
        super().__init__(f"{kind}: {message}")
