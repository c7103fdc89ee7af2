"""
Error types and helpers for consistent error message extraction.

Deletion problems are never raised past a component boundary; they
are recorded as messages on a ``PurgeResult``.  The exceptions here
are raised internally and converted with :func:`get_error_message`.
"""

from __future__ import annotations


class CichlidError(Exception):
    """Base class for errors raised inside the purge engine."""


class UnsafePathError(CichlidError):
    """A path fell outside the designated cache roots."""

    def __init__(self, path: object) -> None:
        super().__init__(f"Refusing to delete path outside the cache roots: {path}")
        self.path = path


class StillPresentError(CichlidError):
    """Removal reported no error but the directory is still on disk."""

    def __init__(self, path: object) -> None:
        super().__init__(f"Directory still present after retry: {path}")
        self.path = path


class ConfigurationError(CichlidError, ValueError):
    """A configured cache root is unsafe to purge."""


def get_error_message(error: BaseException | object) -> str:
    """
    Safely extract an error message from an unknown error type.

    Exceptions without a message fall back to their class name.
    """
    if isinstance(error, BaseException):
        return str(error) or type(error).__name__
    return "Unknown error"
