"""Pydantic models describing the outcome of a purge."""

from __future__ import annotations

import pydantic


class PurgeResult(pydantic.BaseModel):
    """Aggregate outcome of deleting one or more directory trees.

    ``succeeded + failed == attempted`` always holds; the validator
    rejects any result that breaks it.  ``enumeration_error`` is only
    set when the archive root itself could not be listed, in which
    case nothing was attempted.
    """

    attempted: int = 0
    succeeded: int = 0
    failed: int = 0
    first_error: str | None = None
    failed_paths: list[str] = pydantic.Field(default_factory=list)
    enumeration_error: str | None = None

    @pydantic.model_validator(mode="after")
    def _check_counts(self) -> PurgeResult:
        if min(self.attempted, self.succeeded, self.failed) < 0:
            raise ValueError("Purge counts cannot be negative")
        if self.succeeded + self.failed != self.attempted:
            raise ValueError(
                f"succeeded ({self.succeeded}) + failed ({self.failed}) must equal attempted ({self.attempted})"
            )
        return self

    @property
    def success(self) -> bool:
        """True when every attempted entry is gone and listing worked."""
        return self.failed == 0 and self.enumeration_error is None

    @classmethod
    def enumeration_failure(cls, message: str) -> PurgeResult:
        """Result for a root that could not be listed."""
        return cls(enumeration_error=message)

    def merge(self, other: PurgeResult) -> PurgeResult:
        """Combine two results, keeping the earliest error."""
        return PurgeResult(
            attempted=self.attempted + other.attempted,
            succeeded=self.succeeded + other.succeeded,
            failed=self.failed + other.failed,
            first_error=self.first_error or other.first_error,
            failed_paths=[*self.failed_paths, *other.failed_paths],
            enumeration_error=self.enumeration_error or other.enumeration_error,
        )
