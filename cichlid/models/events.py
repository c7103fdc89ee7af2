"""Pydantic models for host build-lifecycle notifications."""

from __future__ import annotations

from typing import Literal

import pydantic

# Notification names delivered by the host event hub.
BUILD_OPERATION_DID_STOP = "IDEBuildOperationDidStopNotification"
APPLICATION_DID_FINISH_LAUNCHING = "NSApplicationDidFinishLaunchingNotification"

BuildOperationKind = Literal[
    "build",
    "clean",
    "test",
    "archive",
    "analyze",
    "install",
]

# Host build-purpose labels mapped to operation kinds.
_PURPOSE_KINDS: dict[str, BuildOperationKind] = {
    "ideBuildPurposeBuild": "build",
    "ideBuildPurposeClean": "clean",
    "ideBuildPurposeTest": "test",
    "ideBuildPurposeArchive": "archive",
    "ideBuildPurposeAnalyze": "analyze",
    "ideBuildPurposeInstall": "install",
}


def classify_operation_kind(purpose: str | None) -> BuildOperationKind:
    """Map a host build-purpose label to an operation kind.

    Labels are matched case-insensitively with or without the
    ``IDEBuildPurpose`` prefix, so ``"IDEBuildPurposeClean"`` and
    ``"clean"`` are both ``"clean"``.  Unknown labels are treated
    as ordinary builds.
    """
    if not purpose:
        return "build"
    key = purpose.strip().lower()
    for label, kind in _PURPOSE_KINDS.items():
        if key in (label.lower(), kind):
            return kind
    return "build"


class BuildOperation(pydantic.BaseModel):
    """The build operation a notification refers to."""

    identifier: str
    kind: BuildOperationKind = "build"

    @classmethod
    def from_purpose(cls, identifier: str, purpose: str | None) -> BuildOperation:
        """Operation for a host that reports a build-purpose label."""
        return cls(identifier=identifier, kind=classify_operation_kind(purpose))

    @property
    def is_clean(self) -> bool:
        return self.kind == "clean"


class BuildEvent(pydantic.BaseModel):
    """A notification raised by the host.

    ``operation`` is ``None`` for notifications that carry no
    build operation, such as the application-ready event.
    """

    name: str
    operation: BuildOperation | None = None

    @classmethod
    def build_stopped(cls, operation: BuildOperation | None) -> BuildEvent:
        """Build-completion event for *operation*."""
        return cls(name=BUILD_OPERATION_DID_STOP, operation=operation)

    @classmethod
    def application_ready(cls) -> BuildEvent:
        """The one-shot application-ready event."""
        return cls(name=APPLICATION_DID_FINISH_LAUNCHING)
