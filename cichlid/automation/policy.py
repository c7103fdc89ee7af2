"""Decides whether a finished build should trigger an automatic purge.

Only clean builds qualify; ordinary incremental builds are the
common case and must never wipe derived data.  A purge also needs
a current project so there is a well-defined context to act on.
"""

from __future__ import annotations

from cichlid.models.events import BuildEvent


def should_trigger_auto_purge(event: BuildEvent, current_identity: str | None) -> bool:
    """True only for a clean build while a project is open."""
    if event.operation is None:
        return False
    if not event.operation.is_clean:
        return False
    return current_identity is not None and bool(current_identity.strip())
