"""Purging of stored build archives.

Archives are grouped in dated folders under the archives root.
Each folder is deleted on its own so a locked archive does not
keep the others on disk.
"""

from __future__ import annotations

import pathlib

from cichlid.cleaner import filesystem as fs_mod
from cichlid.cleaner.engine import PurgeEngine
from cichlid.models.purge import PurgeResult
from cichlid.utils import errors, logger

log = logger.create_logger("ArchivePurger")


class ArchivePurger(PurgeEngine):
    """Purge engine scoped to the archives root."""

    def __init__(self, archives_root: pathlib.Path, filesystem: fs_mod.FileSystem | None = None) -> None:
        super().__init__([archives_root], filesystem)
        self._archives_root = pathlib.Path(archives_root)

    def purge_all_archives(self) -> PurgeResult:
        """Delete every immediate child folder of the archives root.

        A missing root means there is nothing to delete.  If the
        root exists but cannot be listed, nothing is attempted and
        the listing error is reported on ``enumeration_error``.
        """
        root = self._archives_root
        if not self.filesystem.exists(root):
            log.info("No archives directory to clear", {"path": str(root)})
            return PurgeResult()

        try:
            children = self.filesystem.list_directories(root)
        except Exception as exc:
            message = errors.get_error_message(exc)
            log.error("Could not list archives", {"path": str(root), "error": message})
            return PurgeResult.enumeration_failure(message)

        result = PurgeResult()
        for child in children:
            result = result.merge(self.purge([child]))

        log.info(
            "Archives cleared",
            {"attempted": result.attempted, "succeeded": result.succeeded, "failed": result.failed},
        )
        return result
