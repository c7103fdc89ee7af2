"""Directory purge engine with a single retry per path.

Build tools and file indexers occasionally hold a file open
while we delete, so each path gets exactly one more removal
attempt when the first leaves anything behind.  There is no
backoff and no loop: two attempts, then report.

Every path is handled independently; one failure never stops
the remaining paths from being attempted.
"""

from __future__ import annotations

import pathlib
from collections.abc import Iterable, Sequence

from cichlid.cleaner import filesystem as fs_mod
from cichlid.cleaner import paths as paths_mod
from cichlid.models.purge import PurgeResult
from cichlid.utils import errors, logger

log = logger.create_logger("PurgeEngine")


class PurgeEngine:
    """Deletes directory trees that live under the given cache roots."""

    def __init__(
        self,
        roots: Sequence[pathlib.Path],
        filesystem: fs_mod.FileSystem | None = None,
    ) -> None:
        self._roots = tuple(pathlib.Path(r) for r in roots)
        self._fs = filesystem or fs_mod.LocalFileSystem()

    @property
    def filesystem(self) -> fs_mod.FileSystem:
        return self._fs

    def purge(self, paths: Iterable[pathlib.Path | str]) -> PurgeResult:
        """Delete every path in *paths*.

        Args:
            paths: Directory trees to remove.  Duplicates are
                collapsed; order does not matter.

        Returns:
            Counts of attempted, removed, and failed paths plus
            the first error message seen.
        """
        targets = sorted({pathlib.Path(p) for p in paths})
        succeeded = 0
        failed_paths: list[str] = []
        first_error: str | None = None

        for path in targets:
            error = self._purge_path(path)
            if error is None:
                succeeded += 1
                continue
            failed_paths.append(str(path))
            if first_error is None:
                first_error = error

        result = PurgeResult(
            attempted=len(targets),
            succeeded=succeeded,
            failed=len(failed_paths),
            first_error=first_error,
            failed_paths=failed_paths,
        )
        if result.success:
            log.success("Purge finished", {"attempted": result.attempted})
        else:
            log.error(
                "Purge finished with failures",
                {"attempted": result.attempted, "failed": result.failed, "error": first_error},
            )
        return result

    def _purge_path(self, path: pathlib.Path) -> str | None:
        """Remove one tree.  Returns an error message, or ``None`` when gone."""
        if not paths_mod.is_contained(path, self._roots):
            error = errors.UnsafePathError(path)
            log.error("Refusing unsafe path", {"path": str(path)})
            return errors.get_error_message(error)

        if not self._fs.exists(path):
            log.debug("Already absent", {"path": str(path)})
            return None

        last_error: BaseException | None = self._try_remove(path)
        if last_error is not None or self._fs.exists(path):
            log.warn(
                "Removal incomplete, retrying once",
                {"path": str(path), "error": errors.get_error_message(last_error) if last_error else None},
            )
            last_error = self._try_remove(path) or last_error

        if self._fs.exists(path):
            error = last_error or errors.StillPresentError(path)
            log.error("Failed to remove directory", {"path": str(path), "error": errors.get_error_message(error)})
            return errors.get_error_message(error)

        log.info("Removed directory", {"path": str(path)})
        return None

    def _try_remove(self, path: pathlib.Path) -> BaseException | None:
        try:
            self._fs.remove_tree(path)
        except Exception as exc:
            return exc
        return None
