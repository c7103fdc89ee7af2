"""The four user-invocable cache commands.

Each command resolves what to delete, asks for confirmation
where the scope is wider than the open project, runs the purge,
and reports a single notice through the presenter.  Nothing here
raises for a failed deletion; the notice is the outcome.
"""

from __future__ import annotations

from collections.abc import Callable

from cichlid.cleaner.archives import ArchivePurger
from cichlid.cleaner.engine import PurgeEngine
from cichlid.cleaner.paths import PathResolver
from cichlid.host import presentation
from cichlid.models.purge import PurgeResult
from cichlid.utils import errors, logger

log = logger.create_logger("Commands")

# ── Messages ────────────────────────────────────────────────────
MSG_NOT_FOUND = "Not found the DerivedData directory"
MSG_CONFIRM = "Are you sure you want to delete?"
MSG_DERIVED_DATA_OK = "Successfully deleted the DerivedData"
MSG_DERIVED_DATA_FAILED = "Failed to delete the DerivedData"
MSG_ARCHIVES_OK = "Successfully deleted the Archives"
MSG_ARCHIVES_FAILED = "Failed to delete the Archives"
MSG_ARCHIVES_UNREADABLE = "Could not read the Archives directory"
MSG_REVEAL_FAILED = "Failed to open the DerivedData directory"

MENU_PARENT = "Product"
MENU_TITLE = "Cichlid"

CurrentProjectQuery = Callable[[], str | None]


def describe_result(result: PurgeResult, ok: str, failed: str) -> str:
    """One-line notice for *result*."""
    if result.success:
        return ok
    if result.first_error:
        return f"{failed} ({result.failed} of {result.attempted}): {result.first_error}"
    return failed


class CommandSurface:
    """Composes resolver, engine, and archive purger into commands."""

    def __init__(
        self,
        resolver: PathResolver,
        engine: PurgeEngine,
        archive_purger: ArchivePurger,
        current_project: CurrentProjectQuery,
        presenter: presentation.Presenter,
        revealer: presentation.PathRevealer,
    ) -> None:
        self._resolver = resolver
        self._engine = engine
        self._archive_purger = archive_purger
        self._current_project = current_project
        self._presenter = presenter
        self._revealer = revealer

    def open_current_project_cache(self) -> bool:
        """Show the open project's derived data in the file browser."""
        path = self._resolver.current_project_cache(self._current_project())
        if path is None or not self._engine.filesystem.exists(path):
            self._presenter.notify(MSG_NOT_FOUND)
            return False
        try:
            self._revealer.reveal(path)
        except OSError as exc:
            log.error("Could not reveal folder", {"path": str(path), "error": errors.get_error_message(exc)})
            self._presenter.notify(MSG_REVEAL_FAILED)
            return False
        return True

    def delete_current_project_cache(self) -> PurgeResult | None:
        """Delete the open project's derived data.  No confirmation."""
        path = self._resolver.current_project_cache(self._current_project())
        if path is None:
            self._presenter.notify(MSG_NOT_FOUND)
            return None

        result = self._engine.purge([path])
        self._presenter.notify(describe_result(result, MSG_DERIVED_DATA_OK, MSG_DERIVED_DATA_FAILED))
        return result

    def delete_all_projects_cache(self) -> PurgeResult | None:
        """Delete derived data for every project, after confirmation."""
        if not self._presenter.confirm(MSG_CONFIRM):
            log.info("Delete all derived data cancelled")
            return None

        result = self._engine.purge([self._resolver.all_projects_cache()])
        self._presenter.notify(describe_result(result, MSG_DERIVED_DATA_OK, MSG_DERIVED_DATA_FAILED))
        return result

    def delete_all_archives(self) -> PurgeResult | None:
        """Delete every stored archive, after confirmation."""
        if not self._presenter.confirm(MSG_CONFIRM):
            log.info("Delete all archives cancelled")
            return None

        result = self._archive_purger.purge_all_archives()
        if result.enumeration_error is not None:
            self._presenter.notify(f"{MSG_ARCHIVES_UNREADABLE}: {result.enumeration_error}")
        else:
            self._presenter.notify(describe_result(result, MSG_ARCHIVES_OK, MSG_ARCHIVES_FAILED))
        return result

    # ── Menu ────────────────────────────────────────────────────

    def menu_items(self) -> list[presentation.MenuItem]:
        return [
            presentation.MenuItem("Open the DerivedData of Current Project", self.open_current_project_cache),
            presentation.MenuItem("Delete the DerivedData of Current Project", self.delete_current_project_cache),
            presentation.MenuItem("Delete All the DerivedData", self.delete_all_projects_cache),
            presentation.MenuItem("Delete All the Archives", self.delete_all_archives),
        ]

    def install_menu(self, installer: presentation.MenuInstaller) -> None:
        """Add the commands as a submenu of the host's Product menu."""
        installer.install(MENU_PARENT, MENU_TITLE, self.menu_items())
        log.info("Menu installed", {"parent": MENU_PARENT, "items": len(self.menu_items())})
