"""Cache path resolution and containment checks.

Xcode keeps one derived-data folder per project, named
``<ProjectName>-<hash>``, under a single DerivedData root.
Archives live under a separate root, grouped in dated folders.

Every path handed to the purge engine must pass
:func:`is_contained` first: absolute, not a filesystem root,
not the home directory or one of its ancestors, and inside one
of the cache roots.
"""

from __future__ import annotations

import os
import pathlib
import re
from collections.abc import Iterable

from cichlid.cleaner import filesystem as fs_mod
from cichlid.config import CichlidSettings
from cichlid.utils import logger

log = logger.create_logger("PathResolver")


def _normalise(path: pathlib.Path) -> pathlib.Path:
    """Collapse ``..`` lexically, then resolve everything but the last component.

    The last component is left unresolved so a symlink inside a
    cache root is treated as living there (removing it unlinks the
    link, not its target).
    """
    collapsed = pathlib.Path(os.path.normpath(path))
    if collapsed.name:
        return collapsed.parent.resolve() / collapsed.name
    return collapsed.resolve()


def _covers_home_or_anchor(path: pathlib.Path) -> bool:
    """True when *path* is a filesystem root, or home or one of its ancestors."""
    if path == pathlib.Path(path.anchor):
        return True
    home = pathlib.Path.home().resolve()
    return path == home or path in home.parents


def is_contained(path: pathlib.Path | str, roots: Iterable[pathlib.Path]) -> bool:
    """Check *path* is a safe deletion target under one of *roots*."""
    if not str(path):
        return False
    candidate = pathlib.Path(path)
    if not candidate.is_absolute():
        return False

    candidate = _normalise(candidate)
    if _covers_home_or_anchor(candidate):
        return False

    for root in roots:
        # A symlinked root is matched both as the link and as its target.
        forms = {_normalise(pathlib.Path(root)), pathlib.Path(os.path.normpath(root)).resolve()}
        for form in forms:
            if _covers_home_or_anchor(form):
                continue
            if candidate == form or form in candidate.parents:
                return True
    return False


def _is_single_component(identity: str) -> bool:
    """True when *identity* can name exactly one child directory."""
    if identity in (".", ".."):
        return False
    return "/" not in identity and os.sep not in identity and "\0" not in identity


class PathResolver:
    """Maps project identities to on-disk cache directories."""

    def __init__(
        self,
        derived_data_root: pathlib.Path,
        archives_root: pathlib.Path,
        filesystem: fs_mod.FileSystem | None = None,
    ) -> None:
        self._derived_data_root = pathlib.Path(derived_data_root).expanduser().absolute()
        self._archives_root = pathlib.Path(archives_root).expanduser().absolute()
        self._fs = filesystem or fs_mod.LocalFileSystem()

    @classmethod
    def from_settings(cls, settings: CichlidSettings, filesystem: fs_mod.FileSystem | None = None) -> PathResolver:
        """Build a resolver for the configured cache roots."""
        return cls(settings.derived_data_path, settings.archives_path, filesystem)

    @property
    def roots(self) -> tuple[pathlib.Path, pathlib.Path]:
        """The cache roots every purge must stay inside."""
        return (self._derived_data_root, self._archives_root)

    def all_projects_cache(self) -> pathlib.Path:
        """The DerivedData root shared by every project."""
        return self._derived_data_root

    def archives_root(self) -> pathlib.Path:
        return self._archives_root

    def current_project_cache(self, identity: str | None) -> pathlib.Path | None:
        """Derived-data folder for *identity*.

        Returns ``None`` when there is no usable project name.  When
        the project has no folder on disk yet (or it was already
        purged) the unhashed ``<root>/<identity>`` path is returned,
        so deleting it again is a trivial success.

        Args:
            identity: Build product name reported by the host.

        Returns:
            The cache directory, or ``None`` if *identity* is
            absent or cannot name a single directory.
        """
        if identity is None or not identity.strip():
            return None
        identity = identity.strip()
        if not _is_single_component(identity):
            log.warn("Ignoring project name that is not a plain folder name", {"project": identity})
            return None

        candidate = self._find_hashed_folder(identity) or self._derived_data_root / identity
        if not is_contained(candidate, self.roots):
            return None
        return candidate

    def _find_hashed_folder(self, identity: str) -> pathlib.Path | None:
        """First folder named ``<identity>`` or ``<identity>-<hash>``."""
        if not self._fs.exists(self._derived_data_root):
            return None
        pattern = re.compile(re.escape(identity) + r"(-[A-Za-z0-9]+)?")
        try:
            children = self._fs.list_directories(self._derived_data_root)
        except OSError as exc:
            log.warn("Could not list derived data", {"path": str(self._derived_data_root), "error": str(exc)})
            return None
        for child in sorted(children):
            if pattern.fullmatch(child.name):
                return child
        return None

    def is_contained(self, path: pathlib.Path | str) -> bool:
        return is_contained(path, self.roots)
