"""Filesystem access used by the purge engine.

The engine only needs three operations, so tests can swap in a
double that fails on demand instead of fiddling with permissions.
"""

from __future__ import annotations

import os
import pathlib
import shutil
from typing import Protocol


class FileSystem(Protocol):
    """Operations the purge engine performs on disk."""

    def exists(self, path: pathlib.Path) -> bool: ...

    def remove_tree(self, path: pathlib.Path) -> None: ...

    def list_directories(self, path: pathlib.Path) -> list[pathlib.Path]: ...


class LocalFileSystem:
    """The real filesystem."""

    def exists(self, path: pathlib.Path) -> bool:
        # lexists so a dangling symlink still counts as something to remove.
        return os.path.lexists(path)

    def remove_tree(self, path: pathlib.Path) -> None:
        """Remove *path* recursively.

        Symlinks and plain files are unlinked rather than followed.
        """
        if path.is_symlink() or not path.is_dir():
            path.unlink()
        else:
            shutil.rmtree(path)

    def list_directories(self, path: pathlib.Path) -> list[pathlib.Path]:
        """Immediate child directories of *path*, sorted by name."""
        return sorted(child for child in path.iterdir() if child.is_dir())
