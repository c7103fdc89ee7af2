"""Cache purge package.

Path resolution, the retry-once purge engine, and the archive
purger.  Most callers only need the classes re-exported here.
"""

from __future__ import annotations

from cichlid.cleaner.archives import ArchivePurger
from cichlid.cleaner.engine import PurgeEngine
from cichlid.cleaner.filesystem import FileSystem, LocalFileSystem
from cichlid.cleaner.paths import PathResolver, is_contained

__all__ = [
    "ArchivePurger",
    "FileSystem",
    "LocalFileSystem",
    "PathResolver",
    "PurgeEngine",
    "is_contained",
]
