"""Shared fixtures and test doubles for the test suite."""

from __future__ import annotations

import pathlib
from collections import Counter

import pytest

from cichlid.cleaner.archives import ArchivePurger
from cichlid.cleaner.engine import PurgeEngine
from cichlid.cleaner.filesystem import LocalFileSystem
from cichlid.cleaner.paths import PathResolver
from cichlid.commands.surface import CommandSurface
from cichlid.config import CichlidSettings
from cichlid.host import presentation

# ── Test doubles ────────────────────────────────────────────────


class FlakyFileSystem(LocalFileSystem):
    """Real filesystem whose removals can be made to fail.

    ``failures[path]`` is the number of upcoming ``remove_tree``
    calls on *path* that raise ``PermissionError``; use a large
    number for a path that can never be deleted.  Paths in
    ``stubborn`` silently survive removal without an error.
    """

    def __init__(self) -> None:
        self.failures: dict[pathlib.Path, int] = {}
        self.stubborn: set[pathlib.Path] = set()
        self.remove_calls: Counter[pathlib.Path] = Counter()
        self.list_error: OSError | None = None

    def remove_tree(self, path: pathlib.Path) -> None:
        self.remove_calls[path] += 1
        if self.failures.get(path, 0) > 0:
            self.failures[path] -= 1
            raise PermissionError(f"Permission denied: '{path}'")
        if path in self.stubborn:
            return
        super().remove_tree(path)

    def list_directories(self, path: pathlib.Path) -> list[pathlib.Path]:
        if self.list_error is not None:
            raise self.list_error
        return super().list_directories(path)


class RecordingPresenter:
    """Presenter that answers confirmations with a fixed value."""

    def __init__(self, answer: bool = True) -> None:
        self.answer = answer
        self.confirmations: list[str] = []
        self.notices: list[str] = []

    def confirm(self, message: str) -> bool:
        self.confirmations.append(message)
        return self.answer

    def notify(self, message: str) -> None:
        self.notices.append(message)


class RecordingRevealer:
    def __init__(self, error: OSError | None = None) -> None:
        self.error = error
        self.revealed: list[pathlib.Path] = []

    def reveal(self, path: pathlib.Path) -> None:
        if self.error is not None:
            raise self.error
        self.revealed.append(path)


class RecordingMenuInstaller:
    def __init__(self) -> None:
        self.installed: list[tuple[str, str, list[presentation.MenuItem]]] = []

    def install(self, parent_title: str, title: str, items: list[presentation.MenuItem]) -> None:
        self.installed.append((parent_title, title, items))


class ProjectQuery:
    """Mutable stand-in for the host's current-project lookup."""

    def __init__(self, name: str | None = "MyApp") -> None:
        self.name = name
        self.calls = 0

    def __call__(self) -> str | None:
        self.calls += 1
        return self.name


def make_tree(root: pathlib.Path, *names: str) -> list[pathlib.Path]:
    """Create one populated directory per name under *root*."""
    created = []
    for name in names:
        d = root / name
        (d / "Build" / "Intermediates.noindex").mkdir(parents=True)
        (d / "Build" / "Intermediates.noindex" / "main.o").write_bytes(b"\x00" * 16)
        (d / "info.plist").write_text("<plist/>")
        created.append(d)
    return created


# ── Fixtures ────────────────────────────────────────────────────


@pytest.fixture()
def derived_root(tmp_path: pathlib.Path) -> pathlib.Path:
    root = tmp_path / "Xcode" / "DerivedData"
    root.mkdir(parents=True)
    return root


@pytest.fixture()
def archives_root(tmp_path: pathlib.Path) -> pathlib.Path:
    root = tmp_path / "Xcode" / "Archives"
    root.mkdir(parents=True)
    return root


@pytest.fixture()
def settings(derived_root: pathlib.Path, archives_root: pathlib.Path) -> CichlidSettings:
    return CichlidSettings(derived_data_path=derived_root, archives_path=archives_root)


@pytest.fixture()
def flaky_fs() -> FlakyFileSystem:
    return FlakyFileSystem()


@pytest.fixture()
def resolver(derived_root: pathlib.Path, archives_root: pathlib.Path, flaky_fs: FlakyFileSystem) -> PathResolver:
    return PathResolver(derived_root, archives_root, flaky_fs)


@pytest.fixture()
def engine(resolver: PathResolver, flaky_fs: FlakyFileSystem) -> PurgeEngine:
    return PurgeEngine(resolver.roots, flaky_fs)


@pytest.fixture()
def archive_purger(archives_root: pathlib.Path, flaky_fs: FlakyFileSystem) -> ArchivePurger:
    return ArchivePurger(archives_root, flaky_fs)


@pytest.fixture()
def presenter() -> RecordingPresenter:
    return RecordingPresenter()


@pytest.fixture()
def revealer() -> RecordingRevealer:
    return RecordingRevealer()


@pytest.fixture()
def project() -> ProjectQuery:
    return ProjectQuery()


@pytest.fixture()
def commands(
    resolver: PathResolver,
    engine: PurgeEngine,
    archive_purger: ArchivePurger,
    project: ProjectQuery,
    presenter: RecordingPresenter,
    revealer: RecordingRevealer,
) -> CommandSurface:
    return CommandSurface(resolver, engine, archive_purger, project, presenter, revealer)
