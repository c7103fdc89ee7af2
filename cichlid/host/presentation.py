"""Presentation-layer collaborators: dialogs, menus, and folder reveal.

The purge commands only ever ask two things of a UI: a blocking
yes/no confirmation and a fire-and-forget notice.  Menus and the
"show in file browser" action are equally thin.
"""

from __future__ import annotations

import pathlib
import subprocess
import sys
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol, TextIO

from cichlid.utils import logger

log = logger.create_logger("Presenter")

TITLE = "Cichlid"


class Presenter(Protocol):
    """Confirmation and notification dialogs."""

    def confirm(self, message: str) -> bool: ...

    def notify(self, message: str) -> None: ...


@dataclass(frozen=True)
class MenuItem:
    """A titled menu entry bound to a command."""

    title: str
    action: Callable[[], object]


class MenuInstaller(Protocol):
    """Adds a submenu of items under an existing top-level menu."""

    def install(self, parent_title: str, title: str, items: list[MenuItem]) -> None: ...


class PathRevealer(Protocol):
    """Shows a directory in the platform file browser."""

    def reveal(self, path: pathlib.Path) -> None: ...


class ConsolePresenter:
    """Terminal dialogs.

    In a non-interactive session (stdin is not a TTY) ``confirm``
    returns *default_confirm* without prompting.
    """

    def __init__(
        self,
        *,
        interactive: bool | None = None,
        default_confirm: bool = False,
        input_fn: Callable[[str], str] = input,
        stream: TextIO | None = None,
    ) -> None:
        self._interactive = interactive
        self._default_confirm = default_confirm
        self._input = input_fn
        self._stream = stream

    def confirm(self, message: str) -> bool:
        interactive = self._interactive
        if interactive is None:
            interactive = sys.stdin is not None and sys.stdin.isatty()
        if not interactive:
            log.debug("Non-interactive confirmation", {"message": message, "answer": self._default_confirm})
            return self._default_confirm
        try:
            answer = self._input(f"{TITLE}: {message} [y/N] ")
        except EOFError:
            return self._default_confirm
        return answer.strip().lower() in ("y", "yes")

    def notify(self, message: str) -> None:
        print(f"{TITLE}: {message}", file=self._stream or sys.stdout)


class SystemPathRevealer:
    """Opens a folder with ``open`` on macOS or ``xdg-open`` elsewhere."""

    def __init__(self, platform: str | None = None) -> None:
        self._platform = platform or sys.platform

    def command_for(self, path: pathlib.Path) -> list[str]:
        if self._platform == "darwin":
            return ["/usr/bin/open", str(path)]
        return ["xdg-open", str(path)]

    def reveal(self, path: pathlib.Path) -> None:
        command = self.command_for(path)
        log.info("Revealing folder", {"path": str(path)})
        subprocess.Popen(command, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)  # noqa: S603
