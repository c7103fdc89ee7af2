"""
Plugin entry point: wires the purge components into a host application.

The host hands over its notification hub, UI scheduler, dialogs,
menu, and a query for the active build product.  The plugin only
arms inside the configured host application (Xcode by default).
"""

from __future__ import annotations

from dataclasses import dataclass, field

from cichlid.automation.controller import AutomationController
from cichlid.cleaner.archives import ArchivePurger
from cichlid.cleaner.engine import PurgeEngine
from cichlid.cleaner.filesystem import FileSystem, LocalFileSystem
from cichlid.cleaner.paths import PathResolver
from cichlid.commands.surface import CommandSurface, CurrentProjectQuery
from cichlid.config import CichlidSettings
from cichlid.host import presentation, scheduling
from cichlid.host.events import EventHub
from cichlid.utils import logger

log = logger.create_logger("Plugin")


@dataclass
class Host:
    """Everything the plugin needs from the host application."""

    app_name: str
    hub: EventHub
    scheduler: scheduling.UIScheduler
    presenter: presentation.Presenter
    menu_installer: presentation.MenuInstaller
    current_project: CurrentProjectQuery
    revealer: presentation.PathRevealer = field(default_factory=presentation.SystemPathRevealer)


def build_commands(
    settings: CichlidSettings,
    current_project: CurrentProjectQuery,
    presenter: presentation.Presenter,
    revealer: presentation.PathRevealer,
    filesystem: FileSystem | None = None,
) -> tuple[CommandSurface, PathResolver, PurgeEngine]:
    """Assemble the command surface for *settings*.

    Returns:
        The command surface plus the resolver and engine it uses,
        so the automation controller can share them.
    """
    fs = filesystem or LocalFileSystem()
    resolver = PathResolver.from_settings(settings, fs)
    engine = PurgeEngine(resolver.roots, fs)
    archive_purger = ArchivePurger(resolver.archives_root(), fs)
    commands = CommandSurface(resolver, engine, archive_purger, current_project, presenter, revealer)
    return commands, resolver, engine


def plugin_did_load(
    host: Host,
    settings: CichlidSettings | None = None,
    filesystem: FileSystem | None = None,
) -> AutomationController | None:
    """Create and arm the controller when running inside the expected host.

    Returns:
        The armed controller, or ``None`` when *host* is some other
        application.  The caller owns the controller and must call
        ``teardown()`` when the plugin unloads.
    """
    settings = settings or CichlidSettings()
    if host.app_name != settings.host_app_name:
        log.debug("Not loading in this host", {"host": host.app_name, "expected": settings.host_app_name})
        return None

    log.section(f"Cichlid for {host.app_name}")
    commands, resolver, engine = build_commands(
        settings, host.current_project, host.presenter, host.revealer, filesystem
    )
    controller = AutomationController(
        host.hub,
        host.scheduler,
        commands,
        host.menu_installer,
        engine,
        resolver,
        host.current_project,
        host.presenter,
        auto_purge=settings.auto_purge,
        notify_auto_purge=settings.notify_auto_purge,
    )
    controller.arm()
    log.success("Plugin loaded", {"host": host.app_name, "derivedData": str(resolver.all_projects_cache())})
    return controller
