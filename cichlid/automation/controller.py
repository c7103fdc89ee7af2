"""Automatic purging driven by host build notifications.

The controller subscribes to two notification streams once it is
armed: build-completion (for the lifetime of the plugin) and
application-ready (one-shot, used to install the menu).  After a
clean build with a project open it purges the derived data of
**all** projects; derived data is already namespaced per project on
disk, so the wider scope costs only a rebuild of other projects.

Notifications may arrive on any thread.  The controller's own state
is guarded by a lock and anything that touches the UI goes through
the injected scheduler.
"""

from __future__ import annotations

import enum
import threading

from cichlid.automation import policy
from cichlid.cleaner.engine import PurgeEngine
from cichlid.cleaner.paths import PathResolver
from cichlid.commands import surface
from cichlid.host import presentation, scheduling
from cichlid.host.events import EventHub, Subscription
from cichlid.models import events
from cichlid.models.purge import PurgeResult
from cichlid.utils import logger

log = logger.create_logger("Automation")


class ControllerState(enum.Enum):
    UNARMED = "unarmed"
    ARMED = "armed"
    TERMINATED = "terminated"


class AutomationController:
    """Owns the host subscriptions and reacts to build notifications."""

    def __init__(
        self,
        hub: EventHub,
        scheduler: scheduling.UIScheduler,
        commands: surface.CommandSurface,
        menu_installer: presentation.MenuInstaller,
        engine: PurgeEngine,
        resolver: PathResolver,
        current_project: surface.CurrentProjectQuery,
        presenter: presentation.Presenter,
        *,
        auto_purge: bool = True,
        notify_auto_purge: bool = True,
    ) -> None:
        self._hub = hub
        self._scheduler = scheduler
        self._commands = commands
        self._menu_installer = menu_installer
        self._engine = engine
        self._resolver = resolver
        self._current_project = current_project
        self._presenter = presenter
        self._auto_purge = auto_purge
        self._notify_auto_purge = notify_auto_purge

        self._lock = threading.Lock()
        self._state = ControllerState.UNARMED
        self._build_subscription: Subscription | None = None
        self._ready_subscription: Subscription | None = None

    @property
    def state(self) -> ControllerState:
        with self._lock:
            return self._state

    def arm(self) -> bool:
        """Subscribe to host notifications.  Only the first call does anything."""
        with self._lock:
            if self._state is not ControllerState.UNARMED:
                return False
            self._build_subscription = self._hub.subscribe(
                events.BUILD_OPERATION_DID_STOP, self._on_build_stopped
            )
            self._ready_subscription = self._hub.subscribe(
                events.APPLICATION_DID_FINISH_LAUNCHING, self._on_application_ready
            )
            self._state = ControllerState.ARMED
        log.info("Observing build notifications", {"autoPurge": self._auto_purge})
        return True

    def teardown(self) -> bool:
        """Unsubscribe from everything still attached.  Safe to call repeatedly."""
        with self._lock:
            if self._state is ControllerState.TERMINATED:
                return False
            subscriptions = [s for s in (self._build_subscription, self._ready_subscription) if s is not None]
            self._build_subscription = None
            self._ready_subscription = None
            self._state = ControllerState.TERMINATED

        for subscription in subscriptions:
            self._hub.unsubscribe(subscription)
        log.info("Stopped observing build notifications", {"unsubscribed": len(subscriptions)})
        return True

    # ── Notification handlers ───────────────────────────────────

    def _on_application_ready(self, _event: events.BuildEvent) -> None:
        with self._lock:
            subscription = self._ready_subscription
            self._ready_subscription = None
        if subscription is None:
            return

        self._hub.unsubscribe(subscription)
        self._scheduler.schedule(lambda: self._commands.install_menu(self._menu_installer))

    def _on_build_stopped(self, event: events.BuildEvent) -> PurgeResult | None:
        if self.state is not ControllerState.ARMED or not self._auto_purge:
            return None

        project = self._current_project()
        if not policy.should_trigger_auto_purge(event, project):
            return None

        target = self._resolver.all_projects_cache()
        log.info(
            "Clean build finished, purging derived data",
            {"project": project, "operation": event.operation.identifier if event.operation else None},
        )
        log.start_timer("auto-purge")
        result = self._engine.purge([target])
        log.end_timer("auto-purge", "Automatic purge finished")

        if self._notify_auto_purge:
            message = surface.describe_result(result, surface.MSG_DERIVED_DATA_OK, surface.MSG_DERIVED_DATA_FAILED)
            self._scheduler.schedule(lambda: self._presenter.notify(message))
        return result
