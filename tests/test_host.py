"""Tests for cichlid.host: event hub, schedulers, and presenters."""

from __future__ import annotations

import io
import pathlib
import threading
from unittest import mock

from cichlid.host import presentation
from cichlid.host.events import EventHub
from cichlid.host.scheduling import ImmediateScheduler, QueueScheduler
from cichlid.models.events import BUILD_OPERATION_DID_STOP, BuildEvent


# ── EventHub ────────────────────────────────────────────────────


class TestEventHub:
    """Tests for subscribe/post/unsubscribe."""

    def test_post_delivers_to_matching_name(self) -> None:
        hub = EventHub()
        received: list[BuildEvent] = []
        hub.subscribe(BUILD_OPERATION_DID_STOP, received.append)
        hub.subscribe("Other", lambda e: received.append(e))

        delivered = hub.post(BuildEvent.build_stopped(None))

        assert delivered == 1
        assert len(received) == 1

    def test_unsubscribe_stops_delivery(self) -> None:
        hub = EventHub()
        received: list[BuildEvent] = []
        sub = hub.subscribe(BUILD_OPERATION_DID_STOP, received.append)

        assert hub.unsubscribe(sub)
        hub.post(BuildEvent.build_stopped(None))

        assert received == []

    def test_unsubscribe_twice(self) -> None:
        hub = EventHub()
        sub = hub.subscribe(BUILD_OPERATION_DID_STOP, lambda e: None)
        assert hub.unsubscribe(sub)
        assert not hub.unsubscribe(sub)

    def test_raising_observer_does_not_block_others(self) -> None:
        hub = EventHub()
        received: list[BuildEvent] = []

        def boom(_e: BuildEvent) -> None:
            raise RuntimeError("observer bug")

        hub.subscribe(BUILD_OPERATION_DID_STOP, boom)
        hub.subscribe(BUILD_OPERATION_DID_STOP, received.append)

        hub.post(BuildEvent.build_stopped(None))

        assert len(received) == 1

    def test_observer_removed_mid_dispatch_is_skipped(self) -> None:
        hub = EventHub()
        received: list[str] = []
        second = None

        def first(_e: BuildEvent) -> None:
            received.append("first")
            hub.unsubscribe(second)

        hub.subscribe(BUILD_OPERATION_DID_STOP, first)
        second = hub.subscribe(BUILD_OPERATION_DID_STOP, lambda e: received.append("second"))

        hub.post(BuildEvent.build_stopped(None))

        assert received == ["first"]

    def test_post_from_other_thread(self) -> None:
        hub = EventHub()
        seen_threads: list[str] = []
        hub.subscribe(BUILD_OPERATION_DID_STOP, lambda e: seen_threads.append(threading.current_thread().name))

        worker = threading.Thread(target=hub.post, args=(BuildEvent.build_stopped(None),), name="dispatch")
        worker.start()
        worker.join()

        assert seen_threads == ["dispatch"]

    def test_subscriber_count(self) -> None:
        hub = EventHub()
        hub.subscribe(BUILD_OPERATION_DID_STOP, lambda e: None)
        hub.subscribe(BUILD_OPERATION_DID_STOP, lambda e: None)
        assert hub.subscriber_count(BUILD_OPERATION_DID_STOP) == 2
        assert hub.subscriber_count("Other") == 0


# ── Schedulers ──────────────────────────────────────────────────


class TestSchedulers:
    def test_immediate_runs_inline(self) -> None:
        ran: list[int] = []
        ImmediateScheduler().schedule(lambda: ran.append(1))
        assert ran == [1]

    def test_queue_defers_until_drained(self) -> None:
        scheduler = QueueScheduler()
        ran: list[int] = []
        scheduler.schedule(lambda: ran.append(1))
        scheduler.schedule(lambda: ran.append(2))

        assert ran == []
        assert scheduler.pending() == 2
        assert scheduler.run_pending() == 2
        assert ran == [1, 2]
        assert scheduler.pending() == 0

    def test_queue_survives_failing_work(self) -> None:
        scheduler = QueueScheduler()
        ran: list[int] = []

        def boom() -> None:
            raise RuntimeError("ui error")

        scheduler.schedule(boom)
        scheduler.schedule(lambda: ran.append(1))

        assert scheduler.run_pending() == 2
        assert ran == [1]


# ── Presentation ────────────────────────────────────────────────


class TestConsolePresenter:
    def test_non_interactive_returns_default(self) -> None:
        prompt = mock.Mock()
        presenter = presentation.ConsolePresenter(interactive=False, default_confirm=True, input_fn=prompt)

        assert presenter.confirm("Sure?")
        prompt.assert_not_called()

    def test_interactive_yes(self) -> None:
        presenter = presentation.ConsolePresenter(interactive=True, input_fn=lambda _p: "y")
        assert presenter.confirm("Sure?")

    def test_interactive_default_no(self) -> None:
        presenter = presentation.ConsolePresenter(interactive=True, input_fn=lambda _p: "")
        assert not presenter.confirm("Sure?")

    def test_eof_returns_default(self) -> None:
        def eof(_p: str) -> str:
            raise EOFError

        presenter = presentation.ConsolePresenter(interactive=True, default_confirm=False, input_fn=eof)
        assert not presenter.confirm("Sure?")

    def test_notify_writes_stream(self) -> None:
        stream = io.StringIO()
        presentation.ConsolePresenter(interactive=False, stream=stream).notify("done")
        assert stream.getvalue() == "Cichlid: done\n"


class TestSystemPathRevealer:
    def test_macos_uses_open(self) -> None:
        cmd = presentation.SystemPathRevealer("darwin").command_for(pathlib.Path("/tmp/x"))
        assert cmd == ["/usr/bin/open", "/tmp/x"]

    def test_linux_uses_xdg_open(self) -> None:
        cmd = presentation.SystemPathRevealer("linux").command_for(pathlib.Path("/tmp/x"))
        assert cmd == ["xdg-open", "/tmp/x"]

    def test_reveal_launches_process(self) -> None:
        with mock.patch.object(presentation.subprocess, "Popen") as popen:
            presentation.SystemPathRevealer("darwin").reveal(pathlib.Path("/tmp/x"))

        popen.assert_called_once()
        assert popen.call_args.args[0] == ["/usr/bin/open", "/tmp/x"]
