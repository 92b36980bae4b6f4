"""Unit tests for the AppKit-backed process manager, against mock AppKit/Foundation."""

import importlib
import signal
import sys

import psutil
import pytest

from appswitch.core.status import APP_IS_DAEMON, PARAM_ERR, PERM_ERR, PROC_NOT_FOUND, OSStatusError
from appswitch.models.process import UNKNOWN_OSTYPE, ProcessHandle
from fixtures.mock_appkit import (
    NS_APPLE_EVENT_SEND_NO_REPLY,
    NS_APPLICATION_ACTIVATE_IGNORING_OTHER_APPS,
    NS_APPLICATION_ACTIVATION_POLICY_PROHIBITED,
    MockRunningApplication,
    MockWorkspace,
    install_mock_appkit,
)


FINDER = ProcessHandle(0, 100)
SAFARI = ProcessHandle(0, 200)
AGENT = ProcessHandle(0, 300)


@pytest.fixture
def workspace() -> MockWorkspace:
    """Finder (front), Safari and a background-only agent."""
    return MockWorkspace(
        apps=[
            MockRunningApplication(
                pid=100,
                name="Finder",
                bundle_path="/System/Library/CoreServices/Finder.app",
                info={"CFBundlePackageType": "FNDR", "CFBundleSignature": "MACS"},
            ),
            MockRunningApplication(
                pid=200,
                name="Safari",
                bundle_path="/Applications/Safari.app",
                info={"CFBundlePackageType": "APPL", "CFBundleSignature": "sfri"},
            ),
            MockRunningApplication(
                pid=300,
                name="agent",
                executable_path="/usr/libexec/agent",
                policy=NS_APPLICATION_ACTIVATION_POLICY_PROHIBITED,
            ),
        ],
        bundle_ids={"/Applications/Safari.app": "com.apple.Safari", "/Applications/Empty.app": None},
        front_pid=100,
    )


@pytest.fixture
def appkit_client(monkeypatch, workspace):
    """appswitch.core.appkit_client imported against the mock frameworks."""
    install_mock_appkit(monkeypatch, workspace)
    monkeypatch.delitem(sys.modules, "appswitch.core.appkit_client", raising=False)
    return importlib.import_module("appswitch.core.appkit_client")


@pytest.fixture
def process_manager(appkit_client, workspace):
    return appkit_client.AppKitProcessManager(workspace)


def status_of(excinfo) -> int:
    return excinfo.value.status


class TestEnumeration:
    """Tests for next_process and get_process_info."""

    def test_walks_snapshot_in_order(self, process_manager):
        handles = []
        handle = process_manager.next_process(None)
        while handle is not None:
            handles.append(handle)
            handle = process_manager.next_process(handle)
        assert handles == [FINDER, SAFARI, AGENT]

    def test_handle_missing_from_snapshot(self, process_manager):
        process_manager.next_process(None)
        with pytest.raises(OSStatusError) as excinfo:
            process_manager.next_process(ProcessHandle(0, 999))
        assert status_of(excinfo) == PARAM_ERR

    def test_snapshot_taken_at_start(self, process_manager, workspace):
        first = process_manager.next_process(None)
        workspace.apps.append(MockRunningApplication(pid=400, name="Late"))
        handle, seen = first, [first]
        while handle is not None:
            handle = process_manager.next_process(handle)
            seen.append(handle)
        assert ProcessHandle(0, 400) not in seen

    def test_process_info_from_bundle(self, process_manager):
        record = process_manager.get_process_info(SAFARI)
        assert record.handle == SAFARI
        assert record.pid == 200
        assert record.name == "Safari"
        assert record.path == "/Applications/Safari.app"
        assert record.file_type == b"APPL"
        assert record.creator == b"sfri"

    def test_path_falls_back_to_executable(self, process_manager):
        record = process_manager.get_process_info(AGENT)
        assert record.path == "/usr/libexec/agent"
        assert record.file_type == UNKNOWN_OSTYPE
        assert record.creator == UNKNOWN_OSTYPE

    def test_missing_signature_is_unknown(self, process_manager, workspace):
        del workspace.apps[1].info["CFBundleSignature"]
        record = process_manager.get_process_info(SAFARI)
        assert record.file_type == b"APPL"
        assert record.creator == UNKNOWN_OSTYPE

    def test_unknown_process(self, process_manager):
        with pytest.raises(OSStatusError) as excinfo:
            process_manager.get_process_info(ProcessHandle(0, 999))
        assert status_of(excinfo) == PROC_NOT_FOUND

    def test_terminated_process(self, process_manager, workspace):
        workspace.apps[1].terminated = True
        with pytest.raises(OSStatusError) as excinfo:
            process_manager.get_process_info(SAFARI)
        assert status_of(excinfo) == PROC_NOT_FOUND

    def test_front_process(self, process_manager, workspace):
        assert process_manager.front_process() == FINDER
        workspace.front_pid = None
        with pytest.raises(OSStatusError):
            process_manager.front_process()


@pytest.mark.parametrize(
    "value,expected",
    [
        ("MACS", b"MACS"),
        (None, UNKNOWN_OSTYPE),
        ("", UNKNOWN_OSTYPE),
        ("APPLE", UNKNOWN_OSTYPE),
        ("中文ab", UNKNOWN_OSTYPE),
    ],
)
def test_ostype_conversion(appkit_client, value, expected):
    assert appkit_client._ostype(value) == expected


def test_fourcc(appkit_client):
    assert appkit_client.fourcc(b"aevt") == 0x61657674


class TestVisibility:
    """Tests for switching, showing and hiding."""

    def test_set_front_activates(self, process_manager, workspace):
        process_manager.set_front(SAFARI)
        assert workspace.apps[1].activations == [NS_APPLICATION_ACTIVATE_IGNORING_OTHER_APPS]

    def test_set_front_refused(self, process_manager, workspace):
        workspace.apps[1].refuse = True
        with pytest.raises(OSStatusError) as excinfo:
            process_manager.set_front(SAFARI)
        assert status_of(excinfo) == PARAM_ERR

    @pytest.mark.parametrize("method", ["set_front", "show", "hide"])
    def test_background_only_application(self, process_manager, method):
        with pytest.raises(OSStatusError) as excinfo:
            getattr(process_manager, method)(AGENT)
        assert status_of(excinfo) == APP_IS_DAEMON

    def test_hide_and_show(self, process_manager, workspace):
        process_manager.hide(SAFARI)
        assert workspace.apps[1].hidden
        process_manager.show(SAFARI)
        assert not workspace.apps[1].hidden

    def test_hide_refused(self, process_manager, workspace):
        workspace.apps[1].refuse = True
        with pytest.raises(OSStatusError) as excinfo:
            process_manager.hide(SAFARI)
        assert status_of(excinfo) == PARAM_ERR

    def test_show_all(self, process_manager, workspace):
        workspace.apps[0].hidden = True
        workspace.apps[1].hidden = True
        process_manager.show_all(FINDER)
        assert not any(app.hidden for app in workspace.apps)

    def test_show_all_refused(self, process_manager, workspace):
        workspace.apps[0].hidden = True
        workspace.apps[0].refuse = True
        workspace.apps[1].hidden = True
        with pytest.raises(OSStatusError) as excinfo:
            process_manager.show_all(SAFARI)
        assert status_of(excinfo) == PARAM_ERR
        # Remaining applications are still shown
        assert not workspace.apps[1].hidden

    def test_hide_others(self, process_manager, workspace):
        process_manager.hide_others(FINDER)
        assert not workspace.apps[0].hidden
        assert workspace.apps[1].hidden
        # Background-only applications are left alone
        assert not workspace.apps[2].hidden

    def test_hide_others_refused(self, process_manager, workspace):
        workspace.apps[1].refuse = True
        with pytest.raises(OSStatusError) as excinfo:
            process_manager.hide_others(FINDER)
        assert status_of(excinfo) == PARAM_ERR

    def test_hide_others_unknown_process(self, process_manager):
        with pytest.raises(OSStatusError) as excinfo:
            process_manager.hide_others(ProcessHandle(0, 999))
        assert status_of(excinfo) == PROC_NOT_FOUND


class TestTermination:
    """Tests for quit and kill."""

    @pytest.fixture
    def signals(self, monkeypatch, appkit_client):
        sent = []
        errors = {}

        class FakeProcess:
            def __init__(self, pid):
                self.pid = pid

            def send_signal(self, sig):
                if self.pid in errors:
                    raise errors[self.pid]
                sent.append((self.pid, sig))

        monkeypatch.setattr(appkit_client.psutil, "Process", FakeProcess)
        return sent, errors

    def test_kill_sends_sigint(self, process_manager, signals):
        sent, _ = signals
        process_manager.kill(SAFARI)
        assert sent == [(200, signal.SIGINT)]

    def test_hard_kill_sends_sigkill(self, process_manager, signals):
        sent, _ = signals
        process_manager.kill(SAFARI, hard=True)
        assert sent == [(200, signal.SIGKILL)]

    def test_kill_vanished_process(self, process_manager, signals):
        _, errors = signals
        errors[200] = psutil.NoSuchProcess(200)
        with pytest.raises(OSStatusError) as excinfo:
            process_manager.kill(SAFARI)
        assert status_of(excinfo) == PROC_NOT_FOUND

    def test_kill_access_denied(self, process_manager, signals):
        _, errors = signals
        errors[200] = psutil.AccessDenied(200)
        with pytest.raises(OSStatusError) as excinfo:
            process_manager.kill(SAFARI)
        assert status_of(excinfo) == PERM_ERR

    @pytest.mark.parametrize("pid", [-1, 999])
    def test_kill_unknown_handle(self, process_manager, signals, pid):
        sent, _ = signals
        with pytest.raises(OSStatusError) as excinfo:
            process_manager.kill(ProcessHandle(0, pid))
        assert status_of(excinfo) == PROC_NOT_FOUND
        assert sent == []

    def test_quit_sends_apple_event(self, appkit_client, process_manager, workspace):
        process_manager.quit(SAFARI)
        (event,) = workspace.apple_events
        assert event.event_class == appkit_client.fourcc(b"aevt")
        assert event.event_id == appkit_client.fourcc(b"quit")
        assert event.target_pid == 200
        assert event.return_id == -1
        assert event.transaction_id == 0
        assert event.sent == [(NS_APPLE_EVENT_SEND_NO_REPLY, -2.0)]

    def test_quit_error(self, process_manager, workspace):
        workspace.quit_error = -609
        with pytest.raises(OSStatusError) as excinfo:
            process_manager.quit(SAFARI)
        assert status_of(excinfo) == -609

    def test_quit_unknown_process(self, process_manager, workspace):
        with pytest.raises(OSStatusError):
            process_manager.quit(ProcessHandle(0, 999))
        assert workspace.apple_events == []


class TestBundleResolution:
    """Tests for resolve_bundle_identifier against mock Foundation."""

    @pytest.fixture
    def resolve(self, monkeypatch, workspace):
        install_mock_appkit(monkeypatch, workspace)
        from appswitch.core.bundle import resolve_bundle_identifier
        return resolve_bundle_identifier

    def test_identifier(self, resolve):
        assert resolve("/Applications/Safari.app") == "com.apple.Safari"

    def test_no_bundle(self, resolve):
        assert resolve("/Applications/Missing.app") is None

    def test_bundle_without_identifier(self, resolve):
        assert resolve("/Applications/Empty.app") is None

    @pytest.mark.parametrize("path", ["", "/Applications/Bad\0.app"])
    def test_invalid_location(self, resolve, path):
        from appswitch.core.bundle import BundleLocationError
        with pytest.raises(BundleLocationError):
            resolve(path)
