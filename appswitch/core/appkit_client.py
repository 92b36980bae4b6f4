"""macOS process manager backed by AppKit (PyObjC) and psutil.

- Enumeration: NSWorkspace.runningApplications(), in its native order
- Visibility: NSRunningApplication activate/hide/unhide
- Quit: an asynchronous 'aevt/quit' Apple event, sent without reply
- Kill: SIGINT / SIGKILL through psutil

Failures are reported as OSStatusError with the status code the classic
Process Manager would have returned for the same condition.
"""

import logging
import signal
from typing import List, Optional

import psutil
from AppKit import (
    NSApplicationActivateIgnoringOtherApps,
    NSApplicationActivationPolicyProhibited,
    NSRunningApplication,
    NSWorkspace,
)
from Foundation import NSAppleEventDescriptor, NSAppleEventSendNoReply, NSBundle

from ..models.process import UNKNOWN_OSTYPE, ProcessHandle, ProcessRecord
from .process_manager import ProcessManager
from .status import APP_IS_DAEMON, PARAM_ERR, PERM_ERR, PROC_NOT_FOUND, OSStatusError


logger = logging.getLogger('appswitch.appkit')


def fourcc(code: bytes) -> int:
    """Pack a four-character code into its 32-bit integer form."""
    return int.from_bytes(code, "big")


K_CORE_EVENT_CLASS = fourcc(b"aevt")
K_AE_QUIT_APPLICATION = fourcc(b"quit")
K_AUTO_GENERATE_RETURN_ID = -1
K_ANY_TRANSACTION_ID = 0
K_NO_TIMEOUT = -2.0


def _ostype(value) -> bytes:
    """Convert an Info.plist type/creator string to 4 raw bytes."""
    if not value:
        return UNKNOWN_OSTYPE
    try:
        code = str(value).encode("mac_roman")
    except UnicodeEncodeError:
        return UNKNOWN_OSTYPE
    return code if len(code) == 4 else UNKNOWN_OSTYPE


class AppKitProcessManager(ProcessManager):
    """ProcessManager for the macOS window server.

    Handles are ``(0, pid)``: the pid identifies an NSRunningApplication
    for as long as it runs.
    """

    def __init__(self, workspace=None):
        """Initialize AppKit process manager.

        Args:
            workspace: NSWorkspace instance (default: shared workspace)
        """
        self.workspace = workspace or NSWorkspace.sharedWorkspace()
        self._snapshot: List[int] = []

    def _app(self, handle: ProcessHandle):
        app = NSRunningApplication.runningApplicationWithProcessIdentifier_(handle.low)
        if app is None or app.isTerminated():
            raise OSStatusError(PROC_NOT_FOUND)
        return app

    def _visible_app(self, handle: ProcessHandle):
        app = self._app(handle)
        if app.activationPolicy() == NSApplicationActivationPolicyProhibited:
            raise OSStatusError(APP_IS_DAEMON)
        return app

    def next_process(self, after: Optional[ProcessHandle]) -> Optional[ProcessHandle]:
        if after is None:
            self._snapshot = [int(app.processIdentifier()) for app in self.workspace.runningApplications()]
            logger.debug(f"Enumerating {len(self._snapshot)} running applications")
            index = 0
        else:
            try:
                index = self._snapshot.index(after.low) + 1
            except ValueError:
                raise OSStatusError(PARAM_ERR)

        if index >= len(self._snapshot):
            return None
        return ProcessHandle(0, self._snapshot[index])

    def get_process_info(self, handle: ProcessHandle) -> ProcessRecord:
        app = self._app(handle)

        bundle_url = app.bundleURL()
        executable_url = app.executableURL()
        if bundle_url is not None:
            path = str(bundle_url.path())
        elif executable_url is not None:
            path = str(executable_url.path())
        else:
            path = ""

        file_type = creator = UNKNOWN_OSTYPE
        if bundle_url is not None:
            bundle = NSBundle.bundleWithURL_(bundle_url)
            if bundle is not None:
                file_type = _ostype(bundle.objectForInfoDictionaryKey_("CFBundlePackageType"))
                creator = _ostype(bundle.objectForInfoDictionaryKey_("CFBundleSignature"))

        return ProcessRecord(
            handle=handle,
            pid=int(app.processIdentifier()),
            file_type=file_type,
            creator=creator,
            name=str(app.localizedName() or ""),
            path=path,
        )

    def front_process(self) -> ProcessHandle:
        app = self.workspace.frontmostApplication()
        if app is None:
            raise OSStatusError(PROC_NOT_FOUND)
        return ProcessHandle(0, int(app.processIdentifier()))

    def set_front(self, handle: ProcessHandle) -> None:
        app = self._visible_app(handle)
        if not app.activateWithOptions_(NSApplicationActivateIgnoringOtherApps):
            raise OSStatusError(PARAM_ERR)

    def show(self, handle: ProcessHandle) -> None:
        app = self._visible_app(handle)
        if app.isHidden() and not app.unhide():
            raise OSStatusError(PARAM_ERR)

    def hide(self, handle: ProcessHandle) -> None:
        app = self._visible_app(handle)
        if not app.isHidden() and not app.hide():
            raise OSStatusError(PARAM_ERR)

    def show_all(self, handle: ProcessHandle) -> None:
        self._app(handle)
        refused = []
        for app in self.workspace.runningApplications():
            if app.isHidden() and not app.unhide():
                refused.append(str(app.localizedName()))
        if refused:
            logger.debug(f"Applications refused to unhide: {', '.join(refused)}")
            raise OSStatusError(PARAM_ERR)

    def hide_others(self, handle: ProcessHandle) -> None:
        self._app(handle)
        refused = []
        for app in self.workspace.runningApplications():
            if int(app.processIdentifier()) == handle.low:
                continue
            if app.activationPolicy() == NSApplicationActivationPolicyProhibited or app.isHidden():
                continue
            if not app.hide():
                refused.append(str(app.localizedName()))
        if refused:
            logger.debug(f"Applications refused to hide: {', '.join(refused)}")
            raise OSStatusError(PARAM_ERR)

    def kill(self, handle: ProcessHandle, hard: bool = False) -> None:
        self._app(handle)
        sig = signal.SIGKILL if hard else signal.SIGINT
        try:
            psutil.Process(handle.low).send_signal(sig)
        except psutil.NoSuchProcess:
            raise OSStatusError(PROC_NOT_FOUND)
        except psutil.AccessDenied:
            raise OSStatusError(PERM_ERR)

    def quit(self, handle: ProcessHandle) -> None:
        self._app(handle)
        target = NSAppleEventDescriptor.descriptorWithProcessIdentifier_(handle.low)
        event = NSAppleEventDescriptor.appleEventWithEventClass_eventID_targetDescriptor_returnID_transactionID_(
            K_CORE_EVENT_CLASS,
            K_AE_QUIT_APPLICATION,
            target,
            K_AUTO_GENERATE_RETURN_ID,
            K_ANY_TRANSACTION_ID,
        )
        _reply, error = event.sendEventWithOptions_timeout_error_(NSAppleEventSendNoReply, K_NO_TIMEOUT, None)
        if error is not None:
            raise OSStatusError(int(error.code()))
