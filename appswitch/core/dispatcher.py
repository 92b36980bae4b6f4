"""Action dispatch.

Runs one request end to end:
1. Select the matching application (or print the listing)
2. Apply the primary action to it
3. Apply the global action (show all / hide others) through its handle
4. Apply the final action to whichever application is then frontmost

Every step raises on failure, so later steps never run after an error.
"""

import logging
import sys
import time
from typing import Callable, Optional, TextIO

from ..models.process import ProcessRecord
from ..models.request import AppAction, FinalAction, GlobalAction, Request
from .config import AppSwitchConfig
from .matcher import BundleResolver, ProcessMatcher
from .process_manager import ProcessManager
from .status import AppSwitchError, InternalError, OSStatusError


logger = logging.getLogger('appswitch.dispatcher')


class Dispatcher:
    """Carry out a Request against a ProcessManager."""

    def __init__(
        self,
        manager: ProcessManager,
        config: Optional[AppSwitchConfig] = None,
        resolver: Optional[BundleResolver] = None,
        out: Optional[TextIO] = None,
        sleep: Optional[Callable[[float], None]] = None,
    ):
        """Initialize dispatcher.

        Args:
            manager: OS process manager
            config: Settings (default: AppSwitchConfig())
            resolver: Bundle identifier resolver passed to the matcher
            out: Stream for listing and pid output (default: stdout)
            sleep: Pause function used for the settle delay (default: time.sleep)
        """
        self.manager = manager
        self.config = config or AppSwitchConfig()
        self.matcher = ProcessMatcher(manager, resolver)
        self.out = out if out is not None else sys.stdout
        self.sleep = sleep or time.sleep

    def run(self, request: Request, formatter=None) -> ProcessRecord:
        """Execute ``request``.

        Args:
            request: Parsed request
            formatter: ProcessListFormatter, required for listing actions

        Returns:
            The selected application

        Raises:
            AppSwitchError: On the first failing step
        """
        record = self.matcher.select(request, formatter)
        self.apply_action(request.action, record)
        self.apply_global_action(request.global_action, record)
        self.apply_final_action(request.final_action, request.global_action)
        return record

    def _call(self, attempted: str, func, *args, **kwargs) -> None:
        try:
            func(*args, **kwargs)
        except OSStatusError as e:
            raise e.with_context(attempted)

    def apply_action(self, action: AppAction, record: ProcessRecord) -> None:
        """Apply the primary action to the selected application."""
        handle = record.handle
        logger.info(f"Action {action.value} on '{record.name}' (PSN {handle})")

        if action in (AppAction.NONE, AppAction.LIST, AppAction.LIST_LONG):
            return
        if action is AppAction.SWITCH:
            self._call("can't set front process", self.manager.set_front, handle)
        elif action is AppAction.SHOW:
            self._call("can't show process", self.manager.show, handle)
        elif action is AppAction.HIDE:
            self._call("can't hide process", self.manager.hide, handle)
        elif action is AppAction.QUIT:
            self._call("can't quit process", self.manager.quit, handle)
        elif action is AppAction.KILL:
            self._call("can't kill process", self.manager.kill, handle, hard=False)
        elif action is AppAction.KILL_HARD:
            self._call("can't kill process", self.manager.kill, handle, hard=True)
        elif action is AppAction.PRINT_PID:
            if record.pid <= 0:
                raise AppSwitchError("can't get process ID")
            print(record.pid, file=self.out)
        else:
            raise InternalError("invalid application action")

    def apply_global_action(self, action: GlobalAction, record: ProcessRecord) -> None:
        """Show all or hide other applications relative to the selection."""
        if action is GlobalAction.NONE:
            return
        logger.info(f"Global action {action.value} relative to PSN {record.handle}")
        if action is GlobalAction.SHOW_ALL:
            self._call("can't show all processes", self.manager.show_all, record.handle)
        elif action is GlobalAction.HIDE_OTHERS:
            self._call("can't hide other processes", self.manager.hide_others, record.handle)
        else:
            raise InternalError("invalid action")

    def apply_final_action(self, action: FinalAction, global_action: GlobalAction) -> None:
        """Re-show and re-front the application that is frontmost now."""
        if action is FinalAction.NONE:
            return
        if action is not FinalAction.BRING_FRONT_TO_FRONT:
            raise InternalError("invalid final action")

        attempted = "can't bring current application's windows to the front"
        try:
            handle = self.manager.front_process()
        except OSStatusError as e:
            raise e.with_context("can't get frontmost process")
        logger.debug(f"front application PSN {handle}")

        # Window server state lags behind show-all/hide-others requests
        if global_action is not GlobalAction.NONE:
            logger.debug(f"Waiting {self.config.settle_delay}s for window server")
            self.sleep(self.config.settle_delay)

        logger.debug(f"posting show request for {handle}")
        self._call(attempted, self.manager.show, handle)
        self._call(attempted, self.manager.set_front, handle)
