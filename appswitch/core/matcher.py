"""Process matching.

Walks the process list front-to-back through a ProcessManager and
selects the first application satisfying the request's match criterion.
In listing mode every matching application is printed instead.
"""

import logging
from typing import Callable, Iterator, Optional

from ..models.process import ProcessHandle, ProcessRecord
from ..models.request import (
    AllCriterion,
    BundleIDCriterion,
    CreatorCriterion,
    FrontCriterion,
    MatchCriterion,
    NameCriterion,
    PathCriterion,
    PidCriterion,
    Request,
)
from .bundle import BundleLocationError, resolve_bundle_identifier
from .process_manager import ProcessManager
from .status import AppSwitchError, InternalError, OSStatusError


logger = logging.getLogger('appswitch.matcher')

BundleResolver = Callable[[str], Optional[str]]


class NoMatchingProcessError(AppSwitchError):
    """Enumeration finished without a matching application."""

    def __init__(self, message: str = "no matching process found"):
        super().__init__(message)


class ProcessMatcher:
    """Select running applications matching a criterion."""

    def __init__(self, manager: ProcessManager, resolver: Optional[BundleResolver] = None):
        """Initialize process matcher.

        Args:
            manager: OS process manager
            resolver: Bundle identifier resolver (default: NSBundle lookup)
        """
        self.manager = manager
        self.resolver = resolver or resolve_bundle_identifier

    def front_record(self) -> ProcessRecord:
        """Return a snapshot of the frontmost application.

        Raises:
            OSStatusError: If the front process or its info cannot be read
        """
        try:
            handle = self.manager.front_process()
        except OSStatusError as e:
            raise e.with_context("can't get frontmost process")
        logger.debug(f"front application PSN {handle}")
        return self._process_info(handle)

    def _process_info(self, handle: ProcessHandle) -> ProcessRecord:
        try:
            return self.manager.get_process_info(handle)
        except OSStatusError as e:
            raise e.with_context(f"can't get information for process PSN {handle}")

    def iter_records(self) -> Iterator[ProcessRecord]:
        """Yield a snapshot of every process in native enumeration order.

        Raises:
            OSStatusError: On any status other than end-of-list
        """
        handle: Optional[ProcessHandle] = None
        while True:
            try:
                handle = self.manager.next_process(handle)
            except OSStatusError as e:
                raise e.with_context("can't get next process")
            if handle is None:
                return

            record = self._process_info(handle)
            logger.debug(f"{handle}: {record.name} : {record.path}")
            yield record

    def matches(self, criterion: MatchCriterion, record: ProcessRecord) -> bool:
        """Check whether ``record`` satisfies ``criterion``.

        Raises:
            InternalError: For criteria that are not matched by scanning
        """
        if isinstance(criterion, AllCriterion):
            return True
        if isinstance(criterion, CreatorCriterion):
            return record.creator == criterion.code
        if isinstance(criterion, NameCriterion):
            return record.name == criterion.name
        if isinstance(criterion, PidCriterion):
            return record.pid == criterion.pid
        if isinstance(criterion, PathCriterion):
            return record.path == criterion.path
        if isinstance(criterion, BundleIDCriterion):
            try:
                bundle_id = record.bundle_identifier(self.resolver)
            except BundleLocationError as e:
                logger.debug(f"Skipping '{record.name}' (PSN {record.handle}): {e}")
                return False
            if bundle_id is None:
                return False
            return bundle_id.casefold() == criterion.bundle_id.casefold()
        raise InternalError("invalid match type")

    def find(self, criterion: MatchCriterion) -> ProcessRecord:
        """Return the first application matching ``criterion``.

        Raises:
            NoMatchingProcessError: If no application matches
        """
        if isinstance(criterion, FrontCriterion):
            return self.front_record()

        for record in self.iter_records():
            if self.matches(criterion, record):
                logger.info(f"Matched '{record.name}' (PSN {record.handle}, pid {record.pid})")
                return record

        raise NoMatchingProcessError()

    def list_processes(self, criterion: MatchCriterion, formatter) -> ProcessRecord:
        """Print every application matching ``criterion``.

        Args:
            criterion: Usually AllCriterion
            formatter: ProcessListFormatter receiving header and rows

        Returns:
            The frontmost application, as the nominal match of a listing

        Raises:
            BundleLocationError: If a long-form row cannot locate its bundle
        """
        formatter.write_header()
        count = 0
        for record in self.iter_records():
            if not self.matches(criterion, record):
                continue
            bundle_id = None
            if formatter.long_form:
                try:
                    bundle_id = record.bundle_identifier(self.resolver)
                except BundleLocationError:
                    raise BundleLocationError(
                        f"can't get bundle location for process '{record.name}' "
                        f"(PSN {record.handle}, pid {record.pid})"
                    )
            formatter.write_row(record, bundle_id)
            count += 1

        logger.info(f"Listed {count} processes")
        return self.front_record()

    def select(self, request: Request, formatter=None) -> ProcessRecord:
        """Resolve the request's criterion to one application.

        Listing requests print through ``formatter`` and return the front
        application.
        """
        if request.action.is_list:
            if formatter is None:
                raise InternalError("listing requested without a formatter")
            if isinstance(request.criterion, FrontCriterion):
                raise InternalError("invalid match type")
            return self.list_processes(request.criterion, formatter)
        return self.find(request.criterion)
