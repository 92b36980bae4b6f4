"""Process manager interface.

The matcher and dispatcher talk to the operating system only through
this interface:
- Enumeration (next process, process info, front process)
- Visibility (set front, show, hide, show all, hide others)
- Lifecycle (kill, quit)

Every method either succeeds or raises OSStatusError carrying the OS
status code. None of them retry.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ..models.process import ProcessHandle, ProcessRecord


class ProcessManager(ABC):
    """Abstract OS process manager."""

    @abstractmethod
    def next_process(self, after: Optional[ProcessHandle]) -> Optional[ProcessHandle]:
        """Return the process following ``after`` in native order.

        Args:
            after: Previous handle, or None to start from the first process

        Returns:
            Next handle, or None once the process list is exhausted

        Raises:
            OSStatusError: If the process list cannot be read
        """
        pass

    @abstractmethod
    def get_process_info(self, handle: ProcessHandle) -> ProcessRecord:
        """Return a metadata snapshot for ``handle``."""
        pass

    @abstractmethod
    def front_process(self) -> ProcessHandle:
        """Return the handle of the frontmost application."""
        pass

    @abstractmethod
    def set_front(self, handle: ProcessHandle) -> None:
        """Bring the application to the front and give it focus."""
        pass

    @abstractmethod
    def show(self, handle: ProcessHandle) -> None:
        """Show the application's windows without changing focus."""
        pass

    @abstractmethod
    def hide(self, handle: ProcessHandle) -> None:
        """Hide the application's windows."""
        pass

    @abstractmethod
    def show_all(self, handle: ProcessHandle) -> None:
        """Show every hidden application."""
        pass

    @abstractmethod
    def hide_others(self, handle: ProcessHandle) -> None:
        """Hide every application except ``handle``."""
        pass

    @abstractmethod
    def kill(self, handle: ProcessHandle, hard: bool = False) -> None:
        """Terminate the process; ``hard`` bypasses graceful shutdown."""
        pass

    @abstractmethod
    def quit(self, handle: ProcessHandle) -> None:
        """Send a quit request to the application without waiting for a reply."""
        pass
