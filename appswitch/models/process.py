"""Process snapshot models.

- ProcessHandle: opaque two-part identifier of a running application
- ProcessRecord: metadata captured for one application during enumeration
"""

from dataclasses import dataclass, field
from typing import Callable, Optional


# Four NUL bytes, used when an application declares no type or creator
UNKNOWN_OSTYPE = b"\0\0\0\0"

_UNRESOLVED = object()


@dataclass(frozen=True)
class ProcessHandle:
    """Opaque process handle (the classic PSN).

    Handles are only compared for equality; the two halves carry no
    arithmetic meaning.
    """

    high: int
    low: int

    def __str__(self) -> str:
        return f"{self.high}.{self.low}"


def ostype_to_str(code: bytes) -> str:
    """Render a 4-byte type/creator tag for display.

    Bytes below printable ASCII become spaces.
    """
    return "".join(" " if b < 0x20 else bytes([b]).decode("mac_roman") for b in code)


@dataclass
class ProcessRecord:
    """Snapshot of one running application at enumeration time."""

    handle: ProcessHandle
    pid: int
    file_type: bytes  # ExecFileType, 4 bytes
    creator: bytes  # ExecFileCreator, 4 bytes
    name: str
    path: str
    _bundle_identifier: object = field(default=_UNRESOLVED, repr=False, compare=False)

    def __post_init__(self):
        if len(self.file_type) != 4:
            raise ValueError(f"file type must be 4 bytes, got {self.file_type!r}")
        if len(self.creator) != 4:
            raise ValueError(f"creator must be 4 bytes, got {self.creator!r}")

    def bundle_identifier(self, resolver: Callable[[str], Optional[str]]) -> Optional[str]:
        """Resolve the bundle identifier once and remember it on this record.

        Args:
            resolver: Callable mapping a bundle path to its identifier

        Returns:
            Bundle identifier, or None if the path holds no identifiable bundle
        """
        if self._bundle_identifier is _UNRESOLVED:
            self._bundle_identifier = resolver(self.path)
        return self._bundle_identifier

    @property
    def type_str(self) -> str:
        return ostype_to_str(self.file_type)

    @property
    def creator_str(self) -> str:
        return ostype_to_str(self.creator)
