"""OS status codes and the appswitch exception hierarchy.

Process Manager and window server calls report failures as integer
status codes (OSStatus). ``describe_status`` turns one into the text
shown to the user; the mapping is a fixed table and anything outside it
is reported as an unknown error, so no failure is ever silent.
"""

from typing import Dict


# Status codes
NO_ERR = 0
FNF_ERR = -43  # fnfErr
PARAM_ERR = -50  # paramErr
PERM_ERR = -54  # permErr
PROC_NOT_FOUND = -600  # procNotFound
APP_IS_DAEMON = -606  # appIsDaemon
CG_ERROR_ILLEGAL_ARGUMENT = 1001  # kCGErrorIllegalArgument

STATUS_DESCRIPTIONS: Dict[int, str] = {
    # Process Manager errors
    APP_IS_DAEMON: "application is background-only",
    PROC_NOT_FOUND: "unable to connect to system service.\nAre you logged in?",
    # CoreGraphics errors
    CG_ERROR_ILLEGAL_ARGUMENT: "window server error.\nAre you logged in?",
    FNF_ERR: "file not found",
}


def describe_status(status: int) -> str:
    """Return human-readable text for an OS status code.

    Args:
        status: OSStatus value

    Returns:
        Description followed by the numeric code, e.g.
        ``"file not found (-43)"`` or ``"unknown error (-9999)"``
    """
    desc = STATUS_DESCRIPTIONS.get(status, "unknown error")
    return f"{desc} ({status})"


class AppSwitchError(Exception):
    """Base class for every failure that ends an appswitch invocation."""

    pass


class OSStatusError(AppSwitchError):
    """An OS call returned a non-success status."""

    def __init__(self, status: int, attempted: str = "OS call failed"):
        self.status = status
        self.attempted = attempted
        super().__init__(f"{attempted}: {describe_status(status)}")

    def with_context(self, attempted: str) -> "OSStatusError":
        """Return a copy of this error describing what was being attempted."""
        return OSStatusError(self.status, attempted)


class InternalError(AppSwitchError):
    """An action/criterion combination that validation should have excluded."""

    def __init__(self, message: str):
        super().__init__(f"internal error: {message}")
