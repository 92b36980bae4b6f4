"""Request models built by the option parser.

A Request combines exactly one match criterion with one primary action,
one global action and one final action. It is constructed once from the
command line and never mutated.
"""

from dataclasses import dataclass
from enum import Enum


class MatchCriterion:
    """Base class for the closed set of match criteria."""

    __slots__ = ()


@dataclass(frozen=True)
class FrontCriterion(MatchCriterion):
    """Match the frontmost application without scanning."""


@dataclass(frozen=True)
class AllCriterion(MatchCriterion):
    """Match every application (listing)."""


@dataclass(frozen=True)
class CreatorCriterion(MatchCriterion):
    """Match by four-byte executable creator code."""

    code: bytes

    def __post_init__(self):
        if len(self.code) != 4:
            raise ValueError(f"creator code must be 4 bytes, got {self.code!r}")


@dataclass(frozen=True)
class BundleIDCriterion(MatchCriterion):
    """Match by bundle identifier, ignoring case."""

    bundle_id: str


@dataclass(frozen=True)
class NameCriterion(MatchCriterion):
    """Match by exact process name."""

    name: str


@dataclass(frozen=True)
class PidCriterion(MatchCriterion):
    """Match by numeric process ID."""

    pid: int

    def __post_init__(self):
        if self.pid < 0:
            raise ValueError(f"pid must be non-negative, got {self.pid}")


@dataclass(frozen=True)
class PathCriterion(MatchCriterion):
    """Match by exact bundle path."""

    path: str


class AppAction(Enum):
    """Primary action applied to the matched application."""

    NONE = "none"
    SWITCH = "switch"
    SHOW = "show"
    HIDE = "hide"
    QUIT = "quit"
    KILL = "kill"
    KILL_HARD = "kill-hard"
    LIST = "list"
    LIST_LONG = "list-long"
    PRINT_PID = "print-pid"

    @property
    def is_list(self) -> bool:
        return self in (AppAction.LIST, AppAction.LIST_LONG)

    @property
    def long_form(self) -> bool:
        return self is AppAction.LIST_LONG


class GlobalAction(Enum):
    """Action applied to all other applications."""

    NONE = "none"
    SHOW_ALL = "show-all"
    HIDE_OTHERS = "hide-others"


class FinalAction(Enum):
    """Trailing action re-targeting the (possibly new) frontmost application."""

    NONE = "none"
    BRING_FRONT_TO_FRONT = "bring-front-to-front"


@dataclass(frozen=True)
class Request:
    """Validated, immutable description of one invocation."""

    criterion: MatchCriterion
    action: AppAction = AppAction.SWITCH
    global_action: GlobalAction = GlobalAction.NONE
    final_action: FinalAction = FinalAction.NONE

    def __post_init__(self):
        if not isinstance(self.criterion, MatchCriterion):
            raise ValueError(f"invalid match criterion: {self.criterion!r}")
        if self.action is AppAction.NONE and not isinstance(self.criterion, FrontCriterion):
            raise ValueError("an application action is required unless matching the front application")
