"""Command-line option parsing.

Turns argv into an immutable Request. Conflicting flags are rejected as
soon as the second one is seen, before any OS interaction happens.

Flags may be combined the way getopt allows (``-sH``, ``-cToyS``); an
optional trailing path selects the application by bundle path when no
other criterion flag is given.
"""

import argparse
from typing import Callable, List, Optional, Tuple

from .. import __version__
from ..core.status import AppSwitchError
from ..models.request import (
    AllCriterion,
    AppAction,
    BundleIDCriterion,
    CreatorCriterion,
    FinalAction,
    FrontCriterion,
    GlobalAction,
    MatchCriterion,
    NameCriterion,
    PathCriterion,
    PidCriterion,
    Request,
)


PROG = "appswitch"
USAGE = "%(prog)s [-sShHqkKFlLP] [-c creator] [-i bundleID] [-a name] [-p pid] [path]"

CRITERION_CONFLICT = "choose only one of -c, -i, -p, -a options"
ACTION_CONFLICT = "choose only one of -s, -h, -q, -k, -K, -l, -L, -P options"
GLOBAL_CONFLICT = "choose -S, -H or neither option"
FINAL_CONFLICT = "choose only one -F option"


class UsageError(AppSwitchError):
    """Malformed or conflicting command-line arguments.

    A UsageError without a message asks for the full usage text.
    """

    def __init__(self, message: Optional[str] = None):
        self.message = message
        super().__init__(message or "usage error")


def parse_creator(value: str) -> CreatorCriterion:
    """Parse a four-character creator code into its raw bytes."""
    if len(value) != 4:
        raise UsageError("creator (argument of -c) must be four characters long")
    try:
        code = value.encode("mac_roman")
    except UnicodeEncodeError:
        raise UsageError("creator (argument of -c) must be four characters long")
    return CreatorCriterion(code)


def parse_pid(value: str) -> PidCriterion:
    """Parse a non-negative process identifier (ASCII digits only)."""
    value = value.strip()
    if not (value.isascii() and value.isdigit()):
        raise UsageError("invalid process identifier (argument of -p)")
    return PidCriterion(int(value))


class _CriterionAction(argparse.Action):
    """Store a match criterion, rejecting a second one."""

    def __init__(self, option_strings, dest, factory: Callable[[str], MatchCriterion] = None, **kwargs):
        self.factory = factory
        super().__init__(option_strings, dest, **kwargs)

    def __call__(self, parser, namespace, values, option_string=None):
        if getattr(namespace, self.dest, None) is not None:
            raise UsageError(CRITERION_CONFLICT)
        setattr(namespace, self.dest, self.factory(values))


class _ExclusiveFlag(argparse.Action):
    """Store ``const`` in ``dest`` unless another flag already set it."""

    def __init__(self, option_strings, dest, conflict: str = "", **kwargs):
        self.conflict = conflict
        super().__init__(option_strings, dest, nargs=0, **kwargs)

    def __call__(self, parser, namespace, values, option_string=None):
        if getattr(namespace, self.dest) is not self.default:
            raise UsageError(self.conflict)
        setattr(namespace, self.dest, self.const)


class OptionParser(argparse.ArgumentParser):
    """ArgumentParser raising UsageError instead of exiting."""

    def error(self, message):
        raise UsageError(message)


def build_parser() -> OptionParser:
    """Build the appswitch argument parser."""
    parser = OptionParser(
        prog=PROG,
        usage=USAGE,
        add_help=False,
        description="Switch to, show, hide, quit, kill or list running applications.",
        epilog=(
            "Option arguments that begin with '-' must be attached to their flag (-a-Name).\n\n"
            f"{PROG} {__version__}"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    actions = parser.add_argument_group("application actions")
    for flag, action, text in (
        ("-s", AppAction.SHOW, "show application, bring windows to front (do not switch)"),
        ("-h", AppAction.HIDE, "hide application"),
        ("-q", AppAction.QUIT, "quit application"),
        ("-k", AppAction.KILL, "kill application (SIGINT)"),
        ("-K", AppAction.KILL_HARD, "kill application hard (SIGKILL)"),
        ("-l", AppAction.LIST, "list applications"),
        ("-L", AppAction.LIST_LONG, "list applications including full paths and bundle identifiers"),
        ("-P", AppAction.PRINT_PID, "print application process ID"),
    ):
        actions.add_argument(
            flag, dest="action", action=_ExclusiveFlag, const=action,
            default=AppAction.NONE, conflict=ACTION_CONFLICT, help=text,
        )

    others = parser.add_argument_group("other applications")
    others.add_argument(
        "-S", dest="global_action", action=_ExclusiveFlag, const=GlobalAction.SHOW_ALL,
        default=GlobalAction.NONE, conflict=GLOBAL_CONFLICT, help="show all applications",
    )
    others.add_argument(
        "-H", dest="global_action", action=_ExclusiveFlag, const=GlobalAction.HIDE_OTHERS,
        default=GlobalAction.NONE, conflict=GLOBAL_CONFLICT, help="hide other applications",
    )
    others.add_argument(
        "-F", dest="final_action", action=_ExclusiveFlag, const=FinalAction.BRING_FRONT_TO_FRONT,
        default=FinalAction.NONE, conflict=FINAL_CONFLICT,
        help="bring current application's windows to front",
    )

    match = parser.add_argument_group("matching")
    match.add_argument(
        "-c", dest="criterion", metavar="creator", action=_CriterionAction, factory=parse_creator,
        default=None, help="match application by four-character creator code ('ToyS')",
    )
    match.add_argument(
        "-i", dest="criterion", metavar="bundleID", action=_CriterionAction, factory=BundleIDCriterion,
        default=None, help="match application by bundle identifier (com.apple.scripteditor)",
    )
    match.add_argument(
        "-p", dest="criterion", metavar="pid", action=_CriterionAction, factory=parse_pid,
        default=None, help="match application by process identifier [slower]",
    )
    match.add_argument(
        "-a", dest="criterion", metavar="name", action=_CriterionAction, factory=NameCriterion,
        default=None, help="match application by name",
    )
    match.add_argument(
        "paths", nargs="*", metavar="path", help="match application by bundle path",
    )

    general = parser.add_argument_group("general")
    general.add_argument("--help", action="help", help="show this help message and exit")
    general.add_argument("--version", action="version", version=f"{PROG} {__version__}")
    general.add_argument("--verbose", action="store_true", help="Enable verbose logging (INFO level)")
    general.add_argument(
        "--debug", action="store_true", help="Enable debug logging (DEBUG level, includes verbose)"
    )

    return parser


def resolve_request(namespace: argparse.Namespace) -> Request:
    """Apply defaulting rules to parsed flags and build the Request.

    Raises:
        UsageError: For a stray or conflicting path argument, or when
            nothing selects an application
    """
    criterion = namespace.criterion
    action = namespace.action
    paths = namespace.paths

    if criterion is not None and paths:
        raise UsageError()
    if len(paths) > 1:
        raise UsageError()

    if criterion is None:
        if paths:
            criterion = PathCriterion(paths[0])
        elif action.is_list:
            criterion = AllCriterion()
        elif namespace.global_action is not GlobalAction.NONE or namespace.final_action is not FinalAction.NONE:
            criterion = FrontCriterion()
        else:
            raise UsageError()

    if not isinstance(criterion, FrontCriterion) and action is AppAction.NONE:
        action = AppAction.SWITCH

    return Request(
        criterion=criterion,
        action=action,
        global_action=namespace.global_action,
        final_action=namespace.final_action,
    )


def parse_request(
    argv: List[str], parser: Optional[OptionParser] = None
) -> Tuple[Request, argparse.Namespace]:
    """Parse command-line arguments (without the program name).

    Args:
        argv: Arguments following the program name
        parser: Parser to use (default: build_parser())

    Returns:
        (request, namespace) - namespace carries --verbose/--debug

    Raises:
        UsageError: On any malformed input
    """
    if not argv:
        raise UsageError()
    if parser is None:
        parser = build_parser()
    namespace = parser.parse_args(argv)
    return resolve_request(namespace), namespace
