"""CLI entry point for appswitch.

Parses the command line, configures logging and settings, and runs the
request through the dispatcher. Every failure ends the process with a
one-line message on stderr and exit status 1.
"""

import sys
from typing import List, Optional, TextIO

from ..core.config import AppSwitchConfig, load_config
from ..core.dispatcher import Dispatcher
from ..core.process_manager import ProcessManager
from ..core.status import AppSwitchError
from .formatters import ProcessListFormatter, detect_terminal_width
from .logging_config import get_logger, log_timing, setup_logging
from .options import PROG, UsageError, build_parser, parse_request


def print_error(message: str, err: Optional[TextIO] = None) -> None:
    """Print ``appswitch: <message>`` to stderr."""
    print(f"{PROG}: {message}", file=err if err is not None else sys.stderr)


def print_usage_error(error: UsageError, parser, err: Optional[TextIO] = None) -> None:
    """Print a usage error: message plus synopsis, or the full usage text."""
    err = err if err is not None else sys.stderr
    if error.message:
        print_error(error.message, err)
        err.write(parser.format_usage())
    else:
        err.write(parser.format_help())


def default_process_manager() -> ProcessManager:
    """Create the macOS process manager (imports PyObjC)."""
    from ..core.appkit_client import AppKitProcessManager
    return AppKitProcessManager()


def cli_main(
    argv: Optional[List[str]] = None,
    manager: Optional[ProcessManager] = None,
    config: Optional[AppSwitchConfig] = None,
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
    width: Optional[int] = None,
    sleep=None,
    resolver=None,
) -> int:
    """Run appswitch.

    Args:
        argv: Arguments after the program name (default: sys.argv[1:])
        manager: Process manager (default: AppKitProcessManager)
        config: Settings (default: loaded from ~/.config/appswitch/config.json)
        out: Stream for listings and pids (default: stdout)
        err: Stream for errors and usage (default: stderr)
        width: Listing width (default: detected terminal width)
        sleep: Pause function for the settle delay (default: time.sleep)
        resolver: Bundle identifier resolver (default: NSBundle lookup)

    Returns:
        0 on success, 1 on error
    """
    if argv is None:
        argv = sys.argv[1:]
    out = out if out is not None else sys.stdout
    err = err if err is not None else sys.stderr

    parser = build_parser()
    try:
        request, args = parse_request(argv, parser)
    except UsageError as e:
        print_usage_error(e, parser, err)
        return 1

    setup_logging(verbose=args.verbose, debug=args.debug)
    logger = get_logger()
    logger.debug(f"Request: {request}")

    try:
        if config is None:
            config = load_config()
        if manager is None:
            manager = default_process_manager()

        formatter = None
        if request.action.is_list:
            if width is None:
                width = detect_terminal_width()
            formatter = ProcessListFormatter(width=width, long_form=request.action.long_form, out=out)

        dispatcher = Dispatcher(manager, config=config, resolver=resolver, out=out, sleep=sleep)
        with log_timing(f"{request.action.value} request", logger):
            dispatcher.run(request, formatter)
    except AppSwitchError as e:
        logger.debug("Request failed", exc_info=True)
        print_error(str(e), err)
        return 1
    except KeyboardInterrupt:
        return 1

    return 0


def main() -> int:
    """Console script entry point."""
    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
