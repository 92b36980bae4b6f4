"""Listing formatters for ``appswitch -l`` / ``-L``.

Rows are fixed-width columns:

           PSN   PID TYPE CREA NAME                 PATH
    12345678.0 12345 1234 1234 12345678901234567890 /Applications/...

The path column is sized to the terminal; the long form leaves it
unbounded and appends the bundle identifier.
"""

import sys
from typing import Optional, TextIO

from rich.console import Console

from ..models.process import ProcessRecord


BANNER = "       PSN   PID TYPE CREA NAME                "
NAME_WIDTH = 20
MIN_PATH_WIDTH = 4


def detect_terminal_width(console: Optional[Console] = None) -> int:
    """Return the terminal width in columns.

    Rich checks the stdin/stdout/stderr terminals, then $COLUMNS, and
    falls back to 80 columns.

    Args:
        console: Optional Rich Console instance (created if not provided)
    """
    console = console or Console(file=sys.stdout)
    return console.width


class ProcessListFormatter:
    """Render the process listing header and rows."""

    def __init__(self, width: int = 80, long_form: bool = False, out: Optional[TextIO] = None):
        """Initialize listing formatter.

        Args:
            width: Terminal width in columns
            long_form: Unbounded path plus bundle identifier (``-L``)
            out: Output stream (default: stdout)
        """
        self.long_form = long_form
        self.out = out if out is not None else sys.stdout
        path_width = width - len(BANNER) - 1
        # Too narrow for a useful path column: print the path unbounded
        self.path_width: Optional[int] = None if long_form or path_width < MIN_PATH_WIDTH else path_width

    def header(self) -> str:
        if self.long_form:
            return f"{BANNER} PATH (bundle identifier)"
        return f"{BANNER} PATH"

    def format_row(self, record: ProcessRecord, bundle_id: Optional[str] = None) -> str:
        """Format one listing row.

        Args:
            record: Process to render
            bundle_id: Resolved bundle identifier (long form only)

        Returns:
            Row text without trailing newline
        """
        handle = record.handle
        if self.long_form:
            name = f"{record.name:<{NAME_WIDTH}}"
        else:
            name = f"{record.name[:NAME_WIDTH]:<{NAME_WIDTH}}"

        if self.path_width is None:
            path = record.path
        else:
            path = f"{record.path[:self.path_width]:<{self.path_width}}"

        row = (
            f"{handle.high:8d}.{handle.low} {record.pid:5d} "
            f"{record.type_str} {record.creator_str} {name} {path}"
        )
        if self.long_form and bundle_id is not None:
            row += f" ({bundle_id})"
        return row

    def write_header(self) -> None:
        print(self.header(), file=self.out)

    def write_row(self, record: ProcessRecord, bundle_id: Optional[str] = None) -> None:
        print(self.format_row(record, bundle_id), file=self.out)
