"""Entry point for ``python -m appswitch``."""

import sys

from appswitch.cli.commands import main


if __name__ == "__main__":
    sys.exit(main())
