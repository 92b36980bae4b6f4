"""appswitch - command-line application switcher for macOS.

This package provides:
- Matching running applications by creator code, bundle identifier,
  process ID, name or bundle path
- Switching, showing, hiding, quitting and killing the matched application
- Show-all / hide-others window visibility requests
- Tabular listing of running applications
"""

__version__ = "1.0.0"
__author__ = "appswitch contributors"
__license__ = "BSD-3-Clause"

__all__ = ["__version__", "__author__", "__license__"]
