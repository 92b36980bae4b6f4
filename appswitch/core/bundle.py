"""Bundle identifier resolution.

Opens the bundle at an application's path and reads its
CFBundleIdentifier through Foundation's NSBundle.
"""

import logging
from typing import Optional

from .status import AppSwitchError


logger = logging.getLogger('appswitch.bundle')


class BundleLocationError(AppSwitchError):
    """The path cannot be turned into a bundle location."""

    pass


def resolve_bundle_identifier(path: str) -> Optional[str]:
    """Return the bundle identifier of the bundle at ``path``.

    Args:
        path: Filesystem path of an application bundle

    Returns:
        The identifier, or None when no bundle (or no identifier) exists
        at the path

    Raises:
        BundleLocationError: If the path is empty or not a valid location
    """
    if not path or "\0" in path:
        raise BundleLocationError(f"invalid bundle location: {path!r}")

    from Foundation import NSBundle

    bundle = NSBundle.bundleWithPath_(path)
    if bundle is None:
        logger.debug(f"No bundle at {path}")
        return None

    bundle_id = bundle.bundleIdentifier()
    logger.debug(f"Bundle {path} has identifier {bundle_id}")
    return str(bundle_id) if bundle_id is not None else None
