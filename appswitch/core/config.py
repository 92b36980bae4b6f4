"""Configuration for appswitch.

Settings are read from ~/.config/appswitch/config.json when it exists;
a missing file means defaults. APPSWITCH_SETTLE_DELAY overrides the
settle delay from the environment.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, ValidationError

from .status import AppSwitchError


SETTLE_DELAY_ENV = "APPSWITCH_SETTLE_DELAY"


class ConfigError(AppSwitchError):
    """Configuration file or environment value is invalid."""

    pass


class AppSwitchConfig(BaseModel):
    """appswitch settings.

    Fields:
        settle_delay: Pause (seconds) between a show-all/hide-others request
            and bringing the front application's windows forward
    """

    settle_delay: float = Field(
        default=0.75,
        ge=0.0,
        le=10.0,
        description="Window server settle pause before the final front request"
    )

    model_config = {"frozen": True, "extra": "forbid"}


def default_config_path() -> Path:
    """Return ~/.config/appswitch/config.json."""
    return Path.home() / ".config/appswitch/config.json"


def load_config(path: Optional[Path] = None, environ: Optional[Dict[str, str]] = None) -> AppSwitchConfig:
    """Load configuration from disk and environment.

    Args:
        path: Config file (default: ~/.config/appswitch/config.json)
        environ: Environment mapping (default: os.environ)

    Returns:
        Validated AppSwitchConfig

    Raises:
        ConfigError: If the file is unreadable or a value is out of range
    """
    if path is None:
        path = default_config_path()
    if environ is None:
        environ = os.environ

    data: Dict[str, Any] = {}
    if path.exists():
        try:
            with path.open("r") as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            raise ConfigError(f"can't read configuration {path}: {e}")
        if not isinstance(data, dict):
            raise ConfigError(f"can't read configuration {path}: expected a JSON object")

    if SETTLE_DELAY_ENV in environ:
        data["settle_delay"] = environ[SETTLE_DELAY_ENV]

    try:
        return AppSwitchConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"invalid configuration: {e}")
