"""Default configuration values for the BlazorPack codec."""

from __future__ import annotations

from pathlib import Path
from typing import Final

DEFAULT_CONFIG_PATH: Final[Path] = Path("/etc/blazorpack/blazorpack.toml")
CONFIG_SECTION: Final[str] = "blazorpack"

DEFAULT_JSON_INDENT: Final[int] = 3
DEFAULT_MESSAGE_SEPARATOR: Final[str] = ",\r\n"
DEFAULT_USE_SINGLE_FLOAT: Final[bool] = False
DEFAULT_ECHO_CLOSE_ERROR: Final[bool] = False
DEFAULT_DEBUG_LOGGING: Final[bool] = False
DEFAULT_LOG_TO_SYSLOG: Final[bool] = False

MAX_JSON_INDENT: Final[int] = 16
