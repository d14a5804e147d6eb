"""Settings loader for the BlazorPack codec.

Configuration is read from the ``[blazorpack]`` table of a TOML file and
validated by :class:`~blazorpack.config.schema.CodecConfigSchema`. A missing
file or table yields the defaults.

Configuration is intentionally **file-only**: environment variables are not
used as overrides.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from marshmallow import ValidationError

from ..const import CONFIG_SECTION, DEFAULT_CONFIG_PATH
from .model import DEFAULT_CONFIG, CodecConfig
from .schema import CodecConfigSchema

logger = logging.getLogger(__name__)


def _read_section(path: Path) -> dict[str, Any] | None:
    try:
        raw = tomllib.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        logger.warning("Config file %s not found; using defaults.", path)
        return None
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ValueError(f"Failed to read config file {path}: {exc}") from exc

    section = raw.get(CONFIG_SECTION)
    if section is None:
        logger.warning("Config file %s has no [%s] table; using defaults.", path, CONFIG_SECTION)
        return None
    if not isinstance(section, dict):
        raise ValueError(f"[{CONFIG_SECTION}] in {path} must be a table")
    return section


def load_codec_config(path: Path | str | None = None) -> CodecConfig:
    """Load and validate codec configuration.

    Raises:
        ValueError: if the file is unreadable or a value fails validation.
    """
    config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    section = _read_section(config_path)
    if section is None:
        return DEFAULT_CONFIG

    try:
        config: CodecConfig = CodecConfigSchema().load(section)
    except ValidationError as exc:
        raise ValueError(f"Invalid configuration in {config_path}: {exc.messages}") from exc

    if config.echo_close_error:
        logger.warning(
            "echo_close_error is enabled; Close messages without AllowReconnect "
            "will repeat the Error string after the declared array."
        )
    return config
