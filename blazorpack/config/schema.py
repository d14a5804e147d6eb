"""Marshmallow schema for CodecConfig validation."""

from __future__ import annotations

from typing import Any, Dict

from marshmallow import EXCLUDE, Schema, fields, post_load, pre_load, validate

from ..const import (
    DEFAULT_DEBUG_LOGGING,
    DEFAULT_ECHO_CLOSE_ERROR,
    DEFAULT_JSON_INDENT,
    DEFAULT_LOG_TO_SYSLOG,
    DEFAULT_MESSAGE_SEPARATOR,
    DEFAULT_USE_SINGLE_FLOAT,
    MAX_JSON_INDENT,
)
from .model import CodecConfig

_ESCAPES = {"\\r": "\r", "\\n": "\n", "\\t": "\t"}


class CodecConfigSchema(Schema):
    """Declarative validation schema for the ``[blazorpack]`` table."""

    class Meta:
        unknown = EXCLUDE

    json_indent = fields.Int(load_default=DEFAULT_JSON_INDENT, validate=validate.Range(min=0, max=MAX_JSON_INDENT))
    message_separator = fields.Str(load_default=DEFAULT_MESSAGE_SEPARATOR, validate=validate.Length(min=1))
    use_single_float = fields.Bool(load_default=DEFAULT_USE_SINGLE_FLOAT)
    echo_close_error = fields.Bool(load_default=DEFAULT_ECHO_CLOSE_ERROR)
    debug_logging = fields.Bool(load_default=DEFAULT_DEBUG_LOGGING)
    log_to_syslog = fields.Bool(load_default=DEFAULT_LOG_TO_SYSLOG)

    @pre_load
    def unescape_separator(self, data: Dict[str, Any], **kwargs: Any) -> Dict[str, Any]:
        # TOML literal strings keep backslash escapes verbatim.
        separator = data.get("message_separator")
        if isinstance(separator, str):
            for escaped, actual in _ESCAPES.items():
                separator = separator.replace(escaped, actual)
            data = {**data, "message_separator": separator}
        return data

    @post_load
    def make_config(self, data: Dict[str, Any], **kwargs: Any) -> CodecConfig:
        return CodecConfig(**data)
