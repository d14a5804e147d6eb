"""Data model for BlazorPack codec configuration."""

from __future__ import annotations

from dataclasses import dataclass

from ..const import (
    DEFAULT_DEBUG_LOGGING,
    DEFAULT_ECHO_CLOSE_ERROR,
    DEFAULT_JSON_INDENT,
    DEFAULT_LOG_TO_SYSLOG,
    DEFAULT_MESSAGE_SEPARATOR,
    DEFAULT_USE_SINGLE_FLOAT,
)


@dataclass(frozen=True, slots=True)
class CodecConfig:
    """Immutable codec options shared by every encode/decode call.

    Attributes:
        json_indent: Indentation used when rendering each decoded message.
        message_separator: Text placed between rendered messages.
        use_single_float: Pack float arguments as 32-bit floats.
        echo_close_error: Append the ``Error`` string a second time to Close
            messages without ``AllowReconnect``, reproducing legacy output.
        debug_logging: Log at DEBUG instead of INFO.
        log_to_syslog: Send logs to the local syslog socket when available.
    """

    json_indent: int = DEFAULT_JSON_INDENT
    message_separator: str = DEFAULT_MESSAGE_SEPARATOR
    use_single_float: bool = DEFAULT_USE_SINGLE_FLOAT
    echo_close_error: bool = DEFAULT_ECHO_CLOSE_ERROR
    debug_logging: bool = DEFAULT_DEBUG_LOGGING
    log_to_syslog: bool = DEFAULT_LOG_TO_SYSLOG


DEFAULT_CONFIG = CodecConfig()
