"""Tests for codec configuration loading."""

from __future__ import annotations

import dataclasses
import logging
from pathlib import Path

import pytest
from marshmallow import ValidationError

from blazorpack.config.model import DEFAULT_CONFIG, CodecConfig
from blazorpack.config.schema import CodecConfigSchema
from blazorpack.config.settings import load_codec_config


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "blazorpack.toml"
    path.write_text(text, encoding="utf-8")
    return path


def test_defaults() -> None:
    config = CodecConfig()
    assert config.json_indent == 3
    assert config.message_separator == ",\r\n"
    assert config.use_single_float is False
    assert config.echo_close_error is False
    assert config == DEFAULT_CONFIG


def test_config_is_frozen() -> None:
    with pytest.raises(dataclasses.FrozenInstanceError):
        DEFAULT_CONFIG.json_indent = 2  # type: ignore[misc]


def test_missing_file_uses_defaults(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        assert load_codec_config(tmp_path / "absent.toml") == DEFAULT_CONFIG
    assert "not found" in caplog.text


def test_missing_section_uses_defaults(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    path = _write(tmp_path, "[other]\nkey = 1\n")
    with caplog.at_level(logging.WARNING):
        assert load_codec_config(path) == DEFAULT_CONFIG
    assert "has no [blazorpack] table" in caplog.text


def test_values_loaded(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        "[blazorpack]\n"
        "json_indent = 2\n"
        "message_separator = '\\n'\n"
        "use_single_float = true\n"
        "debug_logging = true\n"
        "unknown_key = 'ignored'\n",
    )
    config = load_codec_config(path)

    assert config == CodecConfig(
        json_indent=2,
        message_separator="\n",
        use_single_float=True,
        debug_logging=True,
    )


def test_echo_close_error_warns(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    path = _write(tmp_path, "[blazorpack]\necho_close_error = true\n")
    with caplog.at_level(logging.WARNING):
        assert load_codec_config(path).echo_close_error is True
    assert "echo_close_error is enabled" in caplog.text


@pytest.mark.parametrize(
    "body",
    [
        "json_indent = -1",
        "json_indent = 'wide'",
        "message_separator = ''",
        "use_single_float = 'sometimes'",
    ],
)
def test_invalid_values(tmp_path: Path, body: str) -> None:
    path = _write(tmp_path, f"[blazorpack]\n{body}\n")
    with pytest.raises(ValueError, match="Invalid configuration"):
        load_codec_config(path)


def test_invalid_toml(tmp_path: Path) -> None:
    path = _write(tmp_path, "[blazorpack\n")
    with pytest.raises(ValueError, match="Failed to read config file"):
        load_codec_config(path)


def test_section_must_be_table(tmp_path: Path) -> None:
    path = _write(tmp_path, "blazorpack = 3\n")
    with pytest.raises(ValueError, match="must be a table"):
        load_codec_config(path)


def test_schema_builds_config() -> None:
    config = CodecConfigSchema().load({"json_indent": 4})
    assert isinstance(config, CodecConfig)
    assert config.json_indent == 4


def test_schema_rejects_large_indent() -> None:
    with pytest.raises(ValidationError):
        CodecConfigSchema().load({"json_indent": 100})
