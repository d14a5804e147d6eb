"""Pytest configuration for BlazorPack tests."""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest

from blazorpack.config.model import CodecConfig


@pytest.fixture(autouse=True)
def reset_blazorpack_logger() -> Iterator[None]:
    """Undo configure_logging() so caplog keeps seeing package records."""
    yield
    package_logger = logging.getLogger("blazorpack")
    for handler in package_logger.handlers[:]:
        try:
            handler.close()
        except (OSError, RuntimeError):
            pass
        package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


@pytest.fixture()
def codec_config() -> CodecConfig:
    return CodecConfig()

