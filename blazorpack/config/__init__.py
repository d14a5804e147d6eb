"""Configuration helpers for the BlazorPack codec."""

from .model import DEFAULT_CONFIG, CodecConfig
from .settings import load_codec_config
from . import logging, settings  # noqa: F401

__all__ = [
    "DEFAULT_CONFIG",
    "CodecConfig",
    "load_codec_config",
]
