"""
Infrastructure module exports.

Configuration for the inference backends.
"""

from .config import ConfigError, InferenceConfig, get_config, GuestKind, ModelFormatName

__all__ = [
    "ConfigError",
    "InferenceConfig",
    "get_config",
    "GuestKind",
    "ModelFormatName",
]
