"""Shared utilities for the authenticity analysis engine."""

from .config_loader import load_config, merge_config, get_nested_config, DEFAULT_CONFIG
from .content_hash import simple_hash

__all__ = [
    'load_config',
    'merge_config',
    'get_nested_config',
    'DEFAULT_CONFIG',
    'simple_hash',
]
