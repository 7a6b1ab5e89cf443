"""Shared utilities for the cognitive-game screening system."""

from .config_loader import load_config, get_nested_config, configure_logging

__all__ = [
    'load_config',
    'get_nested_config',
    'configure_logging',
]
