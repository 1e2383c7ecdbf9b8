"""
Runtime Configuration Module

Provides configuration loading for tree construction and logging.
"""

from .runtime import (
    LoggingConfig,
    RuntimeConfig,
    TreeConfig,
    get_default_config_template,
)

__all__ = [
    "RuntimeConfig",
    "TreeConfig",
    "LoggingConfig",
    "get_default_config_template",
]
