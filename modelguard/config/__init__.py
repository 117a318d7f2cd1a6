"""
Configuration management for validation runs.

Provides type-safe configuration loading and validation with support
for multiple configuration sources and priority-based merging.
"""

from ..exceptions import ConfigError
from .loader import ConfigLoader, create_default_config, load_config
from .models import HarnessConfig

__all__ = [
    "ConfigError",
    "ConfigLoader",
    "HarnessConfig",
    "create_default_config",
    "load_config",
]
