"""
Configuration loading for smart_commit.

Provides loaders for the Ollama server configuration and for the
optional grouping rules file. See :mod:`smart_commit.config.loader`
for implementation details.
"""

from .loader import ConfigError, load_config, load_rules  # noqa: F401
