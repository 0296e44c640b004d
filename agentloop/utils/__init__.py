"""
Utilities Module
================

Common utilities shared across the package:
- logger: Console logging with levels and context
- config: Centralized configuration management
"""

from agentloop.utils.logger import Logger, LogLevel, logger
from agentloop.utils.config import Config, ConfigError, get_config

__all__ = ["Logger", "LogLevel", "logger", "Config", "ConfigError", "get_config"]
