"""
Logger Utility
==============

Context-aware console logging for the agent.

Every component creates its own logger with a short context name, so the
output of a run reads like a trace of the loop:

    [2024-01-31T10:30:00] [INFO] [Agent] === Iteration 1 ===
    [2024-01-31T10:30:01] [INFO] [Agent] Tool called: read_file
    [2024-01-31T10:30:01] [WARN] [MCPDiscovery] MCP server is not available

Usage:
    from agentloop.utils.logger import Logger

    logger = Logger("Agent")
    logger.info("Starting run")

    tool_logger = logger.child("Tools")
    tool_logger.debug("Arguments", {"path": "/tmp/x"})
"""

import json
import os
import sys
from datetime import datetime
from enum import IntEnum
from typing import Any


class LogLevel(IntEnum):
    """Log levels, ordered by severity."""
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40


class Colors:
    """ANSI escape codes for colored terminal output."""
    RESET = "\033[0m"
    DEBUG = "\033[36m"    # Cyan
    INFO = "\033[32m"     # Green
    WARNING = "\033[33m"  # Yellow
    ERROR = "\033[31m"    # Red
    DIM = "\033[2m"


_LEVEL_NAMES = {
    "DEBUG": LogLevel.DEBUG,
    "INFO": LogLevel.INFO,
    "WARNING": LogLevel.WARNING,
    "WARN": LogLevel.WARNING,
    "ERROR": LogLevel.ERROR,
}


def parse_log_level(value: str | None, default: LogLevel = LogLevel.INFO) -> LogLevel:
    """
    Turn a level name like "debug" or "WARN" into a LogLevel.

    Unknown or empty names fall back to the default.
    """
    if not value:
        return default
    return _LEVEL_NAMES.get(value.strip().upper(), default)


# Level applied to every logger without an explicit one, once configuration is loaded
_global_level: LogLevel | None = None


def set_global_level(level: LogLevel | None) -> None:
    """
    Set the level used by all loggers that were not given one explicitly.

    Module loggers are created at import time, before .env is read, so the
    entry point calls this with the configured level. Pass None to go back
    to reading LOG_LEVEL from the environment.
    """
    global _global_level
    _global_level = level


class Logger:
    """
    A context-aware logger with colored output.

    Without an explicit level, the logger follows the global level set by
    set_global_level(), falling back to the LOG_LEVEL env var.

    Example:
        logger = Logger("MCPClient")
        logger.info("Connected", {"server": "git-tools"})
        logger.error("Call failed", error)
    """

    def __init__(self, context: str = "", level: LogLevel | None = None):
        """
        Initialize a logger.

        Args:
            context: Prefix shown in every line (e.g., "Agent", "Executor")
            level: Minimum level to emit; defaults to the global level
        """
        self.context = context
        self._own_level = level

    @property
    def level(self) -> LogLevel:
        if self._own_level is not None:
            return self._own_level
        if _global_level is not None:
            return _global_level
        return parse_log_level(os.getenv("LOG_LEVEL"))

    def set_level(self, level: LogLevel) -> None:
        self._own_level = level

    def child(self, child_context: str) -> "Logger":
        """
        Create a child logger that inherits this logger's level setting.

        Example:
            Logger("Agent").child("Tools")  # logs as [Agent:Tools]
        """
        new_context = f"{self.context}:{child_context}" if self.context else child_context
        return Logger(new_context, level=self._own_level)

    def _format_message(self, level_name: str, message: str, color: str) -> str:
        timestamp = datetime.now().isoformat(timespec="seconds")
        context_str = f"[{self.context}] " if self.context else ""

        return (
            f"{Colors.DIM}[{timestamp}]{Colors.RESET} "
            f"{color}[{level_name}]{Colors.RESET} "
            f"{context_str}{message}"
        )

    def _log(
        self,
        level: LogLevel,
        level_name: str,
        color: str,
        message: str,
        data: dict[str, Any] | None = None
    ) -> None:
        if level < self.level:
            return

        stream = sys.stderr if level >= LogLevel.ERROR else sys.stdout
        print(self._format_message(level_name, message, color), file=stream)

        if data:
            data_str = json.dumps(data, indent=2, default=str)
            print(f"{Colors.DIM}{data_str}{Colors.RESET}", file=stream)

    def debug(self, message: str, data: dict[str, Any] | None = None) -> None:
        """Log a debug message (only shown with LOG_LEVEL=debug)."""
        self._log(LogLevel.DEBUG, "DEBUG", Colors.DEBUG, message, data)

    def info(self, message: str, data: dict[str, Any] | None = None) -> None:
        """Log an info message."""
        self._log(LogLevel.INFO, "INFO", Colors.INFO, message, data)

    def warning(self, message: str, data: dict[str, Any] | None = None) -> None:
        """Log a warning for something that degrades but doesn't stop a run."""
        self._log(LogLevel.WARNING, "WARN", Colors.WARNING, message, data)

    def error(self, message: str, error: Exception | None = None) -> None:
        """
        Log an error message.

        Args:
            message: The error message
            error: Optional exception whose type and text are included
        """
        data = None
        if error:
            data = {
                "error_type": type(error).__name__,
                "error_message": str(error),
            }
        self._log(LogLevel.ERROR, "ERROR", Colors.ERROR, message, data)


# Default logger for code that doesn't need its own context
logger = Logger("AgentLoop")
