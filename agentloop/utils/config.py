"""
Configuration Management
========================

Centralized configuration for the agent. Every environment variable the
CLI depends on is read, typed and defaulted here.

The OpenAI API key is taken from the environment first; when it is not
set there, a `.env` file in the working directory is used as a
fallback.

Usage:
    from agentloop.utils.config import get_config

    config = get_config()
    print(config.openai.model)
    print(config.mcp.server_url)
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from agentloop.utils.logger import Logger

logger = Logger("Config")


class ConfigError(ValueError):
    """Raised when required configuration is missing or out of range."""


def _required(name: str) -> str:
    """
    Get a required environment variable.

    Raises:
        ConfigError: If the variable is not set or empty
    """
    value = os.getenv(name)
    if not value:
        raise ConfigError(
            f"Missing required environment variable: {name}\n"
            f"Set {name} in your environment or in a .env file."
        )
    return value


def _optional(name: str, default: str) -> str:
    return os.getenv(name) or default


def _optional_int(name: str, default: int) -> int:
    """Get an integer variable; invalid values fall back to the default."""
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning(f"{name} is not a valid integer, using default: {default}")
        return default


def _positive_int(name: str, default: int) -> int:
    """
    Get an integer variable that must be at least 1.

    Raises:
        ConfigError: If the value is zero or negative
    """
    value = _optional_int(name, default)
    if value < 1:
        raise ConfigError(f"{name} must be a positive integer, got: {value}")
    return value


def _optional_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning(f"{name} is not a valid number, using default: {default}")
        return default


def _optional_bool(name: str, default: bool) -> bool:
    """True only for 'true', '1' or 'yes' (case-insensitive)."""
    value = os.getenv(name)
    if not value:
        return default
    return value.strip().lower() in ("true", "1", "yes")


# ==============================================================================
# Configuration Dataclasses
# ==============================================================================

@dataclass(frozen=True)
class OpenAIConfig:
    """Chat completions backend configuration."""
    api_key: str
    model: str
    base_url: str
    connect_timeout: float   # seconds
    read_timeout: float      # seconds


@dataclass(frozen=True)
class MCPConfig:
    """Remote tool server (MCP) configuration."""
    server_url: str
    enabled: bool
    timeout: float


@dataclass(frozen=True)
class AgentConfig:
    """Agent loop configuration."""
    max_iterations: int
    verbose: bool


@dataclass(frozen=True)
class Config:
    """
    Root configuration object.

    Access via:
        config = get_config()
        config.openai.api_key
        config.agent.max_iterations
    """
    openai: OpenAIConfig
    mcp: MCPConfig
    agent: AgentConfig
    log_level: str


def load_config() -> Config:
    """
    Load and validate all configuration from the environment.

    Variables already present in the environment win over the .env file.

    Raises:
        ConfigError: If OPENAI_API_KEY is missing from both, or
            AGENT_MAX_ITERATIONS is below 1
    """
    load_dotenv(Path.cwd() / ".env", override=False)

    return Config(
        openai=OpenAIConfig(
            api_key=_required("OPENAI_API_KEY"),
            model=_optional("OPENAI_MODEL", "gpt-4-turbo-preview"),
            base_url=_optional("OPENAI_BASE_URL", "https://api.openai.com/v1"),
            connect_timeout=_optional_float("OPENAI_CONNECT_TIMEOUT", 30.0),
            read_timeout=_optional_float("OPENAI_READ_TIMEOUT", 60.0),
        ),
        mcp=MCPConfig(
            server_url=_optional("MCP_SERVER_URL", "http://localhost:8080/mcp"),
            enabled=_optional_bool("MCP_ENABLED", True),
            timeout=_optional_float("MCP_TIMEOUT", 30.0),
        ),
        agent=AgentConfig(
            max_iterations=_positive_int("AGENT_MAX_ITERATIONS", 100),
            verbose=_optional_bool("AGENT_VERBOSE", True),
        ),
        log_level=_optional("LOG_LEVEL", "info"),
    )


# ==============================================================================
# Singleton
# ==============================================================================

_config_instance: Config | None = None


def get_config() -> Config:
    """Get the configuration, loading it on first access."""
    global _config_instance
    if _config_instance is None:
        _config_instance = load_config()
    return _config_instance


def reset_config() -> None:
    """Forget the cached configuration so the next get_config() reloads it."""
    global _config_instance
    _config_instance = None
