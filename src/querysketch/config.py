"""
Configuration system for querysketch.

Implements 12-factor config principles:
- Environment variables as primary config source
- Optional config file for local development
- Per-environment profiles

The estimator has one real tunable, the reservoir size used per partition.
The two read-size divisors are exposed as well so deployments can tune the
pruning heuristic without code changes.

Usage:
    from querysketch.config import get_config

    config = get_config()
    estimator = SamplingSizeEstimator.from_config(loader, config)
"""

from __future__ import annotations

import json
import logging
import os
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_SIZE = 1000
DEFAULT_REPARTITION_READ_DIVISOR = 10
DEFAULT_FILE_SKIPPING_READ_DIVISOR = 2


class Environment(str, Enum):
    """Environment profiles with different default behaviors."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"

    @classmethod
    def from_string(cls, value: str) -> "Environment":
        """Parse environment from string, defaulting to development."""
        try:
            return cls(value.lower())
        except ValueError:
            return cls.DEVELOPMENT


class Config(BaseModel):
    """
    querysketch configuration.

    Loaded from environment variables and optional config file.
    """

    model_config = ConfigDict(frozen=True)

    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Current environment (development/staging/production)",
    )

    # Sampling
    sample_size: int = Field(
        default=DEFAULT_SAMPLE_SIZE,
        ge=0,
        description="Reservoir size k drawn from every partition",
    )
    max_workers: int | None = Field(
        default=None,
        ge=1,
        description="Upper bound on partitions sampled concurrently (None = executor default)",
    )

    # Read-size heuristic
    repartition_read_divisor: int = Field(
        default=DEFAULT_REPARTITION_READ_DIVISOR,
        ge=1,
        description="Fraction of source files a repartitioned layout is expected to scan (1/n)",
    )
    file_skipping_read_divisor: int = Field(
        default=DEFAULT_FILE_SKIPPING_READ_DIVISOR,
        ge=1,
        description="Fraction of source files a file-skipping index is expected to scan (1/n)",
    )

    # Observability
    metrics_enabled: bool = Field(
        default=True,
        description="Enable metrics collection",
    )


def _parse_env_bool(value: str | None, default: bool = False) -> bool:
    """Parse boolean from environment variable."""
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on")


def _parse_env_int(value: str | None, default: int | None, key: str = "") -> int | None:
    """Parse integer from environment variable."""
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning("Could not parse %s=%s, using %s", key, value, default)
        return default


def load_config_from_env() -> Config:
    """
    Load configuration from environment variables.

    Environment variable naming convention: QUERYSKETCH_<SETTING>

    Examples:
    - QUERYSKETCH_ENVIRONMENT=production
    - QUERYSKETCH_SAMPLE_SIZE=5000
    - QUERYSKETCH_MAX_WORKERS=8
    - QUERYSKETCH_REPARTITION_READ_DIVISOR=20
    """
    env = os.environ
    environment = Environment.from_string(env.get("QUERYSKETCH_ENVIRONMENT", "development"))

    config_kwargs: dict[str, Any] = {
        "environment": environment,
        "sample_size": _parse_env_int(
            env.get("QUERYSKETCH_SAMPLE_SIZE"), DEFAULT_SAMPLE_SIZE,
            "QUERYSKETCH_SAMPLE_SIZE",
        ),
        "max_workers": _parse_env_int(
            env.get("QUERYSKETCH_MAX_WORKERS"), None, "QUERYSKETCH_MAX_WORKERS",
        ),
        "repartition_read_divisor": _parse_env_int(
            env.get("QUERYSKETCH_REPARTITION_READ_DIVISOR"),
            DEFAULT_REPARTITION_READ_DIVISOR,
            "QUERYSKETCH_REPARTITION_READ_DIVISOR",
        ),
        "file_skipping_read_divisor": _parse_env_int(
            env.get("QUERYSKETCH_FILE_SKIPPING_READ_DIVISOR"),
            DEFAULT_FILE_SKIPPING_READ_DIVISOR,
            "QUERYSKETCH_FILE_SKIPPING_READ_DIVISOR",
        ),
        "metrics_enabled": _parse_env_bool(
            env.get("QUERYSKETCH_METRICS_ENABLED"), True
        ),
    }

    return Config(**config_kwargs)


def load_config_from_file(path: Path) -> Config:
    """
    Load configuration from a JSON or YAML file.

    Falls back to environment variables when the file is missing.
    Invalid values raise pydantic's ValidationError.
    """
    if not path.exists():
        logger.warning("Config file not found: %s, using environment", path)
        return load_config_from_env()

    with open(path) as f:
        if path.suffix in (".yaml", ".yml"):
            try:
                import yaml
            except ImportError:
                logger.warning("PyYAML not installed, cannot load YAML config")
                return load_config_from_env()
            data = yaml.safe_load(f) or {}
        else:
            data = json.load(f)

    return Config(**data)


@lru_cache(maxsize=1)
def get_config() -> Config:
    """
    Get the global configuration instance.

    Loads from:
    1. QUERYSKETCH_CONFIG_FILE environment variable (if set)
    2. Environment variables (default)

    Result is cached for the lifetime of the process.
    """
    config_file = os.environ.get("QUERYSKETCH_CONFIG_FILE")

    if config_file:
        return load_config_from_file(Path(config_file))

    return load_config_from_env()


def reset_config() -> None:
    """Reset the cached configuration (mainly for testing)."""
    get_config.cache_clear()
