"""Runtime settings for lockblock, read from ``LOCKBLOCK_*`` environment variables."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from typing import Mapping, Optional

from lockblock.core.exceptions import ConfigurationError
from lockblock.core.pipeline import DEFAULT_BLOCK_SIZE, DEFAULT_READ_SIZE
from lockblock.security.keystore import DEFAULT_SERVICE


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class LockBlockConfig:
    """Container for the tunables callers usually want from the environment."""

    block_size: int = DEFAULT_BLOCK_SIZE
    read_size: int = DEFAULT_READ_SIZE
    log_level: str = "INFO"
    keyring_service: str = DEFAULT_SERVICE

    def validate(self) -> "LockBlockConfig":
        if self.block_size <= 0:
            raise ConfigurationError(f"block_size must be positive, got {self.block_size}")
        if self.read_size <= 0:
            raise ConfigurationError(f"read_size must be positive, got {self.read_size}")
        if self.log_level.upper() not in LOG_LEVELS:
            raise ConfigurationError(f"unknown log level {self.log_level!r}")
        if not self.keyring_service:
            raise ConfigurationError("keyring service name must not be empty")
        return self

    @property
    def logging_level(self) -> int:
        return getattr(logging, self.log_level.upper())


def _int_from_env(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e


def load_config(environ: Optional[Mapping[str, str]] = None) -> LockBlockConfig:
    """
    Build a validated LockBlockConfig.

    Recognised variables:

    - ``LOCKBLOCK_BLOCK_SIZE``: splitter block size in bytes
    - ``LOCKBLOCK_READ_SIZE``: merge copy buffer in bytes
    - ``LOCKBLOCK_LOG_LEVEL``: logging level name
    - ``LOCKBLOCK_KEYRING_SERVICE``: keyring service used for root keys

    Unset variables fall back to the dataclass defaults.
    """
    env = os.environ if environ is None else environ
    config = LockBlockConfig(
        block_size=_int_from_env(env, "LOCKBLOCK_BLOCK_SIZE", DEFAULT_BLOCK_SIZE),
        read_size=_int_from_env(env, "LOCKBLOCK_READ_SIZE", DEFAULT_READ_SIZE),
        log_level=env.get("LOCKBLOCK_LOG_LEVEL", "INFO"),
        keyring_service=env.get("LOCKBLOCK_KEYRING_SERVICE", DEFAULT_SERVICE),
    )
    return config.validate()
