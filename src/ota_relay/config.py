"""
Relay configuration.

Settings shared by every relay a session manager starts. Values come from
the caller or, via `RelayConfig.from_env()`, from environment variables:

    OTA_RELAY_READ_TIMEOUT   inactivity timeout in seconds (0 disables)
    OTA_RELAY_BUFFER_SIZE    pooled buffer size in bytes
    OTA_RELAY_MAX_BUFFERS    idle buffers kept by the pool
"""

from __future__ import annotations

import os
from typing import Self

from pydantic import Field, field_validator

from .pipe.ota import HEADER_SIZE
from .pipe.pool import LEAKY_BUFFER_SIZE, MAX_POOLED_BUFFERS, BufferPool
from .types import StrictBaseModel

_ENV_PREFIX = "OTA_RELAY_"


class RelayConfig(StrictBaseModel):
    """Immutable relay settings."""

    read_timeout: float = Field(default=0.0, ge=0)
    """Inactivity timeout in seconds applied before each read. Zero disables it."""

    buffer_size: int = LEAKY_BUFFER_SIZE
    """Size of every pooled buffer."""

    max_buffers: int = Field(default=MAX_POOLED_BUFFERS, ge=1)
    """Idle buffers the pool retains before dropping released ones."""

    @field_validator("buffer_size")
    @classmethod
    def _holds_a_header(cls, value: int) -> int:
        """A pooled buffer must at least fit one chunk header."""
        if value < HEADER_SIZE:
            raise ValueError(f"buffer_size must be at least {HEADER_SIZE}, got {value}")
        return value

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> Self:
        """
        Build a config from `OTA_RELAY_*` variables.

        Unset variables keep their defaults.

        Raises:
            ValueError: If a variable is not a number.
            pydantic.ValidationError: If a value is out of range.
        """
        env = os.environ if environ is None else environ
        values: dict[str, float | int] = {}
        if (raw := env.get(f"{_ENV_PREFIX}READ_TIMEOUT")) is not None:
            values["read_timeout"] = float(raw)
        if (raw := env.get(f"{_ENV_PREFIX}BUFFER_SIZE")) is not None:
            values["buffer_size"] = int(raw)
        if (raw := env.get(f"{_ENV_PREFIX}MAX_BUFFERS")) is not None:
            values["max_buffers"] = int(raw)
        return cls(**values)

    def create_pool(self) -> BufferPool:
        """Build the buffer pool these settings describe."""
        return BufferPool(buffer_size=self.buffer_size, max_buffers=self.max_buffers)
