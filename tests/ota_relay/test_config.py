"""Tests for relay configuration."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from ota_relay.config import RelayConfig
from ota_relay.pipe.pool import LEAKY_BUFFER_SIZE, MAX_POOLED_BUFFERS


class TestRelayConfig:
    """Tests for RelayConfig."""

    def test_defaults(self) -> None:
        config = RelayConfig()
        assert config.read_timeout == 0.0
        assert config.buffer_size == LEAKY_BUFFER_SIZE
        assert config.max_buffers == MAX_POOLED_BUFFERS

    def test_is_frozen(self) -> None:
        config = RelayConfig()
        with pytest.raises(ValidationError):
            config.read_timeout = 5.0  # type: ignore[misc]

    def test_negative_timeout_rejected(self) -> None:
        with pytest.raises(ValidationError):
            RelayConfig(read_timeout=-1.0)

    def test_buffer_must_hold_header(self) -> None:
        with pytest.raises(ValidationError):
            RelayConfig(buffer_size=11)
        assert RelayConfig(buffer_size=12).buffer_size == 12

    def test_unknown_field_rejected(self) -> None:
        with pytest.raises(ValidationError):
            RelayConfig(timeout=3)  # type: ignore[call-arg]

    def test_camel_case_alias(self) -> None:
        config = RelayConfig(readTimeout=2.5)  # type: ignore[call-arg]
        assert config.read_timeout == 2.5
        assert config.model_dump(by_alias=True)["readTimeout"] == 2.5

    def test_create_pool(self) -> None:
        pool = RelayConfig(buffer_size=128, max_buffers=3).create_pool()
        assert pool.buffer_size == 128
        assert pool.max_buffers == 3


class TestFromEnv:
    """Tests for RelayConfig.from_env()."""

    def test_empty_environment_gives_defaults(self) -> None:
        assert RelayConfig.from_env({}) == RelayConfig()

    def test_reads_variables(self) -> None:
        config = RelayConfig.from_env(
            {
                "OTA_RELAY_READ_TIMEOUT": "30",
                "OTA_RELAY_BUFFER_SIZE": "8192",
                "OTA_RELAY_MAX_BUFFERS": "16",
            }
        )
        assert config.read_timeout == 30.0
        assert config.buffer_size == 8192
        assert config.max_buffers == 16

    def test_reads_process_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OTA_RELAY_READ_TIMEOUT", "1.5")
        assert RelayConfig.from_env().read_timeout == 1.5

    def test_non_numeric_rejected(self) -> None:
        with pytest.raises(ValueError):
            RelayConfig.from_env({"OTA_RELAY_MAX_BUFFERS": "many"})
