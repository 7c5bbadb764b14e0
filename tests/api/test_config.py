"""Tests for configuration classes."""

import os
import pytest
from unittest.mock import patch

from config import (
    AppConfig,
    CORSConfig,
    LoggingConfig,
    RateLimitConfig,
    RedisConfig,
    ShuffleConfig,
    StorageConfig,
    _parse_cors_origins,
)


class TestCORSConfig:
    """Tests for CORSConfig class."""

    def test_cors_default_origins(self):
        """Test that default CORS origins are set correctly."""
        with patch.dict(os.environ, {}, clear=True):
            assert CORSConfig().allowed_origins == ["http://localhost:8000"]

    def test_cors_parses_origins_with_whitespace(self):
        """Test that CORS origins are split and stripped."""
        env_origins = "  http://example.com  ,  http://localhost:3000  ,"
        with patch.dict(os.environ, {"CORS_ORIGINS": env_origins}):
            origins = _parse_cors_origins()

        assert origins == ["http://example.com", "http://localhost:3000"]

    def test_cors_defaults_allow_all(self):
        """Test that credentials, methods and headers are open by default."""
        config = CORSConfig()
        assert config.allow_credentials is True
        assert config.allow_methods == ["*"]
        assert config.allow_headers == ["*"]


class TestRateLimitConfig:
    """Tests for RateLimitConfig class."""

    def test_rate_limit_defaults(self):
        """Test default rate limit values."""
        with patch.dict(os.environ, {}, clear=True):
            config = RateLimitConfig()

        assert config.enabled is True
        assert config.requests_per_minute == 60

    @pytest.mark.parametrize("value", ["false", "FALSE", "0", "no"])
    def test_rate_limit_disabled(self, value):
        """Test only 'true' (any case) enables the limiter."""
        with patch.dict(os.environ, {"RATE_LIMIT_ENABLED": value, "RATE_LIMIT_RPM": "120"}):
            config = RateLimitConfig()

        assert config.enabled is False
        assert config.requests_per_minute == 120


class TestRedisConfig:
    """Tests for RedisConfig class."""

    def test_redis_defaults(self):
        """Test default Redis configuration."""
        with patch.dict(os.environ, {}, clear=True):
            config = RedisConfig()

        assert config.url == "redis://localhost:6379/0"
        assert config.password is None

    def test_redis_url_with_password(self):
        """Test the password is placed in the URL."""
        with patch.dict(
            os.environ,
            {
                "REDIS_HOST": "redis.example.com",
                "REDIS_PORT": "6380",
                "REDIS_DB": "1",
                "REDIS_PASSWORD": "secret123",
            },
        ):
            config = RedisConfig()

        assert config.url == "redis://:secret123@redis.example.com:6380/1"


class TestStorageConfig:
    """Tests for StorageConfig class."""

    def test_storage_defaults(self):
        """Test the deck is kept in a file in the home directory."""
        with patch.dict(os.environ, {}, clear=True):
            config = StorageConfig()

        assert config.backend == "file"
        assert config.key == "tarotDeck"
        assert config.path.endswith(".tarot_deck_state.json")

    def test_storage_from_env(self):
        """Test backend, path and key from the environment."""
        with patch.dict(
            os.environ,
            {
                "DECK_STORAGE": "Redis",
                "DECK_STATE_PATH": "/tmp/deck.json",
                "DECK_STORAGE_KEY": "myDeck",
            },
        ):
            config = StorageConfig()

        assert config.backend == "redis"
        assert config.path == "/tmp/deck.json"
        assert config.key == "myDeck"


class TestShuffleConfig:
    """Tests for ShuffleConfig class."""

    def test_shuffle_defaults(self):
        """Test default riffle knobs and no seed."""
        with patch.dict(os.environ, {}, clear=True):
            config = ShuffleConfig()

        assert config.stickiness == 0.5
        assert config.cut_jitter == 15
        assert config.seed is None

    def test_shuffle_from_env(self):
        """Test knobs and seed from the environment."""
        with patch.dict(
            os.environ,
            {"DECK_STICKINESS": "0.8", "DECK_CUT_JITTER": "4", "DECK_SEED": " 1234 "},
        ):
            config = ShuffleConfig()

        assert config.stickiness == 0.8
        assert config.cut_jitter == 4
        assert config.seed == 1234

    def test_empty_seed_is_unseeded(self):
        """Test an empty DECK_SEED means no fixed seed."""
        with patch.dict(os.environ, {"DECK_SEED": ""}):
            assert ShuffleConfig().seed is None


class TestLoggingConfig:
    """Tests for LoggingConfig class."""

    def test_logging_defaults(self):
        """Test default levels and rotation."""
        with patch.dict(os.environ, {}, clear=True):
            config = LoggingConfig()

        assert config.level == "INFO"
        assert config.console_level == "WARNING"
        assert config.log_dir == "logs"
        assert config.max_mb == 10
        assert config.backup_count == 5

    def test_levels_upper_cased(self):
        """Test level names are normalized."""
        with patch.dict(os.environ, {"LOG_LEVEL": "debug", "LOG_CONSOLE_LEVEL": "info"}):
            config = LoggingConfig()

        assert config.level == "DEBUG"
        assert config.console_level == "INFO"


class TestAppConfig:
    """Tests for AppConfig class."""

    def test_app_defaults(self):
        """Test top-level defaults."""
        with patch.dict(os.environ, {}, clear=True):
            config = AppConfig()

        assert config.debug is False
        assert config.port == 8000
        assert config.check_invariants is True
        assert config.storage.backend == "file"

    def test_invariant_checks_can_be_disabled(self):
        """Test DECK_CHECK_INVARIANTS=false."""
        with patch.dict(os.environ, {"DECK_CHECK_INVARIANTS": "false"}):
            assert AppConfig().check_invariants is False

    def test_config_is_frozen(self):
        """Test configuration cannot be changed after creation."""
        config = AppConfig()
        with pytest.raises(AttributeError):
            config.port = 9000  # type: ignore[misc]
