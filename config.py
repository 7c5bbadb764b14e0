"""Configuration management with environment variable support."""

import os
from dataclasses import dataclass, field
from typing import Literal


def _parse_cors_origins() -> list[str]:
    """Parse CORS_ORIGINS environment variable."""
    origins = os.getenv("CORS_ORIGINS", "http://localhost:8000")
    return [o.strip() for o in origins.split(",") if o.strip()]


def _parse_seed() -> int | None:
    """Parse DECK_SEED; unset or empty means unseeded."""
    seed = os.getenv("DECK_SEED", "").strip()
    return int(seed) if seed else None


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass(frozen=True)
class CORSConfig:
    """CORS configuration."""

    allowed_origins: list[str] = field(default_factory=_parse_cors_origins)
    allow_credentials: bool = True
    allow_methods: list[str] = field(default_factory=lambda: ["*"])
    allow_headers: list[str] = field(default_factory=lambda: ["*"])


@dataclass(frozen=True)
class RateLimitConfig:
    """Rate limiting configuration."""

    enabled: bool = field(default_factory=lambda: _env_flag("RATE_LIMIT_ENABLED", "true"))
    requests_per_minute: int = field(
        default_factory=lambda: int(os.getenv("RATE_LIMIT_RPM", "60"))
    )


@dataclass(frozen=True)
class RedisConfig:
    """Redis connection configuration."""

    host: str = field(default_factory=lambda: os.getenv("REDIS_HOST", "localhost"))
    port: int = field(default_factory=lambda: int(os.getenv("REDIS_PORT", "6379")))
    db: int = field(default_factory=lambda: int(os.getenv("REDIS_DB", "0")))
    password: str | None = field(default_factory=lambda: os.getenv("REDIS_PASSWORD"))

    @property
    def url(self) -> str:
        """Build Redis connection URL."""
        auth = f":{self.password}@" if self.password else ""
        return f"redis://{auth}{self.host}:{self.port}/{self.db}"


@dataclass(frozen=True)
class StorageConfig:
    """Where the deck record is kept."""

    backend: Literal["file", "redis", "memory"] = field(
        default_factory=lambda: os.getenv("DECK_STORAGE", "file").lower()  # type: ignore[return-value]
    )
    path: str = field(
        default_factory=lambda: os.getenv(
            "DECK_STATE_PATH",
            os.path.join(os.path.expanduser("~"), ".tarot_deck_state.json"),
        )
    )
    key: str = field(default_factory=lambda: os.getenv("DECK_STORAGE_KEY", "tarotDeck"))


@dataclass(frozen=True)
class ShuffleConfig:
    """Riffle realism knobs and optional fixed seed."""

    stickiness: float = field(
        default_factory=lambda: float(os.getenv("DECK_STICKINESS", "0.5"))
    )
    cut_jitter: float = field(
        default_factory=lambda: float(os.getenv("DECK_CUT_JITTER", "15"))
    )
    seed: int | None = field(default_factory=_parse_seed)


@dataclass(frozen=True)
class LoggingConfig:
    """Log levels and rotating file settings."""

    level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())
    console_level: str = field(
        default_factory=lambda: os.getenv("LOG_CONSOLE_LEVEL", "WARNING").upper()
    )
    log_dir: str = field(default_factory=lambda: os.getenv("LOG_DIR", "logs"))
    max_mb: int = field(default_factory=lambda: int(os.getenv("LOG_MAX_MB", "10")))
    backup_count: int = field(
        default_factory=lambda: int(os.getenv("LOG_BACKUP_COUNT", "5"))
    )


@dataclass(frozen=True)
class AppConfig:
    """Application configuration."""

    debug: bool = field(default_factory=lambda: _env_flag("DEBUG", "false"))
    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))
    # Population check after every mutating operation
    check_invariants: bool = field(
        default_factory=lambda: _env_flag("DECK_CHECK_INVARIANTS", "true")
    )

    storage: StorageConfig = field(default_factory=StorageConfig)
    redis: RedisConfig = field(default_factory=RedisConfig)
    shuffle: ShuffleConfig = field(default_factory=ShuffleConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    cors: CORSConfig = field(default_factory=CORSConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)


# Global configuration instance
config = AppConfig()
