"""Configuration management with environment variable support."""

import os
from dataclasses import dataclass, field


def _parse_cors_origins() -> list[str]:
    """Parse CORS_ORIGINS environment variable."""
    origins = os.getenv("CORS_ORIGINS", "http://localhost:8000")
    return [o.strip() for o in origins.split(",") if o.strip()]


def _default_stats_path() -> str:
    """Default location of the stats file in the user's home directory."""
    return os.path.join(os.path.expanduser("~"), ".blackjack_stats.json")


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

    enabled: bool = field(
        default_factory=lambda: os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
    )
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
class StatsConfig:
    """Where the win/loss tally is persisted."""

    backend: str = field(  # "file", "redis" or "memory"
        default_factory=lambda: os.getenv("STATS_BACKEND", "file").lower()
    )
    path: str = field(default_factory=lambda: os.getenv("STATS_FILE", _default_stats_path()))
    key: str = field(default_factory=lambda: os.getenv("STATS_KEY", "blackjackStats"))


@dataclass(frozen=True)
class GameConfig:
    """Game rules and presentation pacing."""

    blackjack_score: int = 21
    dealer_stand_score: int = 17

    # Pacing for step-driven tables, in milliseconds
    card_deal_delay_ms: int = 300
    dealer_turn_delay_ms: int = 1000
    reveal_delay_ms: int = 500

    # Haptic pulse lengths, in milliseconds
    card_vibration_ms: int = 50
    win_vibration_ms: int = 100
    loss_vibration_ms: int = 200


@dataclass(frozen=True)
class AppConfig:
    """Application configuration."""

    debug: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")
    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())

    redis: RedisConfig = field(default_factory=RedisConfig)
    stats: StatsConfig = field(default_factory=StatsConfig)
    game: GameConfig = field(default_factory=GameConfig)
    cors: CORSConfig = field(default_factory=CORSConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)


# Global configuration instance
config = AppConfig()
