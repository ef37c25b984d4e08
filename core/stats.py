"""Win/loss tally with pluggable persistence."""

import json
import logging
import math
import os
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any

import redis

if TYPE_CHECKING:
    from config import StatsConfig, RedisConfig
    from core.game.state import Outcome

logger = logging.getLogger(__name__)


class StatsStoreError(Exception):
    """Raised by a store when the backing storage cannot be read or written."""


@dataclass
class Stats:
    """Cumulative win/loss counters."""

    wins: int = 0
    losses: int = 0

    @property
    def games(self) -> int:
        """Decided games (pushes are not counted)."""
        return self.wins + self.losses

    @property
    def win_rate(self) -> float:
        """Wins as a fraction of decided games."""
        if self.games == 0:
            return 0.0
        return self.wins / self.games

    @classmethod
    def from_dict(cls, data: Any) -> "Stats":
        """
        Build counters from stored data.

        Missing, non-numeric or non-finite counters fall back to 0.

        Raises:
            ValueError: if `data` is not a mapping
        """
        if not isinstance(data, dict):
            raise ValueError(f"Expected a mapping, got {type(data).__name__}")
        return cls(
            wins=_counter(data.get("wins")),
            losses=_counter(data.get("losses")),
        )


def _counter(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if isinstance(value, float) and not math.isfinite(value):
        return 0
    return max(int(value), 0)


class StatsStore(ABC):
    """Key-value storage for the tally."""

    @abstractmethod
    def load(self) -> dict[str, Any] | None:
        """Return the stored counters, or None if nothing was saved yet."""
        ...

    @abstractmethod
    def save(self, data: dict[str, Any]) -> None:
        """Store the counters, raising StatsStoreError on failure."""
        ...


class InMemoryStatsStore(StatsStore):
    """Process-local store, used by tests and when persistence is disabled."""

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data = dict(data) if data is not None else None

    def load(self) -> dict[str, Any] | None:
        return dict(self._data) if self._data is not None else None

    def save(self, data: dict[str, Any]) -> None:
        self._data = dict(data)


class JsonFileStatsStore(StatsStore):
    """Stores the counters as a small JSON document on disk."""

    def __init__(self, path: str) -> None:
        self.path = path

    def load(self) -> dict[str, Any] | None:
        if not os.path.exists(self.path):
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            raise StatsStoreError(f"Cannot read {self.path}: {e}") from e

    def save(self, data: dict[str, Any]) -> None:
        try:
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            raise StatsStoreError(f"Cannot write {self.path}: {e}") from e


class RedisStatsStore(StatsStore):
    """Stores the counters as a JSON string under a single Redis key."""

    def __init__(self, redis_client: redis.Redis, key: str = "blackjackStats") -> None:
        self._redis = redis_client
        self._key = f"blackjack:{key}"

    def load(self) -> dict[str, Any] | None:
        try:
            raw = self._redis.get(self._key)
        except redis.RedisError as e:
            raise StatsStoreError(f"Redis read failed: {e}") from e
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as e:
            raise StatsStoreError(f"Corrupt stats under {self._key}: {e}") from e

    def save(self, data: dict[str, Any]) -> None:
        try:
            self._redis.set(self._key, json.dumps(data))
        except redis.RedisError as e:
            raise StatsStoreError(f"Redis write failed: {e}") from e


def create_stats_store(
    stats_config: "StatsConfig",
    redis_config: "RedisConfig | None" = None,
) -> StatsStore:
    """
    Build the store selected by configuration.

    Args:
        stats_config: Backend choice, file path and key
        redis_config: Connection settings, required for the redis backend

    Raises:
        ValueError: on an unknown backend name
    """
    if stats_config.backend == "file":
        return JsonFileStatsStore(stats_config.path)
    if stats_config.backend == "memory":
        return InMemoryStatsStore()
    if stats_config.backend == "redis":
        if redis_config is None:
            raise ValueError("Redis backend requires a RedisConfig")
        client = redis.Redis.from_url(redis_config.url)
        return RedisStatsStore(client, key=stats_config.key)
    raise ValueError(f"Unknown stats backend: {stats_config.backend}")


class StatsTracker:
    """
    Keeps the cumulative wins/losses and persists them after every round.

    Storage problems never reach the caller: a failed load starts from zero
    and a failed save keeps the in-memory counters.
    """

    def __init__(self, store: StatsStore | None = None, autoload: bool = True) -> None:
        """
        Initialize the tracker.

        Args:
            store: Persistence backend (in-memory if not provided)
            autoload: Restore counters from the store immediately
        """
        self.store = store or InMemoryStatsStore()
        self.stats = Stats()
        if autoload:
            self.load()

    @property
    def wins(self) -> int:
        return self.stats.wins

    @property
    def losses(self) -> int:
        return self.stats.losses

    def load(self) -> Stats:
        """Restore counters from the store; anything unusable means zero."""
        try:
            data = self.store.load()
        except StatsStoreError as e:
            logger.warning("Failed to load stats: %s", e)
            data = None

        if data is None:
            self.stats = Stats()
            return self.stats

        try:
            self.stats = Stats.from_dict(data)
        except ValueError as e:
            logger.warning("Ignoring malformed stats: %s", e)
            self.stats = Stats()
        return self.stats

    def record(self, outcome: "Outcome") -> None:
        """Count a finished round. Pushes change nothing."""
        if outcome.is_win:
            self.stats.wins += 1
        elif outcome.is_loss:
            self.stats.losses += 1

    def persist(self) -> bool:
        """
        Save the counters.

        Returns:
            True if the store accepted them
        """
        try:
            self.store.save(asdict(self.stats))
        except StatsStoreError as e:
            logger.warning("Failed to save stats: %s", e)
            return False
        return True

    def record_and_persist(self, outcome: "Outcome") -> bool:
        """Record a round and save immediately."""
        self.record(outcome)
        return self.persist()
