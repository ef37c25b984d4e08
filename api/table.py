"""The single live table shared by the REST routes and the WebSocket."""

import logging

from config import config
from core.game import BlackjackGame, GameView
from core.stats import StatsTracker, create_stats_store

logger = logging.getLogger(__name__)

# Global table instance
_table: BlackjackGame | None = None


def create_table() -> BlackjackGame:
    """Build a paced game whose tally lives in the configured store."""
    store = create_stats_store(config.stats, config.redis)
    tracker = StatsTracker(store)
    logger.info(
        "Stats loaded from %s backend: %d wins, %d losses",
        config.stats.backend,
        tracker.wins,
        tracker.losses,
    )
    return BlackjackGame(stats=tracker, rules=config.game, paced=True)


def get_table() -> BlackjackGame:
    """Get or create the live table."""
    global _table
    if _table is None:
        _table = create_table()
    return _table


def set_table(game: BlackjackGame | None) -> None:
    """Replace the live table (None rebuilds it on next access)."""
    global _table
    _table = game


def run_pending_steps(game: BlackjackGame) -> GameView:
    """Finish any in-progress deal or dealer turn without pacing."""
    while game.busy:
        game.step()
    return game.view
