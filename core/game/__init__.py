"""Game engine and state management."""

from core.game.events import GameEvent, EventType
from core.game.state import GamePhase, Outcome
from core.game.engine import BlackjackGame, GameView, compare_hands

__all__ = [
    "GameEvent",
    "EventType",
    "GamePhase",
    "Outcome",
    "BlackjackGame",
    "GameView",
    "compare_hands",
]
