"""Haptic feedback driven by game events."""

import logging
from typing import Protocol

from config import GameConfig
from core.game.engine import BlackjackGame
from core.game.events import EventType, GameEvent

logger = logging.getLogger(__name__)


class Haptics(Protocol):
    """Whatever can buzz the device: a phone bridge, a gamepad, a test double."""

    def vibrate(self, duration_ms: int) -> None:
        ...


def vibration_for(event: GameEvent, rules: GameConfig) -> int | None:
    """
    Pulse length for an event, or None if it should not vibrate.

    A short pulse for every card, a medium one for a win and a long one for
    anything else at the end of a round.
    """
    if event.event_type == EventType.CARD_DEALT:
        return rules.card_vibration_ms
    if event.event_type == EventType.ROUND_ENDED:
        if event.data.get("is_win"):
            return rules.win_vibration_ms
        return rules.loss_vibration_ms
    return None


class HapticFeedback:
    """
    Forwards a game's pulses to a device.

    Failures in the device layer are logged and never reach the engine.
    """

    def __init__(self, haptics: Haptics, rules: GameConfig | None = None) -> None:
        self.haptics = haptics
        self.rules = rules or GameConfig()

    def attach(self, game: BlackjackGame) -> None:
        """Start listening to a game's card and round-end events."""
        game.subscribe(self.on_event, EventType.CARD_DEALT)
        game.subscribe(self.on_event, EventType.ROUND_ENDED)

    def on_event(self, event: GameEvent) -> None:
        duration = vibration_for(event, self.rules)
        if duration is None:
            return
        try:
            self.haptics.vibrate(duration)
        except Exception as e:
            logger.warning("Vibration not available: %s", e)
