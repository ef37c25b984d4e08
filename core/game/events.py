"""Game events for the event system."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Any, Callable


class EventType(Enum):
    """Types of game events."""

    # Round flow events
    ROUND_STARTED = auto()
    ROUND_ENDED = auto()

    # Card events
    CARD_DEALT = auto()
    DECK_RESHUFFLED = auto()

    # Player action events
    PLAYER_HIT = auto()
    PLAYER_STAND = auto()
    PLAYER_BUSTS = auto()

    # Dealer events
    DEALER_REVEALS = auto()
    DEALER_STANDS = auto()


@dataclass(frozen=True)
class GameEvent:
    """
    Immutable game event.

    Events are the primary communication mechanism between the core engine
    and the presentation layer.
    """

    event_type: EventType
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"{self.event_type.name}: {self.data}"


# Type alias for event handlers
EventHandler = Callable[[GameEvent], None]


class EventEmitter:
    """
    Simple event emitter for game events.

    Handlers subscribe to one event type, or to every event with None.
    The most recent events are kept for inspection.
    """

    def __init__(self, max_history: int = 200) -> None:
        """Initialize the event emitter."""
        self._handlers: dict[EventType | None, list[EventHandler]] = {}
        self._event_history: list[GameEvent] = []
        self._max_history = max_history

    def subscribe(
        self,
        handler: EventHandler,
        event_type: EventType | None = None,
    ) -> None:
        """
        Subscribe to events.

        Args:
            handler: Function to call when event occurs
            event_type: Specific event type to subscribe to, or None for all events
        """
        self._handlers.setdefault(event_type, []).append(handler)

    def emit(self, event: GameEvent) -> None:
        """
        Emit an event to all subscribers.

        Args:
            event: The event to emit
        """
        self._event_history.append(event)
        if len(self._event_history) > self._max_history:
            del self._event_history[: -self._max_history]

        for handler in list(self._handlers.get(event.event_type, [])):
            handler(event)

        for handler in list(self._handlers.get(None, [])):
            handler(event)

    def emit_new(
        self,
        event_type: EventType,
        **data: Any,
    ) -> GameEvent:
        """
        Create and emit a new event.

        Args:
            event_type: Type of event
            **data: Event data

        Returns:
            The created event
        """
        event = GameEvent(event_type=event_type, data=data)
        self.emit(event)
        return event

    @property
    def history(self) -> list[GameEvent]:
        """Return the event history."""
        return self._event_history.copy()
