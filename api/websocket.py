"""WebSocket table: paced dealing and dealer play, streamed as events."""

import asyncio
import json
import logging
from typing import Any
from uuid import uuid4

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from api.routes.game import game_state_response
from api.table import get_table
from core.feedback import vibration_for
from core.game import BlackjackGame, GamePhase
from core.game.events import GameEvent

logger = logging.getLogger(__name__)

router = APIRouter()


class ConnectionManager:
    """Manage WebSocket connections watching the live table."""

    def __init__(self) -> None:
        self._connections: dict[str, WebSocket] = {}
        self._event_queues: dict[str, asyncio.Queue] = {}
        self._game: BlackjackGame | None = None
        self._driver: asyncio.Task | None = None

    async def connect(self, websocket: WebSocket, client_id: str) -> None:
        """Accept and register a new connection."""
        await websocket.accept()
        self._connections[client_id] = websocket
        self._event_queues[client_id] = asyncio.Queue()

    def disconnect(self, client_id: str) -> None:
        """Remove a connection. A running deal or dealer turn keeps going."""
        self._connections.pop(client_id, None)
        self._event_queues.pop(client_id, None)

    def attach(self, game: BlackjackGame) -> None:
        """Forward a table's events to every connection, once per table."""
        if self._game is game:
            return
        self._game = game
        game.subscribe(self._queue_event)

    def _queue_event(self, event: GameEvent) -> None:
        """Queue an event with the table state as of that event."""
        if not self._event_queues or self._game is None:
            return
        message = _event_to_message(event, self._game)
        for queue in self._event_queues.values():
            queue.put_nowait(message)

    async def get_event(self, client_id: str) -> dict[str, Any]:
        """Wait for the next event message for a connection."""
        return await self._event_queues[client_id].get()

    async def send_message(self, client_id: str, message: dict[str, Any]) -> None:
        """Send a message to a specific connection."""
        if client_id in self._connections:
            try:
                await self._connections[client_id].send_json(message)
            except (WebSocketDisconnect, RuntimeError) as e:
                logger.debug("Dropping message for %s: %s", client_id, e)

    def drive(self, game: BlackjackGame) -> None:
        """Start pacing the table's pending steps unless already doing so."""
        if not game.busy:
            return
        if self._driver is not None and not self._driver.done():
            return
        self._driver = asyncio.create_task(play_out(game))
        self._driver.add_done_callback(_log_driver_failure)


def _log_driver_failure(task: asyncio.Task) -> None:
    """Report a paced sequence that stopped on an error."""
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("Paced play stopped: %s", exc, exc_info=exc)


# Global connection manager
manager = ConnectionManager()


def _step_delay(game: BlackjackGame, first: bool) -> float:
    """Seconds to wait before the next step."""
    rules = game.rules
    if game.phase == GamePhase.DEALING:
        if first:
            return 0.0
        return rules.card_deal_delay_ms / 1000
    if first:
        return rules.reveal_delay_ms / 1000
    return rules.dealer_turn_delay_ms / 1000


async def play_out(game: BlackjackGame) -> None:
    """Step through a deal or dealer turn with presentation delays."""
    first = True
    while game.busy:
        await asyncio.sleep(_step_delay(game, first))
        game.step()
        first = False


def _event_to_message(event: GameEvent, game: BlackjackGame) -> dict[str, Any]:
    """Convert a game event to a WebSocket message."""
    message = {
        "type": "event",
        "event_type": event.event_type.name,
        "data": event.data,
        "state": game_state_response(game.view).model_dump(),
    }

    vibrate_ms = vibration_for(event, game.rules)
    if vibrate_ms is not None:
        message["vibrate_ms"] = vibrate_ms

    return message


@router.websocket("/game")
async def game_websocket(websocket: WebSocket) -> None:
    """
    WebSocket endpoint for paced play.

    Messages from client:
    - {"type": "new_game"}
    - {"type": "hit"}
    - {"type": "stand"}
    - {"type": "get_state"}

    Messages to client:
    - {"type": "state_update", "state": {...}}
    - {"type": "event", "event_type": "...", "data": {...}, "state": {...}, "vibrate_ms": 50}
    - {"type": "error", "message": "..."}

    Moves that are not legal right now are ignored without a reply.
    """
    client_id = str(uuid4())
    await manager.connect(websocket, client_id)
    game = get_table()
    manager.attach(game)

    await manager.send_message(client_id, {
        "type": "state_update",
        "state": game_state_response(game.view).model_dump(),
    })

    async def process_events():
        """Process game events and send to client."""
        while True:
            message = await manager.get_event(client_id)
            await manager.send_message(client_id, message)

    event_task = asyncio.create_task(process_events())

    actions = {
        "new_game": game.new_game,
        "hit": game.hit,
        "stand": game.stand,
    }

    try:
        while True:
            data = await websocket.receive_text()
            try:
                message = json.loads(data)
            except json.JSONDecodeError:
                await manager.send_message(client_id, {
                    "type": "error",
                    "message": "Invalid JSON",
                })
                continue

            msg_type = message.get("type") if isinstance(message, dict) else None

            if msg_type == "get_state":
                await manager.send_message(client_id, {
                    "type": "state_update",
                    "state": game_state_response(game.view).model_dump(),
                })
            elif msg_type in actions:
                actions[msg_type]()
                manager.drive(game)
            else:
                await manager.send_message(client_id, {
                    "type": "error",
                    "message": f"Unknown message type: {msg_type}",
                })

    except WebSocketDisconnect:
        pass
    finally:
        event_task.cancel()
        try:
            await event_task
        except asyncio.CancelledError:
            pass
        manager.disconnect(client_id)
