"""Game API endpoints."""

from fastapi import APIRouter

from api.schemas import (
    ActionRequest,
    CardResponse,
    GameStateResponse,
    HandResponse,
)
from api.table import get_table, run_pending_steps
from core.cards import Card
from core.game import GameView

router = APIRouter()

HIDDEN_CARD = CardResponse(rank="?", suit="?", value=0, is_red=False, hidden=True)


def _card_to_response(card: Card) -> CardResponse:
    """Convert a Card to CardResponse."""
    return CardResponse(
        rank=str(card.rank),
        suit=str(card.suit),
        value=card.value,
        is_red=card.is_red,
    )


def game_state_response(view: GameView) -> GameStateResponse:
    """Convert a table snapshot to a response, keeping the hole card face down."""
    dealer_cards = [_card_to_response(c) for c in view.dealer_cards]
    if view.dealer_hidden and dealer_cards:
        dealer_cards[0] = HIDDEN_CARD

    return GameStateResponse(
        phase=view.phase.name,
        player=HandResponse(
            cards=[_card_to_response(c) for c in view.player_cards],
            score=view.player_score,
        ),
        dealer=HandResponse(cards=dealer_cards, score=view.dealer_score),
        dealer_hidden=view.dealer_hidden,
        outcome=view.outcome.name if view.outcome else None,
        message=view.message,
        wins=view.wins,
        losses=view.losses,
        can_hit=view.can_hit,
        can_stand=view.can_stand,
        can_deal=view.can_deal,
    )


@router.get("/state")
async def get_state() -> GameStateResponse:
    """Get current table state."""
    return game_state_response(get_table().view)


@router.post("/new")
async def new_game() -> GameStateResponse:
    """Shuffle and deal a new round."""
    game = get_table()
    game.new_game()
    return game_state_response(run_pending_steps(game))


@router.post("/hit")
async def hit() -> GameStateResponse:
    """Player takes a card. Ignored outside the player's turn."""
    game = get_table()
    game.hit()
    return game_state_response(run_pending_steps(game))


@router.post("/stand")
async def stand() -> GameStateResponse:
    """Player stands and the dealer plays out. Ignored outside the player's turn."""
    game = get_table()
    game.stand()
    return game_state_response(run_pending_steps(game))


@router.post("/action")
async def player_action(request: ActionRequest) -> GameStateResponse:
    """Execute an action by name."""
    game = get_table()

    actions = {
        "hit": game.hit,
        "stand": game.stand,
        "new": game.new_game,
    }
    actions[request.action]()

    return game_state_response(run_pending_steps(game))
