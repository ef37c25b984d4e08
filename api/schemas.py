"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, ConfigDict
from typing import Literal


class ActionRequest(BaseModel):
    """Request for a player action."""

    action: Literal["hit", "stand", "new"]


class CardResponse(BaseModel):
    """Card representation. Face-down cards carry no rank or suit."""

    model_config = ConfigDict(from_attributes=True)

    rank: str
    suit: str
    value: int
    is_red: bool
    hidden: bool = False


class HandResponse(BaseModel):
    """Hand representation."""

    cards: list[CardResponse]
    score: int | None


class GameStateResponse(BaseModel):
    """Current table state."""

    phase: str
    player: HandResponse
    dealer: HandResponse
    dealer_hidden: bool
    outcome: str | None
    message: str
    wins: int
    losses: int
    can_hit: bool
    can_stand: bool
    can_deal: bool


class StatsResponse(BaseModel):
    """Cumulative tally."""

    wins: int
    losses: int
    games: int
    win_rate: float
