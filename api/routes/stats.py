"""Statistics API endpoints."""

from fastapi import APIRouter

from api.schemas import StatsResponse
from api.table import get_table

router = APIRouter()


@router.get("")
async def get_stats() -> StatsResponse:
    """Get the cumulative win/loss tally."""
    stats = get_table().stats.stats
    return StatsResponse(
        wins=stats.wins,
        losses=stats.losses,
        games=stats.games,
        win_rate=stats.win_rate,
    )
