"""Tests for API endpoints."""

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from api.main import app


@pytest_asyncio.fixture
async def client():
    """Create test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.mark.asyncio
async def test_health_check(client):
    """Test health check endpoint."""
    response = await client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


@pytest.mark.asyncio
async def test_state_before_first_round(client, live_table):
    """Test the table starts idle with empty hands."""
    live_table("10H", "9S", "8D", "7C")

    response = await client.get("/api/game/state")
    assert response.status_code == 200
    data = response.json()

    assert data["phase"] == "NOT_STARTED"
    assert data["player"]["cards"] == []
    assert data["outcome"] is None
    assert data["message"] == ""
    assert data["can_deal"] is True
    assert data["can_hit"] is False


@pytest.mark.asyncio
async def test_new_game(client, live_table):
    """Test dealing a round finishes the deal before responding."""
    live_table("10H", "9S", "8D", "7C")

    response = await client.post("/api/game/new")
    assert response.status_code == 200
    data = response.json()

    assert data["phase"] == "PLAYER_TURN"
    assert [c["rank"] for c in data["player"]["cards"]] == ["10", "8"]
    assert data["player"]["score"] == 18
    assert data["can_hit"] is True
    assert data["can_stand"] is True


@pytest.mark.asyncio
async def test_dealer_hole_card_hidden(client, live_table):
    """Test the first dealer card and dealer score are withheld."""
    live_table("10H", "9S", "8D", "7C")

    data = (await client.post("/api/game/new")).json()

    assert data["dealer_hidden"] is True
    assert data["dealer"]["score"] is None
    hole, up = data["dealer"]["cards"]
    assert hole["hidden"] is True
    assert hole["rank"] == "?"
    assert up["rank"] == "7"
    assert up["suit"] == "♣"


@pytest.mark.asyncio
async def test_hit(client, live_table):
    """Test taking a card."""
    live_table("10H", "9S", "2D", "7C", "3S")
    await client.post("/api/game/new")

    data = (await client.post("/api/game/hit")).json()

    assert len(data["player"]["cards"]) == 3
    assert data["player"]["score"] == 15
    assert data["phase"] == "PLAYER_TURN"


@pytest.mark.asyncio
async def test_hit_to_bust(client, live_table):
    """Test a bust hands over to the dealer and ends the round."""
    live_table("10H", "10S", "6D", "6C", "KS", "5H")
    await client.post("/api/game/new")

    data = (await client.post("/api/game/hit")).json()

    assert data["phase"] == "COMPLETE"
    assert data["outcome"] == "PLAYER_BUST"
    assert data["message"] == "BUST! YOU LOSE"
    assert data["dealer"]["score"] == 21
    assert data["losses"] == 1


@pytest.mark.asyncio
async def test_stand(client, live_table):
    """Test standing plays out the dealer and reveals the hole card."""
    live_table("10H", "10S", "9D", "6C", "KS")
    await client.post("/api/game/new")

    data = (await client.post("/api/game/stand")).json()

    assert data["phase"] == "COMPLETE"
    assert data["outcome"] == "DEALER_BUST"
    assert data["message"] == "DEALER BUSTED! YOU WIN!"
    assert data["dealer_hidden"] is False
    assert data["dealer"]["cards"][0]["hidden"] is False
    assert data["dealer"]["score"] == 26
    assert data["wins"] == 1
    assert data["can_deal"] is True


@pytest.mark.asyncio
async def test_hit_before_deal_is_ignored(client, live_table):
    """Test an illegal move returns the unchanged state."""
    live_table("10H", "9S", "8D", "7C")
    before = (await client.get("/api/game/state")).json()

    response = await client.post("/api/game/hit")

    assert response.status_code == 200
    assert response.json() == before


@pytest.mark.asyncio
async def test_stand_after_round_is_ignored(client, live_table):
    live_table("10H", "10S", "9D", "7C")
    await client.post("/api/game/new")
    finished = (await client.post("/api/game/stand")).json()

    response = await client.post("/api/game/stand")
    assert response.json() == finished


@pytest.mark.asyncio
async def test_action_endpoint(client, live_table):
    """Test actions by name."""
    live_table("10H", "10S", "9D", "7C")

    data = (await client.post("/api/game/action", json={"action": "new"})).json()
    assert data["phase"] == "PLAYER_TURN"

    data = (await client.post("/api/game/action", json={"action": "stand"})).json()
    assert data["outcome"] == "PLAYER_WIN"
    assert data["message"] == "YOU WIN!"


@pytest.mark.asyncio
async def test_action_rejects_unknown_name(client, live_table):
    """Test an invalid action name fails validation."""
    live_table("10H", "9S", "8D", "7C")
    response = await client.post("/api/game/action", json={"action": "double"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_stats(client, live_table):
    """Test the tally endpoint follows finished rounds."""
    live_table("10H", "10S", "9D", "7C")

    data = (await client.get("/api/stats")).json()
    assert data == {"wins": 0, "losses": 0, "games": 0, "win_rate": 0.0}

    await client.post("/api/game/new")
    await client.post("/api/game/stand")

    data = (await client.get("/api/stats")).json()
    assert data["wins"] == 1
    assert data["losses"] == 0
    assert data["games"] == 1
    assert data["win_rate"] == 1.0
