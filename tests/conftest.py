"""Pytest fixtures for blackjack tests."""

from random import Random

import pytest

from config import GameConfig
from core.cards import Card, Deck
from core.hand import Hand
from core.game import BlackjackGame
from core.stats import InMemoryStatsStore, StatsTracker


class StackedDeck(Deck):
    """A deck that always refills in a fixed order, first listed card drawn first."""

    def __init__(self, cards: list[Card]) -> None:
        self._order = list(cards)
        super().__init__()
        self.reset()

    def reset(self) -> None:
        self._cards = list(reversed(self._order))


def cards_from(*codes: str) -> list[Card]:
    """Cards from short strings like 'AS', '10H', 'KD'."""
    return [Card.from_string(code) for code in codes]


# Zero delays so paced tables finish instantly
FAST_RULES = GameConfig(card_deal_delay_ms=0, dealer_turn_delay_ms=0, reveal_delay_ms=0)


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def deck(rng):
    """A shuffled deck."""
    d = Deck(rng=rng)
    d.reset()
    return d


@pytest.fixture
def store():
    """An empty in-memory stats store."""
    return InMemoryStatsStore()


@pytest.fixture
def tracker(store):
    """A tracker backed by the in-memory store."""
    return StatsTracker(store)


@pytest.fixture
def game(rng, tracker):
    """A new unpaced game with a seeded deck."""
    return BlackjackGame(stats=tracker, rng=rng)


@pytest.fixture
def stacked_game(tracker):
    """
    Factory for games dealt from a fixed card order.

    Cards are dealt in the listed order: player, dealer, player, dealer,
    then hits and dealer draws.
    """

    def _make(*codes: str, paced: bool = False) -> BlackjackGame:
        return BlackjackGame(
            stats=tracker,
            rules=FAST_RULES,
            deck=StackedDeck(cards_from(*codes)),
            paced=paced,
        )

    return _make


@pytest.fixture
def blackjack_hand():
    """A natural blackjack hand."""
    return Hand(cards_from("AS", "KH"))


@pytest.fixture
def soft_17_hand():
    """A soft 17 hand (A-6)."""
    return Hand(cards_from("AS", "6H"))


@pytest.fixture
def bust_hand():
    """A busted hand."""
    return Hand(cards_from("10S", "6H", "KC"))


@pytest.fixture
def live_table(tracker):
    """
    Factory that installs a paced, stacked game as the API's live table.

    The table is dropped again after the test.
    """
    from api.table import set_table

    def _install(*codes: str) -> BlackjackGame:
        game = BlackjackGame(
            stats=tracker,
            rules=FAST_RULES,
            deck=StackedDeck(cards_from(*codes)),
            paced=True,
        )
        set_table(game)
        return game

    yield _install
    set_table(None)
