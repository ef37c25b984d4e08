"""Tests for Card and Deck classes."""

from collections import Counter
from random import Random

import pytest
from hypothesis import given, strategies as st

from core.cards import Card, Deck, Rank, Suit


class TestCard:
    """Tests for the Card class."""

    def test_card_creation(self):
        """Test creating a card."""
        card = Card(Rank.ACE, Suit.SPADES)
        assert card.rank == Rank.ACE
        assert card.suit == Suit.SPADES

    def test_card_immutability(self):
        """Test that cards are immutable."""
        card = Card(Rank.ACE, Suit.SPADES)
        with pytest.raises(AttributeError):
            card.rank = Rank.KING

    def test_card_value(self):
        """Test card blackjack values."""
        assert Card(Rank.TWO, Suit.HEARTS).value == 2
        assert Card(Rank.NINE, Suit.HEARTS).value == 9
        assert Card(Rank.TEN, Suit.HEARTS).value == 10
        assert Card(Rank.JACK, Suit.HEARTS).value == 10
        assert Card(Rank.QUEEN, Suit.HEARTS).value == 10
        assert Card(Rank.KING, Suit.HEARTS).value == 10
        assert Card(Rank.ACE, Suit.HEARTS).value == 11

    def test_card_colour(self):
        """Hearts and diamonds are red, spades and clubs are not."""
        assert Card(Rank.TWO, Suit.HEARTS).is_red
        assert Card(Rank.TWO, Suit.DIAMONDS).is_red
        assert not Card(Rank.TWO, Suit.SPADES).is_red
        assert not Card(Rank.TWO, Suit.CLUBS).is_red

    def test_card_is_ace(self):
        """Test ace detection."""
        assert Card(Rank.ACE, Suit.SPADES).is_ace
        assert not Card(Rank.KING, Suit.SPADES).is_ace

    def test_card_from_string(self):
        """Test creating cards from strings."""
        assert Card.from_string("AS") == Card(Rank.ACE, Suit.SPADES)
        assert Card.from_string("2H") == Card(Rank.TWO, Suit.HEARTS)
        assert Card.from_string("10D") == Card(Rank.TEN, Suit.DIAMONDS)
        assert Card.from_string("kc") == Card(Rank.KING, Suit.CLUBS)
        assert Card.from_string("Q♥") == Card(Rank.QUEEN, Suit.HEARTS)

    def test_card_from_string_invalid(self):
        """Test that malformed strings are rejected."""
        with pytest.raises(ValueError):
            Card.from_string("Z")
        with pytest.raises(ValueError):
            Card.from_string("1S")
        with pytest.raises(ValueError):
            Card.from_string("AX")

    def test_card_str(self):
        """Test string representation."""
        assert str(Card(Rank.ACE, Suit.SPADES)) == "A♠"
        assert str(Card(Rank.TEN, Suit.HEARTS)) == "10♥"
        assert str(Card(Rank.KING, Suit.DIAMONDS)) == "K♦"

    def test_card_hash(self):
        """Test that cards can be used in sets/dicts."""
        cards = {Card(Rank.ACE, Suit.SPADES), Card(Rank.ACE, Suit.SPADES)}
        assert len(cards) == 1


class TestDeck:
    """Tests for the Deck class."""

    def test_build_has_52_unique_cards(self):
        """Test a built deck holds every (suit, rank) pair once."""
        cards = Deck.build()
        assert len(cards) == 52
        assert len(set(cards)) == 52

    def test_build_suits_and_ranks(self):
        """Test 13 cards per suit and 4 cards per rank."""
        cards = Deck.build()
        suits = Counter(c.suit for c in cards)
        ranks = Counter(c.rank for c in cards)
        assert set(suits.values()) == {13}
        assert len(suits) == 4
        assert set(ranks.values()) == {4}
        assert len(ranks) == 13

    def test_build_values(self):
        """Test value counts: 4 aces at 11, 16 ten-value cards."""
        values = Counter(c.value for c in Deck.build())
        assert values[11] == 4
        assert values[10] == 16
        for v in range(2, 10):
            assert values[v] == 4

    def test_new_deck_has_52_cards(self):
        """Test that a new deck has 52 cards."""
        assert len(Deck()) == 52

    @given(seed=st.integers(min_value=0, max_value=2**32 - 1))
    def test_shuffle_preserves_cards(self, seed):
        """Test shuffling only reorders."""
        cards = Deck.build()
        Deck.shuffle(cards, Random(seed))
        assert Counter(cards) == Counter(Deck.build())

    def test_shuffle_is_reproducible(self):
        """Test the same seed gives the same order."""
        a = Deck.build()
        b = Deck.build()
        Deck.shuffle(a, Random(7))
        Deck.shuffle(b, Random(7))
        assert a == b
        assert a != Deck.build()

    def test_shuffle_handles_tiny_lists(self):
        """Test empty and single-card lists are left alone."""
        empty: list[Card] = []
        Deck.shuffle(empty, Random(1))
        assert empty == []

        single = [Card(Rank.ACE, Suit.SPADES)]
        Deck.shuffle(single, Random(1))
        assert single == [Card(Rank.ACE, Suit.SPADES)]

    def test_draw_takes_last_card(self, deck):
        """Test drawing removes the card at the end."""
        last = list(deck)[-1]
        assert deck.draw() == last
        assert len(deck) == 51

    def test_draw_from_empty_deck_refills(self, deck):
        """Test drawing past the end reshuffles a fresh deck."""
        drawn = [deck.draw() for _ in range(52)]
        assert len(deck) == 0
        assert Counter(drawn) == Counter(Deck.build())

        card = deck.draw()
        assert len(deck) == 51
        assert deck.reshuffles == 1
        assert Counter(list(deck) + [card]) == Counter(Deck.build())

    def test_reset_restores_full_deck(self, deck):
        """Test reset brings back all 52 cards."""
        for _ in range(10):
            deck.draw()
        deck.reset()
        assert deck.cards_remaining == 52
        assert len(set(deck)) == 52
