"""Hand evaluation for blackjack."""

from dataclasses import dataclass, field
from typing import Iterable, Iterator

from core.cards import Card

BLACKJACK = 21


def score(cards: Iterable[Card]) -> int:
    """
    Calculate the blackjack total for a set of cards.

    Every ace starts at 11. While the total is over 21 and an ace is still
    counted high, that ace drops to 1. The result can stay above 21 once all
    aces are spent.
    """
    total = 0
    aces = 0

    for card in cards:
        if card.is_ace:
            aces += 1
        total += card.value

    while total > BLACKJACK and aces > 0:
        total -= 10
        aces -= 1

    return total


@dataclass
class Hand:
    """The ordered cards held by the player or the dealer."""

    cards: list[Card] = field(default_factory=list)

    def add_card(self, card: Card) -> None:
        """Add a card to the hand."""
        self.cards.append(card)

    def clear(self) -> None:
        """Remove all cards from the hand."""
        self.cards.clear()

    @property
    def value(self) -> int:
        """Best total for the hand, see `score`."""
        return score(self.cards)

    @property
    def is_soft(self) -> bool:
        """
        Check if the hand is soft (has an ace counted as 11).

        A hand is soft if it contains an ace that can be counted as 11
        without busting.
        """
        if not any(card.is_ace for card in self.cards):
            return False

        total_hard = sum(1 if card.is_ace else card.value for card in self.cards)
        return total_hard + 10 <= BLACKJACK

    @property
    def is_blackjack(self) -> bool:
        """Check if the hand is a natural blackjack (21 with 2 cards)."""
        return len(self.cards) == 2 and self.value == BLACKJACK

    @property
    def is_busted(self) -> bool:
        """Check if the hand has busted (value > 21)."""
        return self.value > BLACKJACK

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __str__(self) -> str:
        cards_str = " ".join(str(card) for card in self.cards)
        value_str = f"({self.value})"
        if self.is_soft:
            value_str = f"(soft {self.value})"
        if self.is_blackjack:
            value_str = "(BLACKJACK)"
        if self.is_busted:
            value_str = "(BUST)"
        return f"{cards_str} {value_str}"

    def __repr__(self) -> str:
        return f"Hand({self.cards!r}, value={self.value})"
