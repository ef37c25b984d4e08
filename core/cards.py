"""Card and Deck classes - immutable card representations."""

from dataclasses import dataclass
from enum import Enum
from random import Random
from typing import Iterator


class Suit(Enum):
    """Card suits, valued by their display symbol."""

    HEARTS = "♥"
    DIAMONDS = "♦"
    SPADES = "♠"
    CLUBS = "♣"

    def __str__(self) -> str:
        return self.value

    @property
    def is_red(self) -> bool:
        """Hearts and diamonds are red."""
        return self in (Suit.HEARTS, Suit.DIAMONDS)


class Rank(Enum):
    """Card ranks, numbered 1 (ace) through 13 (king)."""

    ACE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13

    def __str__(self) -> str:
        if Rank.TWO.value <= self.value <= Rank.TEN.value:
            return str(self.value)
        return {
            Rank.JACK: "J",
            Rank.QUEEN: "Q",
            Rank.KING: "K",
            Rank.ACE: "A",
        }[self]

    @property
    def blackjack_value(self) -> int:
        """Return the blackjack point value (Ace = 11, face cards = 10)."""
        if self == Rank.ACE:
            return 11
        if self.value > 10:
            return 10  # Face cards
        return self.value

    @property
    def is_ace(self) -> bool:
        """Check if this rank is an Ace."""
        return self == Rank.ACE


@dataclass(frozen=True, slots=True)
class Card:
    """Immutable playing card."""

    rank: Rank
    suit: Suit

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"

    def __repr__(self) -> str:
        return f"Card({self.rank.name}, {self.suit.name})"

    @property
    def value(self) -> int:
        """Return the blackjack point value."""
        return self.rank.blackjack_value

    @property
    def is_ace(self) -> bool:
        """Check if this card is an Ace."""
        return self.rank.is_ace

    @property
    def is_red(self) -> bool:
        """Colour flag derived from the suit."""
        return self.suit.is_red

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Create a card from a string like '2♣', 'AS', 'Kh'."""
        s = s.strip().upper()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        rank_str = s[:-1]
        suit_str = s[-1]

        rank_map = {
            "A": Rank.ACE,
            "2": Rank.TWO,
            "3": Rank.THREE,
            "4": Rank.FOUR,
            "5": Rank.FIVE,
            "6": Rank.SIX,
            "7": Rank.SEVEN,
            "8": Rank.EIGHT,
            "9": Rank.NINE,
            "10": Rank.TEN,
            "T": Rank.TEN,
            "J": Rank.JACK,
            "Q": Rank.QUEEN,
            "K": Rank.KING,
        }

        suit_map = {
            "H": Suit.HEARTS,
            "♥": Suit.HEARTS,
            "D": Suit.DIAMONDS,
            "♦": Suit.DIAMONDS,
            "S": Suit.SPADES,
            "♠": Suit.SPADES,
            "C": Suit.CLUBS,
            "♣": Suit.CLUBS,
        }

        if rank_str not in rank_map:
            raise ValueError(f"Invalid rank: {rank_str}")
        if suit_str not in suit_map:
            raise ValueError(f"Invalid suit: {suit_str}")

        return cls(rank_map[rank_str], suit_map[suit_str])


class Deck:
    """
    A single 52-card deck that refills itself.

    Cards are drawn from the end of the list. Drawing from an empty deck
    rebuilds and reshuffles a fresh 52 cards first, so `draw` never fails.
    """

    def __init__(self, rng: Random | None = None) -> None:
        """Initialize a new, unshuffled deck."""
        self._rng = rng or Random()
        self._cards: list[Card] = self.build()
        self._reshuffles = 0

    @staticmethod
    def build() -> list[Card]:
        """Return one card per (suit, rank) pair, in suit-major order."""
        return [Card(rank, suit) for suit in Suit for rank in Rank]

    @staticmethod
    def shuffle(cards: list[Card], rng: Random) -> None:
        """Fisher-Yates shuffle of `cards` in place."""
        for i in range(len(cards) - 1, 0, -1):
            j = rng.randint(0, i)
            cards[i], cards[j] = cards[j], cards[i]

    def reset(self) -> None:
        """Replace the contents with a freshly built and shuffled deck."""
        cards = self.build()
        self.shuffle(cards, self._rng)
        self._cards = cards

    def draw(self) -> Card:
        """Remove and return the last card, refilling first if empty."""
        if not self._cards:
            self.reset()
            self._reshuffles += 1
        return self._cards.pop()

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards)

    @property
    def cards_remaining(self) -> int:
        """Return the number of cards remaining."""
        return len(self._cards)

    @property
    def reshuffles(self) -> int:
        """Number of times an empty deck was refilled during `draw`."""
        return self._reshuffles
