"""Game phase and outcome enumerations."""

from enum import Enum, auto


class GamePhase(Enum):
    """
    Game state machine phases.

    Flow: NOT_STARTED → DEALING → PLAYER_TURN → DEALER_TURN → COMPLETE

    DEALING and DEALER_TURN are in-progress phases: the engine is working
    through a multi-step sequence and accepts no player input until it ends.
    """

    # Fresh engine, no round dealt yet
    NOT_STARTED = auto()

    # Initial four cards being dealt
    DEALING = auto()

    # Waiting for hit or stand
    PLAYER_TURN = auto()

    # Dealer draws to 17, then the round resolves
    DEALER_TURN = auto()

    # Outcome decided, waiting for a new game
    COMPLETE = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()

    @property
    def in_progress(self) -> bool:
        """True while a multi-step sequence is running."""
        return self in (GamePhase.DEALING, GamePhase.DEALER_TURN)


class Outcome(Enum):
    """Result of a completed round, valued by the message shown to the player."""

    PLAYER_BUST = "BUST! YOU LOSE"
    DEALER_BUST = "DEALER BUSTED! YOU WIN!"
    PUSH = "PUSH!"
    PLAYER_BLACKJACK = "BLACKJACK! YOU WIN!"
    PLAYER_WIN = "YOU WIN!"
    DEALER_WIN = "YOU LOSE"

    def __str__(self) -> str:
        return self.value

    @property
    def message(self) -> str:
        return self.value

    @property
    def is_win(self) -> bool:
        """Counts toward the wins tally."""
        return self in (Outcome.DEALER_BUST, Outcome.PLAYER_BLACKJACK, Outcome.PLAYER_WIN)

    @property
    def is_loss(self) -> bool:
        """Counts toward the losses tally."""
        return self in (Outcome.PLAYER_BUST, Outcome.DEALER_WIN)
