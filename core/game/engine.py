"""Blackjack game engine with state machine."""

import logging
from dataclasses import dataclass
from random import Random
from typing import Callable

from transitions import Machine

from config import GameConfig
from core.cards import Card, Deck
from core.hand import Hand
from core.stats import StatsTracker
from core.game.events import EventEmitter, EventType, GameEvent
from core.game.state import GamePhase, Outcome

logger = logging.getLogger(__name__)

# Initial deal order, one card per entry
DEAL_ORDER = ("player", "dealer", "player", "dealer")


@dataclass(frozen=True)
class GameView:
    """Read-only snapshot of a table, handed to whatever renders it."""

    phase: GamePhase
    player_cards: tuple[Card, ...]
    dealer_cards: tuple[Card, ...]
    dealer_hidden: bool
    player_score: int
    dealer_score: int | None
    outcome: Outcome | None
    wins: int
    losses: int
    can_hit: bool
    can_stand: bool
    can_deal: bool

    @property
    def message(self) -> str:
        """Result text once the round is complete, otherwise empty."""
        return self.outcome.message if self.outcome else ""


def compare_hands(player: Hand, dealer: Hand, blackjack: int = 21) -> Outcome:
    """
    Decide the outcome of a finished round.

    Checks run in a fixed order and the first match wins, so a player bust
    loses even when the dealer also busts, and a tie is a push even when the
    player holds a two-card 21.
    """
    player_value = player.value
    dealer_value = dealer.value

    if player_value > blackjack:
        return Outcome.PLAYER_BUST
    if dealer_value > blackjack:
        return Outcome.DEALER_BUST
    if player_value == dealer_value:
        return Outcome.PUSH
    if player_value == blackjack and len(player) == 2:
        return Outcome.PLAYER_BLACKJACK
    if player_value > dealer_value:
        return Outcome.PLAYER_WIN
    return Outcome.DEALER_WIN


class BlackjackGame:
    """
    Single-table blackjack engine using a state machine.

    This is the core game logic, completely UI-agnostic.
    Communication happens through events and return values only.

    Every transition is synchronous. Dealing the first four cards and the
    dealer's draw loop are multi-step sequences; an unpaced game runs them to
    the end before returning, a paced game stops and lets the caller advance
    one card at a time with `step()`.
    """

    # State machine states
    STATES = [p.name.lower() for p in GamePhase]

    # State machine transitions
    TRANSITIONS = [
        {"trigger": "start_deal", "source": ["not_started", "player_turn", "complete"], "dest": "dealing"},
        {"trigger": "deal_done", "source": "dealing", "dest": "player_turn"},
        {"trigger": "player_action", "source": "player_turn", "dest": "player_turn"},
        # From dealing on a natural 21, from player_turn on stand or bust
        {"trigger": "player_done", "source": ["dealing", "player_turn"], "dest": "dealer_turn"},
        {"trigger": "dealer_done", "source": "dealer_turn", "dest": "complete"},
    ]

    def __init__(
        self,
        stats: StatsTracker | None = None,
        rules: GameConfig | None = None,
        deck: Deck | None = None,
        rng: Random | None = None,
        paced: bool = False,
    ) -> None:
        """
        Initialize a new blackjack game.

        Args:
            stats: Win/loss tracker updated after every round
            rules: Scores and pacing (uses defaults if not provided)
            deck: Deck to deal from (a new one is built if not provided)
            rng: Random number generator for reproducible games
            paced: Leave multi-step sequences for the caller to `step()`
        """
        self.rules = rules or GameConfig()
        self.deck = deck if deck is not None else Deck(rng=rng)
        self.stats = stats or StatsTracker()
        self.paced = paced

        self.player_hand = Hand()
        self.dealer_hand = Hand()
        self.outcome: Outcome | None = None
        self.events = EventEmitter()
        self._cards_dealt = 0

        # Initialize state machine
        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial="not_started",
            auto_transitions=False,
            model_attribute="_machine_state",
        )

    @property
    def phase(self) -> GamePhase:
        """Get current game phase as enum."""
        return GamePhase[self._machine_state.upper()]  # type: ignore

    @property
    def busy(self) -> bool:
        """True while a deal or dealer turn still needs steps."""
        return self.phase.in_progress

    @property
    def dealer_hidden(self) -> bool:
        """The dealer's first card stays face down until the player is done."""
        return self.phase in (GamePhase.DEALING, GamePhase.PLAYER_TURN)

    def subscribe(
        self,
        handler: Callable[[GameEvent], None],
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to game events."""
        self.events.subscribe(handler, event_type)

    def new_game(self) -> GameView:
        """
        Shuffle a fresh deck, clear both hands and deal a new round.

        Ignored while a deal or dealer turn is still running.
        """
        if self.busy:
            return self._reject("new game")

        self.deck.reset()
        self.player_hand.clear()
        self.dealer_hand.clear()
        self.outcome = None
        self._cards_dealt = 0

        self.start_deal()
        self.events.emit_new(EventType.ROUND_STARTED)
        return self._advance()

    def hit(self) -> GameView:
        """Player takes another card. A bust ends the player's turn."""
        if self.phase != GamePhase.PLAYER_TURN:
            return self._reject("hit")

        self._deal_card_to_hand(self.player_hand)
        self.events.emit_new(EventType.PLAYER_HIT, hand_value=self.player_hand.value)

        if self.player_hand.value > self.rules.blackjack_score:
            self.events.emit_new(EventType.PLAYER_BUSTS, hand_value=self.player_hand.value)
            self._start_dealer_turn()
            return self._advance()

        self.player_action()  # Stay in player turn
        return self.view

    def stand(self) -> GameView:
        """Player keeps the current hand; the dealer plays next."""
        if self.phase != GamePhase.PLAYER_TURN:
            return self._reject("stand")

        self.events.emit_new(EventType.PLAYER_STAND, hand_value=self.player_hand.value)
        self._start_dealer_turn()
        return self._advance()

    def step(self) -> GameView:
        """
        Advance an in-progress sequence by one card or by the resolution.

        A no-op outside DEALING and DEALER_TURN.
        """
        if self.phase == GamePhase.DEALING:
            self._deal_next_initial_card()
        elif self.phase == GamePhase.DEALER_TURN:
            self._dealer_step()
        else:
            return self._reject("step")
        return self.view

    def determine_winner(self) -> Outcome:
        """Outcome for the current hands."""
        return compare_hands(self.player_hand, self.dealer_hand, self.rules.blackjack_score)

    def _advance(self) -> GameView:
        """Run pending steps unless the caller paces them."""
        if not self.paced:
            while self.busy:
                self.step()
        return self.view

    def _reject(self, action: str) -> GameView:
        logger.debug("Ignoring %s during %s", action, self.phase.name)
        return self.view

    def _deal_next_initial_card(self) -> None:
        """Deal one card of the opening four."""
        target = DEAL_ORDER[self._cards_dealt]
        hand = self.player_hand if target == "player" else self.dealer_hand
        self._deal_card_to_hand(hand)
        self._cards_dealt += 1

        if self._cards_dealt < len(DEAL_ORDER):
            return

        if self.player_hand.value == self.rules.blackjack_score:
            # Natural 21 stands automatically
            self._start_dealer_turn()
        else:
            self.deal_done()

    def _deal_card_to_hand(self, hand: Hand) -> Card:
        """Draw a card into a hand and announce it."""
        reshuffles = self.deck.reshuffles
        card = self.deck.draw()
        if self.deck.reshuffles != reshuffles:
            self.events.emit_new(EventType.DECK_RESHUFFLED, cards_remaining=len(self.deck))

        hand.add_card(card)
        is_dealer = hand is self.dealer_hand
        face_down = is_dealer and len(hand) == 1 and self.dealer_hidden
        self.events.emit_new(
            EventType.CARD_DEALT,
            card="??" if face_down else str(card),
            hand="dealer" if is_dealer else "player",
            hand_value=None if is_dealer and self.dealer_hidden else hand.value,
        )
        return card

    def _start_dealer_turn(self) -> None:
        """Hand control to the dealer and turn the hole card over."""
        self.player_done()
        if self.dealer_hand.cards:
            self.events.emit_new(
                EventType.DEALER_REVEALS,
                card=str(self.dealer_hand.cards[0]),
                hand_value=self.dealer_hand.value,
            )

    def _dealer_step(self) -> None:
        """Dealer draws below the stand score, otherwise the round resolves."""
        if self.dealer_hand.value < self.rules.dealer_stand_score:
            self._deal_card_to_hand(self.dealer_hand)
            return
        self._resolve_round()

    def _resolve_round(self) -> None:
        """Decide the round, update the tally and finish."""
        outcome = self.determine_winner()
        self.outcome = outcome

        if not self.dealer_hand.is_busted:
            self.events.emit_new(EventType.DEALER_STANDS, hand_value=self.dealer_hand.value)

        self.stats.record_and_persist(outcome)
        self.dealer_done()

        logger.info(
            "Round complete: %s (player %d, dealer %d)",
            outcome.name,
            self.player_hand.value,
            self.dealer_hand.value,
        )
        self.events.emit_new(
            EventType.ROUND_ENDED,
            outcome=outcome.name,
            message=outcome.message,
            is_win=outcome.is_win,
            wins=self.stats.wins,
            losses=self.stats.losses,
        )

    @property
    def can_hit(self) -> bool:
        """Check if hitting is allowed."""
        return self.phase == GamePhase.PLAYER_TURN

    @property
    def can_stand(self) -> bool:
        """Check if standing is allowed."""
        return self.phase == GamePhase.PLAYER_TURN

    @property
    def can_deal(self) -> bool:
        """Check if a new game can be started."""
        return not self.busy

    @property
    def view(self) -> GameView:
        """Snapshot of the table for rendering."""
        hidden = self.dealer_hidden and bool(self.dealer_hand.cards)
        return GameView(
            phase=self.phase,
            player_cards=tuple(self.player_hand.cards),
            dealer_cards=tuple(self.dealer_hand.cards),
            dealer_hidden=hidden,
            player_score=self.player_hand.value,
            dealer_score=None if hidden else self.dealer_hand.value,
            outcome=self.outcome,
            wins=self.stats.wins,
            losses=self.stats.losses,
            can_hit=self.can_hit,
            can_stand=self.can_stand,
            can_deal=self.can_deal,
        )
