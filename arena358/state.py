# arena358/state.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple
import enum

from .cards import Card, Suit


class Phase(enum.Enum):
    SETUP_DEAL = "SETUP_DEAL"
    RESHUFFLE_WINDOW = "RESHUFFLE_WINDOW"
    EXCHANGE_GIVE = "EXCHANGE_GIVE"
    EXCHANGE_RETURN = "EXCHANGE_RETURN"
    CUTTER_PICK = "CUTTER_PICK"
    DEALER_DISCARD = "DEALER_DISCARD"
    TRICK_PLAY = "TRICK_PLAY"
    HAND_SCORING = "HAND_SCORING"
    GAME_OVER = "GAME_OVER"


class ReshuffleSide(enum.Enum):
    # The dealer (target 8) votes alone; the two non-dealers vote as one side.
    EIGHT = "8"
    THIRTY_FIVE = "35"


NO_PLAYER = -1


@dataclass(frozen=True)
class Player:
    id: str
    name: str
    seat_index: int


@dataclass(frozen=True)
class TrickPlay:
    seat_index: int
    card: Card


@dataclass(frozen=True)
class CurrentTrick:
    leader_index: int
    lead_suit: Optional[Suit] = None
    cards_played: Tuple[TrickPlay, ...] = ()


@dataclass(frozen=True)
class TrickResult:
    trick_number: int
    cards_played: Tuple[TrickPlay, ...]
    lead_suit: Suit
    winner_index: int


@dataclass(frozen=True)
class ExchangeGiving:
    from_seat: int
    to_seat: int
    count: int


@dataclass(frozen=True)
class ExchangeTransfer:
    from_seat: int
    to_seat: int
    card: Card


@dataclass(frozen=True)
class ExchangeInfo:
    givings: Tuple[ExchangeGiving, ...]
    given_cards: Tuple[ExchangeTransfer, ...] = ()
    returned_cards: Tuple[ExchangeTransfer, ...] = ()
    current_giver_idx: int = 0
    sub_phase: str = "giving"  # "giving" | "returning"


@dataclass(frozen=True)
class HandRecord:
    hand_number: int
    dealer_index: int
    cutter_suit: Optional[Suit]
    tricks_taken: Tuple[int, int, int]
    targets: Tuple[int, int, int]
    deltas: Tuple[int, int, int]
    tricks: Tuple[TrickResult, ...]


@dataclass(frozen=True)
class GameState:
    """
    Complete, immutable snapshot of one game.

    Every transition builds a new value with dataclasses.replace; nothing in
    the package mutates a GameState or the tuples it holds.
    """
    game_id: str
    mode: str
    victory_target: int
    players: Tuple[Player, Player, Player]
    dealer_index: int
    targets: Tuple[int, int, int]
    current_player_index: int
    phase: Phase = Phase.SETUP_DEAL
    hand_number: int = 0

    deck: Tuple[Card, ...] = ()
    kitty: Tuple[Card, ...] = ()
    player_hands: Tuple[Tuple[Card, ...], ...] = ((), (), ())
    dealer_discarded: Tuple[Card, ...] = ()
    dealer_received_kitty: Tuple[Card, ...] = ()
    # Exchange cards travelling to the dealer stay out of the dealer's hand
    # until the cutter suit has been named.
    dealer_hidden_returns: Tuple[Card, ...] = ()
    dealer_pending_received: Tuple[Card, ...] = ()

    cutter_suit: Optional[Suit] = None
    exchange_info: Optional[ExchangeInfo] = None
    current_trick: Optional[CurrentTrick] = None
    trick_number: int = 0
    tricks_history: Tuple[TrickResult, ...] = ()
    tricks_taken_count: Tuple[int, int, int] = (0, 0, 0)

    score_total: Tuple[int, int, int] = (0, 0, 0)
    last_hand_delta: Tuple[int, int, int] = (0, 0, 0)
    winner_index: Optional[int] = None
    winner_reason: Optional[str] = None
    hand_history: Tuple[HandRecord, ...] = ()

    reshuffle_used_by_8: bool = False
    reshuffle_used_by_35: bool = False
    reshuffle_window_for_8: bool = False
    reshuffle_window_for_35: bool = False

    seed: Optional[str] = None
    deal_count: int = 0

    @property
    def num_players(self) -> int:
        return len(self.players)

    def hand_of(self, seat: int) -> Tuple[Card, ...]:
        return self.player_hands[seat]
