# arena358/agents/intel.py
from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, List, Optional, Sequence, Tuple

from ..cards import RANKS, Card, Suit
from ..rules import NUM_SEATS, TRICKS_PER_HAND, cards_of_suit
from ..state import GameState, TrickPlay


@dataclass(frozen=True)
class Opponent:
    seat: int
    target: int
    tricks: int

    @property
    def needed(self) -> int:
        return max(0, self.target - self.tricks)

    @property
    def over(self) -> bool:
        return self.tricks >= self.target


@dataclass(frozen=True)
class Intel:
    """What a seat knows when it has to play a card."""
    seat: int
    target: int
    tricks: int
    tricks_left: int
    trump_suit: Optional[Suit]
    known_ids: FrozenSet[str]
    # (seat, suit) pairs where an opponent failed to follow the lead.
    opponent_voids: FrozenSet[Tuple[int, Suit]]
    opponents: Tuple[Opponent, ...]
    trick_cards: Tuple[TrickPlay, ...]

    @property
    def tricks_needed(self) -> int:
        return max(0, self.target - self.tricks)

    @property
    def over_target(self) -> bool:
        return self.tricks >= self.target

    @property
    def is_leading(self) -> bool:
        return not self.trick_cards

    @property
    def is_second(self) -> bool:
        return len(self.trick_cards) == 1

    @property
    def is_last(self) -> bool:
        return len(self.trick_cards) == NUM_SEATS - 1

    def is_void(self, seat: int, suit: Suit) -> bool:
        return (seat, suit) in self.opponent_voids

    def any_opponent_void(self, suit: Suit) -> bool:
        return any(self.is_void(o.seat, suit) for o in self.opponents)

    def seat_yet_to_play(self) -> Optional[int]:
        played = {p.seat_index for p in self.trick_cards}
        for seat in range(NUM_SEATS):
            if seat != self.seat and seat not in played:
                return seat
        return None

    def opponent_with_target(self, target: int) -> Optional[Opponent]:
        for opp in self.opponents:
            if opp.target == target:
                return opp
        return None


def build_intel(hand: Sequence[Card], state: GameState, seat: int) -> Intel:
    played: List[Card] = [p.card for t in state.tricks_history for p in t.cards_played]
    trick_cards: Tuple[TrickPlay, ...] = ()
    lead_suit = None
    if state.current_trick is not None:
        trick_cards = state.current_trick.cards_played
        lead_suit = state.current_trick.lead_suit
    known = {c.id for c in played}
    known.update(p.card.id for p in trick_cards)
    known.update(c.id for c in hand)
    # Only the dealer's own view carries the real discard.
    known.update(c.id for c in state.dealer_discarded if not c.is_hidden)

    voids = set()
    for trick in state.tricks_history:
        for play in trick.cards_played:
            if play.seat_index != seat and play.card.suit != trick.lead_suit:
                voids.add((play.seat_index, trick.lead_suit))
    if lead_suit is not None:
        for play in trick_cards:
            if play.seat_index != seat and play.card.suit != lead_suit:
                voids.add((play.seat_index, lead_suit))

    opponents = tuple(
        Opponent(s, state.targets[s], state.tricks_taken_count[s])
        for s in range(NUM_SEATS)
        if s != seat
    )
    return Intel(
        seat=seat,
        target=state.targets[seat],
        tricks=state.tricks_taken_count[seat],
        tricks_left=TRICKS_PER_HAND - (state.trick_number - 1),
        trump_suit=state.cutter_suit,
        known_ids=frozenset(known),
        opponent_voids=frozenset(voids),
        opponents=opponents,
        trick_cards=trick_cards,
    )


# ---------------------------------------------------------------------------
# Card counting helpers
# ---------------------------------------------------------------------------


def unseen_in_suit(suit: Suit, intel: Intel) -> List[Card]:
    """Cards of `suit` neither played nor in our hand: held by opponents or the discard."""
    cards = (Card(suit, rank) for rank in RANKS)
    return [c for c in cards if c.id not in intel.known_ids]


def higher_unseen(card: Card, intel: Intel) -> int:
    return sum(1 for c in unseen_in_suit(card.suit, intel) if c.value > card.value)


def is_master(card: Card, intel: Intel) -> bool:
    """No unseen card of the suit can beat `card`."""
    return higher_unseen(card, intel) == 0


def count_masters(suit: Suit, hand: Sequence[Card], intel: Intel) -> int:
    unseen = unseen_in_suit(suit, intel)
    best_unseen = max((c.value for c in unseen), default=0)
    count = 0
    for card in sorted(cards_of_suit(hand, suit), key=lambda c: -c.value):
        if card.value <= best_unseen:
            break
        count += 1
    return count


def current_winner(
    trick_cards: Sequence[TrickPlay],
    lead_suit: Suit,
    trump_suit: Optional[Suit],
) -> Tuple[int, int]:
    """
    (seat, strength) of whoever is winning the partial trick.

    Trumps score 100 above their rank so any trump beats any lead-suit card.
    """
    if not trick_cards:
        return -1, 0
    if trump_suit is not None:
        trumps = [p for p in trick_cards if p.card.suit == trump_suit]
        if trumps:
            best = max(trumps, key=lambda p: p.card.value)
            return best.seat_index, best.card.value + 100
    following = [p for p in trick_cards if p.card.suit == lead_suit]
    if not following:
        return trick_cards[0].seat_index, 0
    best = max(following, key=lambda p: p.card.value)
    return best.seat_index, best.card.value
