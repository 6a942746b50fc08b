# arena358/rules.py
from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

from .cards import Card, Suit
from .state import ExchangeGiving, ReshuffleSide, TrickPlay, TrickResult

NUM_SEATS = 3
TRICKS_PER_HAND = 16


def targets_for_dealer(dealer_seat: int) -> Tuple[int, int, int]:
    """
    Per-seat targets for a hand.

    - Dealer: 8
    - Dealer + 1: 5
    - Dealer + 2: 3
    """
    targets = [0, 0, 0]
    targets[dealer_seat % NUM_SEATS] = 8
    targets[(dealer_seat + 1) % NUM_SEATS] = 5
    targets[(dealer_seat + 2) % NUM_SEATS] = 3
    return targets[0], targets[1], targets[2]


def first_trick_leader(dealer_seat: int) -> int:
    """The 5-target seat opens the first trick of every hand."""
    return (dealer_seat + 1) % NUM_SEATS


def next_dealer(seat: int) -> int:
    return (seat + 1) % NUM_SEATS


def next_player_clockwise(seat: int) -> int:
    # Seats are numbered so that physical clockwise order is seat + 2.
    return (seat + 2) % NUM_SEATS


def reshuffle_side(seat: int, dealer_seat: int) -> ReshuffleSide:
    if seat == dealer_seat:
        return ReshuffleSide.EIGHT
    return ReshuffleSide.THIRTY_FIVE


def cards_of_suit(hand: Sequence[Card], suit: Suit) -> List[Card]:
    return [c for c in hand if c.suit == suit]


def find_card(hand: Sequence[Card], card_id: str) -> Optional[Card]:
    for card in hand:
        if card.id == card_id:
            return card
    return None


def legal_cards(hand: Sequence[Card], lead_suit: Optional[Suit]) -> List[Card]:
    """
    Cards in `hand` that may be played to the current trick.

    Rules implemented:
    - Leading (no lead suit yet): any card.
    - Holding the lead suit: only cards of the lead suit.
    - Void in the lead suit: any card, trump or off-suit.
    """
    if lead_suit is None:
        return list(hand)
    following = cards_of_suit(hand, lead_suit)
    if following:
        return following
    return list(hand)


def is_legal_play(
    hand: Sequence[Card],
    card_id: str,
    lead_suit: Optional[Suit],
) -> bool:
    return any(c.id == card_id for c in legal_cards(hand, lead_suit))


def trick_winner(
    cards_played: Sequence[TrickPlay],
    trump_suit: Optional[Suit],
) -> int:
    """
    Seat that wins a completed trick.

    Priority:
    1. Highest card of the trump suit, if any trump was played.
    2. Highest card of the lead suit (the suit of the first card).
    Cards of any other suit never win.
    """
    if len(cards_played) != NUM_SEATS:
        raise ValueError(
            f"A trick needs exactly {NUM_SEATS} cards, got {len(cards_played)}"
        )
    lead_suit = cards_played[0].card.suit

    if trump_suit is not None:
        trumps = [p for p in cards_played if p.card.suit == trump_suit]
        if trumps:
            return max(trumps, key=lambda p: p.card.value).seat_index

    following = [p for p in cards_played if p.card.suit == lead_suit]
    return max(following, key=lambda p: p.card.value).seat_index


def compute_exchange_givings(
    prev_deltas: Sequence[int],
    new_targets: Sequence[int],
) -> Tuple[ExchangeGiving, ...]:
    """
    Who passes how many cards to whom before a hand.

    - Seats above target last hand give, seats below receive, zero does neither.
    - Givers go in descending order of their target for the new hand, ties by
      seat; receivers are visited in seat order.
    - Each giver hands min(remaining surplus, remaining deficit) to each
      receiver until the surplus is exhausted.
    """
    givers = sorted(
        (seat for seat in range(NUM_SEATS) if prev_deltas[seat] > 0),
        key=lambda seat: (-new_targets[seat], seat),
    )
    receivers = [seat for seat in range(NUM_SEATS) if prev_deltas[seat] < 0]
    deficit: Dict[int, int] = {seat: -prev_deltas[seat] for seat in receivers}

    givings: List[ExchangeGiving] = []
    for giver in givers:
        surplus = prev_deltas[giver]
        for receiver in receivers:
            if surplus <= 0:
                break
            count = min(surplus, deficit[receiver])
            if count <= 0:
                continue
            givings.append(ExchangeGiving(giver, receiver, count))
            surplus -= count
            deficit[receiver] -= count
    return tuple(givings)


def required_return_card(receiver_hand: Sequence[Card], received_card: Card) -> Card:
    """
    Card the receiver owes back for `received_card`.

    The highest card of the same suit that outranks the received card, or the
    received card itself when there is none.
    """
    higher = [
        c for c in receiver_hand
        if c.suit == received_card.suit and c.value > received_card.value
    ]
    if not higher:
        return received_card
    return max(higher, key=lambda c: c.value)


def hand_delta(tricks_taken: int, target: int) -> int:
    return tricks_taken - target


def check_victory(score_totals: Sequence[int], victory_target: int) -> Tuple[int, ...]:
    """Seats at or above the victory target that share the top qualifying score."""
    qualifying = [seat for seat, score in enumerate(score_totals) if score >= victory_target]
    if not qualifying:
        return ()
    best = max(score_totals[seat] for seat in qualifying)
    return tuple(seat for seat in qualifying if score_totals[seat] == best)


def apply_tie_break(
    tied_seats: Sequence[int],
    last_hand_deltas: Sequence[int],
    last_hand_tricks: Sequence[TrickResult],
) -> Tuple[int, str]:
    """
    Resolve a victory shared by several seats.

    Returns (winner_seat, reason):
    - a single seat wins outright;
    - otherwise the unique best delta of the last hand wins;
    - otherwise the still-tied seat that won the latest trick of the last hand.
    """
    if not tied_seats:
        raise ValueError("apply_tie_break needs at least one seat")
    if len(tied_seats) == 1:
        return tied_seats[0], "highest score"

    best_delta = max(last_hand_deltas[seat] for seat in tied_seats)
    still_tied = [seat for seat in tied_seats if last_hand_deltas[seat] == best_delta]
    if len(still_tied) == 1:
        return still_tied[0], "tie broken by last hand delta"

    for trick in sorted(last_hand_tricks, key=lambda t: t.trick_number, reverse=True):
        if trick.winner_index in still_tied:
            return (
                trick.winner_index,
                f"tie broken by winning trick {trick.trick_number}",
            )

    return min(still_tied), "tie broken by seat order"
