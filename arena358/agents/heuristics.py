# arena358/agents/heuristics.py
"""
Pre-play decisions of the heuristic AI: reshuffle vote, exchange, cutter and
discard. Every function is pure and deterministic and only looks at the
seat's own cards.
"""
from __future__ import annotations

from typing import Dict, List, Sequence, Set

from ..cards import RANK_VALUE, SUITS, Card, Rank, Suit
from ..rules import cards_of_suit, required_return_card

_ACE = RANK_VALUE[Rank.ACE]
_KING = RANK_VALUE[Rank.KING]
_JACK = RANK_VALUE[Rank.JACK]

_DISCARD_COUNT = 4
_VOID_KEEP_SCORE_LIMIT = 500

# Fraction of the seat's target a hand must be expected to make before the
# seat is happy to keep it.
_RESHUFFLE_THRESHOLD = 0.6


def top_sequence_length(cards: Sequence[Card]) -> int:
    """Length of the unbroken run from the ace downward (A, K, Q ...)."""
    expected = _ACE
    run = 0
    for card in sorted(cards, key=lambda c: -c.value):
        if card.value != expected:
            break
        run += 1
        expected -= 1
    return run


def suit_strength(cards: Sequence[Card]) -> int:
    return sum(c.value for c in cards)


def _high_count(cards: Sequence[Card]) -> int:
    return sum(1 for c in cards if c.value >= _JACK)


# ---------------------------------------------------------------------------
# Cutter selection
# ---------------------------------------------------------------------------


def choose_trump(hand: Sequence[Card]) -> Suit:
    """
    Score each held suit as a trump candidate and return the best.

    Length and the top run dominate; high cards, ace/king, raw strength,
    long-suit thresholds, strong side suits and voids elsewhere add bonuses.
    Ties go to the earlier suit in S, H, D, C order.
    """
    best_suit = Suit.SPADES
    best_score = None
    for suit in SUITS:
        suited = cards_of_suit(hand, suit)
        if not suited:
            continue
        length = len(suited)
        has_ace = any(c.rank is Rank.ACE for c in suited)
        has_king = any(c.rank is Rank.KING for c in suited)

        others = [s for s in SUITS if s != suit]
        other_masters = sum(top_sequence_length(cards_of_suit(hand, s)) for s in others)
        voids = sum(1 for s in others if not cards_of_suit(hand, s))

        score = (
            length * 180
            + top_sequence_length(suited) * 250
            + _high_count(suited) * 100
            + (200 if has_ace else 0)
            + (150 if has_ace and has_king else 0)
            + suit_strength(suited)
            + (400 if length >= 5 else 0)
            + (500 if length >= 6 else 0)
            + (600 if length >= 7 else 0)
            + other_masters * 60
            + voids * 150
        )
        if best_score is None or score > best_score:
            best_score = score
            best_suit = suit
    return best_suit


# ---------------------------------------------------------------------------
# Dealer discard
# ---------------------------------------------------------------------------


def _keep_score(cards: Sequence[Card]) -> float:
    has_ace = any(c.rank is Rank.ACE for c in cards)
    has_king = any(c.rank is Rank.KING for c in cards)
    high = _high_count(cards)

    score: float = top_sequence_length(cards) * 350
    if has_ace and has_king:
        score += 400
    elif has_ace:
        score += 250
    score += high * 120
    if len(cards) >= 4:
        score += 250
    if len(cards) >= 3 and high >= 2:
        score += 200
    score += suit_strength(cards)
    # Short, honourless suits are the cheapest voids.
    if len(cards) <= 2 and high == 0:
        score *= 0.3
    return score


def choose_discard(hand: Sequence[Card], trump_suit: Suit) -> List[str]:
    """
    Four card ids for the dealer to swap out for the kitty.

    1. Void whole weak side suits that fit the remaining budget.
    2. Lowest side cards, keeping A/K of suits still three or more long.
    3. Lowest remaining side cards.
    4. Lowest trumps, only if still short.
    """
    side = [c for c in hand if c.suit != trump_suit]
    trumps = sorted((c for c in hand if c.suit == trump_suit), key=lambda c: c.value)

    analysis = []
    for suit in SUITS:
        if suit == trump_suit:
            continue
        cards = sorted(cards_of_suit(side, suit), key=lambda c: c.value)
        analysis.append((_keep_score(cards), suit, cards))
    analysis.sort(key=lambda entry: entry[0])

    chosen: List[Card] = []
    chosen_ids: Set[str] = set()

    def take(card: Card) -> None:
        chosen.append(card)
        chosen_ids.add(card.id)

    for keep, _suit, cards in analysis:
        if len(chosen) >= _DISCARD_COUNT:
            break
        if cards and len(cards) <= _DISCARD_COUNT - len(chosen) and keep < _VOID_KEEP_SCORE_LIMIT:
            for card in cards:
                take(card)

    for card in sorted(side, key=lambda c: c.value):
        if len(chosen) >= _DISCARD_COUNT:
            break
        if card.id in chosen_ids:
            continue
        if card.value >= _KING:
            left = sum(1 for c in side if c.suit == card.suit and c.id not in chosen_ids)
            if left >= 3:
                continue
        take(card)

    for card in sorted(side, key=lambda c: c.value):
        if len(chosen) >= _DISCARD_COUNT:
            break
        if card.id not in chosen_ids:
            take(card)

    for card in trumps:
        if len(chosen) >= _DISCARD_COUNT:
            break
        take(card)

    return [c.id for c in chosen[:_DISCARD_COUNT]]


# ---------------------------------------------------------------------------
# Exchange
# ---------------------------------------------------------------------------


def _give_score(card: Card, hand: Sequence[Card]) -> int:
    suit_len = sum(1 for c in hand if c.suit == card.suit)
    score = card.value * 25
    if card.value >= _KING:
        score += 600
    if card.value >= _ACE:
        score += 400
    if suit_len <= 2:
        score -= 100
    score += suit_len * 30
    return score


def choose_exchange_give(hand: Sequence[Card], count: int) -> List[str]:
    """The `count` cards whose loss weakens the hand least."""
    ranked = sorted(hand, key=lambda c: _give_score(c, hand))
    return [c.id for c in ranked[:count]]


def choose_exchange_return(hand: Sequence[Card], received: Card) -> str:
    required = required_return_card(hand, received)
    if any(c.id == required.id for c in hand):
        return required.id
    # The required card already went back in an earlier return; any card is legal.
    return choose_exchange_give(hand, 1)[0]


# ---------------------------------------------------------------------------
# Reshuffle vote
# ---------------------------------------------------------------------------


def estimate_tricks(hand: Sequence[Card]) -> float:
    """
    Rough trick count for a hand, assuming its best suit ends up as trumps.

    Top runs count fully, spare trumps count half, side kings backed by
    length count a third, and side voids are worth half a trick each when
    there are trumps to cut with.
    """
    trump = choose_trump(hand)
    by_suit: Dict[Suit, List[Card]] = {suit: cards_of_suit(hand, suit) for suit in SUITS}
    trump_len = len(by_suit[trump])

    estimate = 0.0
    for suit, cards in by_suit.items():
        run = top_sequence_length(cards)
        estimate += run
        if suit == trump:
            estimate += 0.5 * (len(cards) - run)
            continue
        if not cards:
            if trump_len >= 3:
                estimate += 0.5
            continue
        if run == 0 and len(cards) >= 2 and any(c.rank is Rank.KING for c in cards):
            estimate += 1 / 3
    return estimate


def should_reshuffle(hand: Sequence[Card], target: int) -> bool:
    """Accept a re-deal when the hand looks too weak for `target`."""
    return estimate_tricks(hand) < target * _RESHUFFLE_THRESHOLD
