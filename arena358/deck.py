# arena358/deck.py
from __future__ import annotations

import random
from typing import Iterable, List, Optional, Sequence, Tuple

from .cards import RANKS, SUITS, Card, Suit
from .errors import InvalidDeckSizeError

DECK_SIZE = 52
HAND_SIZE = 16
KITTY_SIZE = 4
NUM_SEATS = 3


def create_deck() -> List[Card]:
    """Return the 52 distinct cards, suit by suit (S, H, D, C), ranks 2..A."""
    return [Card(suit, rank) for suit in SUITS for rank in RANKS]


def seeded_rng(seed: object) -> random.Random:
    """Deterministic random source; the same seed always yields the same stream."""
    return random.Random(str(seed))


def shuffle(deck: Sequence[Card], rng: Optional[random.Random] = None) -> List[Card]:
    """
    Return a shuffled copy of `deck`.

    Fisher-Yates from the last index down to 1, swapping each position with a
    uniformly chosen index at or before it. The input is never mutated.
    """
    if rng is None:
        rng = random.Random()
    cards = list(deck)
    for i in range(len(cards) - 1, 0, -1):
        j = int(rng.random() * (i + 1))
        cards[i], cards[j] = cards[j], cards[i]
    return cards


def deal(shuffled: Sequence[Card]) -> Tuple[List[List[Card]], List[Card]]:
    """
    Deal a shuffled deck.

    Returns (hands, kitty), where:
    - hands: three lists of 16 cards; card i goes to hand i mod 3 for i < 48
    - kitty: the last four cards
    """
    if len(shuffled) != DECK_SIZE:
        raise InvalidDeckSizeError(
            f"Deck must contain exactly {DECK_SIZE} cards, got {len(shuffled)}"
        )
    dealt = NUM_SEATS * HAND_SIZE
    hands: List[List[Card]] = [[] for _ in range(NUM_SEATS)]
    for i in range(dealt):
        hands[i % NUM_SEATS].append(shuffled[i])
    kitty = list(shuffled[dealt:dealt + KITTY_SIZE])
    return hands, kitty


def sort_for_display(
    hand: Iterable[Card],
    trump_suit: Optional[Suit] = None,
) -> List[Card]:
    """Trump suit first (if any), then S, H, D, C; descending rank inside a suit."""
    order = list(SUITS)
    if trump_suit is not None:
        order.remove(trump_suit)
        order.insert(0, trump_suit)
    suit_pos = {suit: pos for pos, suit in enumerate(order)}
    return sorted(hand, key=lambda c: (suit_pos[c.suit], -c.value))
