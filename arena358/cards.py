# arena358/cards.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict
import enum


class Suit(enum.Enum):
    SPADES = "S"
    HEARTS = "H"
    DIAMONDS = "D"
    CLUBS = "C"


class Rank(enum.Enum):
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"
    ACE = "A"


# Canonical iteration order; ties in the AI scoring are broken by this order.
SUITS = (Suit.SPADES, Suit.HEARTS, Suit.DIAMONDS, Suit.CLUBS)
RANKS = tuple(Rank)

RANK_VALUE: Dict[Rank, int] = {rank: value for value, rank in enumerate(RANKS, start=2)}

HIDDEN_CARD_ID = "hidden"


@dataclass(frozen=True)
class Card:
    """
    A playing card from the 52-card deck.

    - id is "<suit>-<rank>", e.g. "S-A" or "H-10", and is derived on
      construction when left empty.
    - The only other accepted id is HIDDEN_CARD_ID, used for the opaque
      placeholders handed out by the player view.
    """
    suit: Suit
    rank: Rank
    id: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.suit, Suit):
            raise ValueError(f"Invalid suit {self.suit!r}")
        if not isinstance(self.rank, Rank):
            raise ValueError(f"Invalid rank {self.rank!r}")
        expected = f"{self.suit.value}-{self.rank.value}"
        if not self.id:
            object.__setattr__(self, "id", expected)
        elif self.id not in (expected, HIDDEN_CARD_ID):
            raise ValueError(f"Card id {self.id!r} does not match {expected!r}")

    @property
    def value(self) -> int:
        return RANK_VALUE[self.rank]

    @property
    def is_hidden(self) -> bool:
        return self.id == HIDDEN_CARD_ID

    def __str__(self) -> str:
        if self.is_hidden:
            return "??"
        return f"{self.rank.value}{self.suit.value}"


def card_from_id(card_id: str) -> Card:
    """Parse an id such as "D-Q" back into a Card."""
    suit_code, sep, rank_code = card_id.partition("-")
    if not sep:
        raise ValueError(f"Malformed card id {card_id!r}")
    try:
        return Card(Suit(suit_code), Rank(rank_code))
    except ValueError as exc:
        raise ValueError(f"Malformed card id {card_id!r}") from exc


def hidden_card() -> Card:
    """Opaque placeholder carrying the sentinel id."""
    return Card(Suit.SPADES, Rank.TWO, HIDDEN_CARD_ID)
