# arena358/actions.py
from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional, Tuple, Union

from .cards import Suit
from .state import ReshuffleSide


def _coerce_side(action: object, side: object) -> None:
    """Accept "8" / "35" strings as well as ReshuffleSide members."""
    if isinstance(side, ReshuffleSide):
        return
    try:
        object.__setattr__(action, "side", ReshuffleSide(str(side)))
    except ValueError as exc:
        raise ValueError(f"Unknown reshuffle side {side!r}") from exc


@dataclass(frozen=True)
class ShuffleDeal:
    type: ClassVar[str] = "SHUFFLE_DEAL"


@dataclass(frozen=True)
class ReshuffleAccept:
    side: ReshuffleSide
    type: ClassVar[str] = "RESHUFFLE_ACCEPT"

    def __post_init__(self) -> None:
        _coerce_side(self, self.side)


@dataclass(frozen=True)
class ReshuffleDecline:
    side: ReshuffleSide
    type: ClassVar[str] = "RESHUFFLE_DECLINE"

    def __post_init__(self) -> None:
        _coerce_side(self, self.side)


@dataclass(frozen=True)
class ExchangeGiveCard:
    from_seat: int
    card_id: str
    type: ClassVar[str] = "EXCHANGE_GIVE_CARD"


@dataclass(frozen=True)
class ExchangeReturnCard:
    from_seat: int
    card_id: str
    type: ClassVar[str] = "EXCHANGE_RETURN_CARD"


@dataclass(frozen=True)
class PickCutter:
    """Dealer names the trump suit. `seat_index`, when given, must be the dealer."""
    suit: Suit
    seat_index: Optional[int] = None
    type: ClassVar[str] = "PICK_CUTTER"

    def __post_init__(self) -> None:
        if not isinstance(self.suit, Suit):
            try:
                object.__setattr__(self, "suit", Suit(self.suit))
            except ValueError as exc:
                raise ValueError(f"Unknown suit {self.suit!r}") from exc


@dataclass(frozen=True)
class DealerDiscard4:
    # Exactly four ids are required; the count is enforced by the engine so a
    # wrong count surfaces as a rule violation rather than a construction error.
    card_ids: Tuple[str, ...]
    seat_index: Optional[int] = None
    type: ClassVar[str] = "DEALER_DISCARD_4"

    def __post_init__(self) -> None:
        object.__setattr__(self, "card_ids", tuple(self.card_ids))


@dataclass(frozen=True)
class PlayCard:
    seat_index: int
    card_id: str
    type: ClassVar[str] = "PLAY_CARD"


@dataclass(frozen=True)
class NextHand:
    type: ClassVar[str] = "NEXT_HAND"


Action = Union[
    ShuffleDeal,
    ReshuffleAccept,
    ReshuffleDecline,
    ExchangeGiveCard,
    ExchangeReturnCard,
    PickCutter,
    DealerDiscard4,
    PlayCard,
    NextHand,
]
