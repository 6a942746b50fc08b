# arena358/agents/base.py
from __future__ import annotations

from typing import List, Protocol, runtime_checkable

from ..cards import Card, Suit
from ..state import GameState


@runtime_checkable
class SeatAgent(Protocol):
    """
    Interface every 3-5-8 seat controller implements.

    `view` is the game as seen from `seat` (engine.player_view), so an agent
    only ever sees its own hand plus public information. Every method returns
    the payload of one action; the runner wraps it and dispatches it.
    """

    def wants_reshuffle(self, view: GameState, seat: int) -> bool:
        """Vote to re-deal the hand just dealt."""
        raise NotImplementedError

    def choose_give(self, view: GameState, seat: int) -> str:
        """Id of the next card to pass during the exchange."""
        raise NotImplementedError

    def choose_return(self, view: GameState, seat: int, received: Card) -> str:
        """Id of the card handed back for `received`."""
        raise NotImplementedError

    def choose_trump(self, view: GameState, seat: int) -> Suit:
        """Dealer only: the cutter suit."""
        raise NotImplementedError

    def choose_discard(self, view: GameState, seat: int) -> List[str]:
        """Dealer only: four card ids to swap for the kitty."""
        raise NotImplementedError

    def choose_card(self, view: GameState, seat: int) -> str:
        """Id of the card to play to the current trick."""
        raise NotImplementedError
