# arena358/agents/heuristic_agent.py
from __future__ import annotations

from typing import List

from ..cards import Card, Suit
from ..state import GameState
from .base import SeatAgent
from .heuristics import (
    choose_discard,
    choose_exchange_give,
    choose_exchange_return,
    choose_trump,
    should_reshuffle,
)
from .play import choose_card


class HeuristicAgent(SeatAgent):
    """
    Deterministic seat controller built on the pure AI functions.

    Holds no state, so one instance can drive any number of seats and games.
    """

    def wants_reshuffle(self, view: GameState, seat: int) -> bool:
        return should_reshuffle(view.hand_of(seat), view.targets[seat])

    def choose_give(self, view: GameState, seat: int) -> str:
        # One card per action, scored against the hand as it stands now.
        return choose_exchange_give(view.hand_of(seat), 1)[0]

    def choose_return(self, view: GameState, seat: int, received: Card) -> str:
        return choose_exchange_return(view.hand_of(seat), received)

    def choose_trump(self, view: GameState, seat: int) -> Suit:
        return choose_trump(view.hand_of(seat))

    def choose_discard(self, view: GameState, seat: int) -> List[str]:
        if view.cutter_suit is None:
            raise ValueError("Discard requested before the cutter suit was picked")
        return choose_discard(view.hand_of(seat), view.cutter_suit)

    def choose_card(self, view: GameState, seat: int) -> str:
        return choose_card(view.hand_of(seat), view, seat)
