# arena358/agents/random_agent.py
from __future__ import annotations

from dataclasses import dataclass
from typing import List
import random

from ..cards import SUITS, Card, Suit
from ..rules import legal_cards, required_return_card
from ..state import GameState
from .base import SeatAgent


@dataclass
class RandomAgent(SeatAgent):
    """
    A baseline agent that only knows the rules:

    - wants_reshuffle: accepts with probability `reshuffle_rate`.
    - choose_give / choose_discard / choose_card: uniform among legal choices.
    - choose_return: the required card when held, otherwise any card.
    - choose_trump: uniform among the suits it holds.
    """

    rng: random.Random
    reshuffle_rate: float = 0.2

    def wants_reshuffle(self, view: GameState, seat: int) -> bool:
        return self.rng.random() < self.reshuffle_rate

    def choose_give(self, view: GameState, seat: int) -> str:
        return self.rng.choice(view.hand_of(seat)).id

    def choose_return(self, view: GameState, seat: int, received: Card) -> str:
        hand = view.hand_of(seat)
        required = required_return_card(hand, received)
        if any(c.id == required.id for c in hand):
            return required.id
        return self.rng.choice(hand).id

    def choose_trump(self, view: GameState, seat: int) -> Suit:
        held = [suit for suit in SUITS if any(c.suit == suit for c in view.hand_of(seat))]
        return self.rng.choice(held or list(SUITS))

    def choose_discard(self, view: GameState, seat: int) -> List[str]:
        return [c.id for c in self.rng.sample(list(view.hand_of(seat)), 4)]

    def choose_card(self, view: GameState, seat: int) -> str:
        trick = view.current_trick
        lead_suit = trick.lead_suit if trick is not None else None
        return self.rng.choice(legal_cards(view.hand_of(seat), lead_suit)).id
