# arena358/agents/__init__.py
from .base import SeatAgent
from .heuristic_agent import HeuristicAgent
from .heuristics import (
    choose_discard,
    choose_exchange_give,
    choose_exchange_return,
    choose_trump,
    should_reshuffle,
)
from .play import choose_card
from .random_agent import RandomAgent

__all__ = [
    "SeatAgent",
    "HeuristicAgent",
    "RandomAgent",
    "choose_card",
    "choose_discard",
    "choose_exchange_give",
    "choose_exchange_return",
    "choose_trump",
    "should_reshuffle",
]
