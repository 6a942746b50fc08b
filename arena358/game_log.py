# arena358/game_log.py
from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from .rules import NUM_SEATS
from .state import GameState, HandRecord

FIELDNAMES = [
    "game_id",
    "hand_number",
    "dealer_index",
    "seat",
    "player_name",
    "agent",
    "target",
    "tricks_taken",
    "delta",
    "total_score",
    "cutter_suit",
    "winner",
]


def _is_hand_complete(record: HandRecord) -> bool:
    """Return True if the record holds a fully played hand."""
    if sum(record.tricks_taken) != len(record.tricks):
        return False
    return sum(record.deltas) == 0


def build_hand_score_rows(
    state: GameState,
    game_id: Optional[str] = None,
    agent_labels: Optional[Sequence[str]] = None,
) -> List[Dict[str, Any]]:
    """
    Build one row per (hand, seat) from the game's hand history.

    Each row has the keys in FIELDNAMES. `total_score` is the running total
    after that hand; `winner` is True only on the final hand's row for the
    seat that won the game.
    """
    if agent_labels is not None and len(agent_labels) != NUM_SEATS:
        raise ValueError("agent_labels must name every seat")
    game_id = game_id if game_id is not None else state.game_id
    running = [0] * NUM_SEATS
    rows: List[Dict[str, Any]] = []
    last_hand = state.hand_history[-1].hand_number if state.hand_history else None

    for record in state.hand_history:
        if not _is_hand_complete(record):
            continue
        for seat in range(NUM_SEATS):
            running[seat] += record.deltas[seat]
            rows.append(
                {
                    "game_id": game_id,
                    "hand_number": record.hand_number,
                    "dealer_index": record.dealer_index,
                    "seat": seat,
                    "player_name": state.players[seat].name,
                    "agent": agent_labels[seat] if agent_labels is not None else None,
                    "target": record.targets[seat],
                    "tricks_taken": record.tricks_taken[seat],
                    "delta": record.deltas[seat],
                    "total_score": running[seat],
                    "cutter_suit": (
                        record.cutter_suit.value
                        if record.cutter_suit is not None
                        else None
                    ),
                    "winner": (
                        record.hand_number == last_hand
                        and state.winner_index == seat
                    ),
                }
            )
    return rows
