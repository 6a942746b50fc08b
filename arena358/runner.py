# arena358/runner.py
from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from .actions import (
    Action,
    DealerDiscard4,
    ExchangeGiveCard,
    ExchangeReturnCard,
    NextHand,
    PickCutter,
    PlayCard,
    ReshuffleAccept,
    ReshuffleDecline,
    ShuffleDeal,
)
from .agents.base import SeatAgent
from .engine import apply_action, create_game, owed_return, player_view
from .errors import EngineError
from .rules import NUM_SEATS
from .state import GameState, Phase, ReshuffleSide

logger = logging.getLogger(__name__)


def next_action(state: GameState, agents: Sequence[SeatAgent]) -> Optional[Action]:
    """
    The action the game is waiting for, as chosen by the seat(s) entitled to it.

    - SETUP_DEAL and HAND_SCORING are advanced on the dealer's behalf.
    - In the reshuffle window side 8 (the dealer) is asked first; side 35
      accepts only when both non-dealers want a new deal.
    - Returns None once the game is over.
    """
    phase = state.phase
    dealer = state.dealer_index
    seat = state.current_player_index

    if phase is Phase.GAME_OVER:
        return None
    if phase is Phase.SETUP_DEAL:
        return ShuffleDeal()
    if phase is Phase.HAND_SCORING:
        return NextHand()

    if phase is Phase.RESHUFFLE_WINDOW:
        if state.reshuffle_window_for_8:
            wants = agents[dealer].wants_reshuffle(player_view(state, dealer), dealer)
            side = ReshuffleSide.EIGHT
        else:
            non_dealers = [s for s in range(NUM_SEATS) if s != dealer]
            wants = all(
                agents[s].wants_reshuffle(player_view(state, s), s) for s in non_dealers
            )
            side = ReshuffleSide.THIRTY_FIVE
        return ReshuffleAccept(side) if wants else ReshuffleDecline(side)

    view = player_view(state, seat)
    agent = agents[seat]
    if phase is Phase.EXCHANGE_GIVE:
        return ExchangeGiveCard(seat, agent.choose_give(view, seat))
    if phase is Phase.EXCHANGE_RETURN:
        owed = owed_return(state, seat)
        if owed is None:
            raise RuntimeError(f"Seat {seat} is current in EXCHANGE_RETURN but owes nothing")
        _giver, received = owed
        return ExchangeReturnCard(seat, agent.choose_return(view, seat, received))
    if phase is Phase.CUTTER_PICK:
        return PickCutter(agent.choose_trump(view, dealer), seat_index=dealer)
    if phase is Phase.DEALER_DISCARD:
        return DealerDiscard4(tuple(agent.choose_discard(view, dealer)), seat_index=dealer)
    if phase is Phase.TRICK_PLAY:
        return PlayCard(seat, agent.choose_card(view, seat))
    raise RuntimeError(f"No action known for phase {phase.value}")


class GameRunner:
    """
    Drives a full 3-5-8 game between pluggable agents.

    Pure orchestration: every move goes through engine.apply_action, and
    agents only ever see their own player_view.
    """

    def __init__(
        self,
        agents: List[SeatAgent],
        player_names: Optional[List[str]] = None,
        seed: Optional[int] = None,
        victory_target: int = 10,
        dealer_index: Optional[int] = None,
        max_hands: Optional[int] = None,
        game_label: Optional[str] = None,
    ) -> None:
        if len(agents) != NUM_SEATS:
            raise ValueError(f"3-5-8 needs exactly {NUM_SEATS} agents")
        if player_names is None:
            player_names = [f"Player {i}" for i in range(NUM_SEATS)]
        if len(player_names) != NUM_SEATS:
            raise ValueError("player_names must match number of agents")
        if max_hands is not None and max_hands < 1:
            raise ValueError("max_hands must be at least 1")

        self.agents = agents
        self.game_label = game_label or "game"
        self.max_hands = max_hands
        self.state = create_game(
            self.game_label,
            [(f"p{i}", name) for i, name in enumerate(player_names)],
            victory_target=victory_target,
            dealer_index=dealer_index,
            seed=seed,
        )

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def step(self) -> Optional[Action]:
        """Apply one action; returns it, or None when the game is already over."""
        action = next_action(self.state, self.agents)
        if action is None:
            return None
        try:
            self.state = apply_action(self.state, action)
        except EngineError:
            logger.error(
                "Game %s rejected %r in phase %s",
                self.game_label,
                action,
                self.state.phase.value,
            )
            raise
        return action

    def play_game(self) -> GameState:
        """Play until someone wins or `max_hands` hands are scored."""
        while self.state.phase is not Phase.GAME_OVER:
            if (
                self.max_hands is not None
                and self.state.phase is Phase.HAND_SCORING
                and self.state.hand_number >= self.max_hands
            ):
                logger.info(
                    "Stopping %s after %d hands without a winner",
                    self.game_label,
                    self.state.hand_number,
                )
                break
            self.step()

        if self.state.winner_index is not None:
            logger.info(
                "Finished %s after %d hands",
                self.game_label,
                self.state.hand_number,
            )
        return self.state
