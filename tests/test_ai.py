# tests/test_ai.py
import random
from dataclasses import replace

from arena358.agents import HeuristicAgent, RandomAgent, SeatAgent
from arena358.agents.heuristics import (
    choose_discard,
    choose_exchange_give,
    choose_exchange_return,
    choose_trump,
    estimate_tricks,
    should_reshuffle,
    top_sequence_length,
)
from arena358.agents.play import choose_card
from arena358.cards import Suit, card_from_id
from arena358.engine import create_game
from arena358.state import CurrentTrick, Phase, TrickPlay

PLAYERS = [("a", "Alice"), ("b", "Bob"), ("c", "Cleo")]

WEAK_HAND = [
    "S-2", "S-3", "S-4", "S-5",
    "H-2", "H-3", "H-4", "H-5",
    "D-2", "D-3", "D-4", "D-5",
    "C-2", "C-3", "C-4", "C-5",
]
STRONG_HAND = [
    "S-A", "S-K", "S-Q", "S-J", "S-10", "S-9", "S-8",
    "H-A", "H-K", "H-Q",
    "D-A", "D-K",
    "C-A", "C-K", "C-Q", "C-J",
]


def _cards(ids):
    return [card_from_id(i) for i in ids]


def _make_last_seat_state(taken, trump=Suit.HEARTS):
    """Seat 2 plays last to a trick that seat 1 led with S5 and seat 0 followed with S9."""
    state = create_game("g1", PLAYERS, dealer_index=0)
    return replace(
        state,
        phase=Phase.TRICK_PLAY,
        hand_number=1,
        cutter_suit=trump,
        trick_number=5,
        tricks_taken_count=taken,
        current_trick=CurrentTrick(
            leader_index=1,
            lead_suit=Suit.SPADES,
            cards_played=(
                TrickPlay(1, card_from_id("S-5")),
                TrickPlay(0, card_from_id("S-9")),
            ),
        ),
        current_player_index=2,
    )


# -------------------------------------------------------------------------
# Pre-play decisions
# -------------------------------------------------------------------------


def test_top_sequence_length():
    assert top_sequence_length(_cards(["S-A", "S-K", "S-J"])) == 2
    assert top_sequence_length(_cards(["S-K", "S-Q"])) == 0
    assert top_sequence_length([]) == 0


def test_choose_trump_prefers_long_strong_suit():
    assert choose_trump(_cards(STRONG_HAND)) is Suit.SPADES

    hearts = _cards([
        "H-A", "H-K", "H-Q", "H-J", "H-10", "H-3",
        "S-2", "S-7", "S-9", "D-4", "D-8", "D-J", "C-3", "C-6", "C-10", "C-K",
    ])
    assert choose_trump(hearts) is Suit.HEARTS


def test_choose_trump_defaults_to_spades_for_empty_hand():
    assert choose_trump([]) is Suit.SPADES


def test_choose_discard_voids_weak_short_suit():
    hand = _cards([
        "S-A", "S-K", "S-Q", "S-J", "S-10", "S-9",
        "H-A", "H-K", "H-Q", "H-5", "H-4",
        "D-A", "D-7", "D-6",
        "C-2", "C-3",
    ])
    discard = choose_discard(hand, Suit.SPADES)

    assert len(discard) == 4
    assert len(set(discard)) == 4
    assert {"C-2", "C-3"} <= set(discard)
    assert not any(card_id.startswith("S-") for card_id in discard)
    assert set(discard) <= {c.id for c in hand}


def test_choose_discard_uses_trumps_only_when_short_of_side_cards():
    hand = _cards(["S-A", "S-K", "S-Q", "S-J", "S-10", "S-9", "S-8", "S-7",
                   "S-6", "S-5", "S-4", "S-3", "S-2", "H-2", "H-3", "D-2"])
    discard = choose_discard(hand, Suit.SPADES)
    assert {"H-2", "H-3", "D-2"} <= set(discard)
    assert "S-2" in discard


def test_exchange_give_keeps_honours():
    hand = _cards(STRONG_HAND[:10] + ["D-3", "C-4", "C-9"])
    given = choose_exchange_give(hand, 2)
    assert len(given) == 2
    assert not any(card_id.endswith(("-A", "-K")) for card_id in given)


def test_exchange_return_uses_required_card_or_falls_back():
    hand = _cards(["S-K", "S-5", "H-A"])
    assert choose_exchange_return(hand, card_from_id("S-3")) == "S-K"

    # Required card (the received one) is no longer held.
    fallback = choose_exchange_return(_cards(["H-3", "D-4"]), card_from_id("S-2"))
    assert fallback in {"H-3", "D-4"}


def test_reshuffle_vote_tracks_hand_strength():
    assert estimate_tricks(_cards(STRONG_HAND)) > estimate_tricks(_cards(WEAK_HAND))
    assert should_reshuffle(_cards(WEAK_HAND), 8)
    assert not should_reshuffle(_cards(STRONG_HAND), 8)


# -------------------------------------------------------------------------
# Trick play
# -------------------------------------------------------------------------


def test_last_seat_wins_cheaply_when_it_needs_tricks():
    state = _make_last_seat_state((2, 2, 0))
    hand = _cards(["S-2", "S-10", "S-K"])
    assert choose_card(hand, state, 2) == "S-10"


def test_last_seat_ducks_when_over_target():
    state = _make_last_seat_state((1, 0, 3))
    hand = _cards(["S-2", "S-10", "S-K"])
    assert choose_card(hand, state, 2) == "S-2"


def test_void_seat_cuts_with_lowest_trump():
    state = _make_last_seat_state((2, 2, 0))
    hand = _cards(["H-2", "H-9", "D-4"])
    assert choose_card(hand, state, 2) == "H-2"


def test_void_seat_over_target_dumps_side_card():
    state = _make_last_seat_state((1, 0, 3))
    hand = _cards(["H-2", "H-9", "D-4"])
    assert choose_card(hand, state, 2) == "D-4"


def test_single_legal_card_is_played():
    state = _make_last_seat_state((0, 0, 0))
    hand = _cards(["S-3", "H-A", "D-K"])
    assert choose_card(hand, state, 2) == "S-3"


def test_lead_is_always_a_held_card():
    state = replace(
        _make_last_seat_state((0, 0, 0)),
        current_trick=CurrentTrick(leader_index=1),
        current_player_index=1,
    )
    hand = _cards(STRONG_HAND)
    assert choose_card(hand, state, 1) in STRONG_HAND
    weak = _cards(WEAK_HAND)
    assert choose_card(weak, state, 1) in WEAK_HAND


# -------------------------------------------------------------------------
# Agents
# -------------------------------------------------------------------------


def test_agents_satisfy_protocol():
    assert isinstance(HeuristicAgent(), SeatAgent)
    assert isinstance(RandomAgent(rng=random.Random(0)), SeatAgent)


def test_heuristic_agent_gives_weakest_card_of_current_hand():
    agent = HeuristicAgent()
    hand = _cards(STRONG_HAND[:10] + ["D-3", "C-4", "C-9"])
    state = replace(
        create_game("g1", PLAYERS, dealer_index=0),
        phase=Phase.EXCHANGE_GIVE,
        player_hands=(tuple(hand), (), ()),
    )
    assert agent.choose_give(state, 0) == "D-3"

    # After the singleton diamond is gone the clubs are re-scored on their own.
    without_diamond = replace(state, player_hands=(tuple(hand[:-3] + hand[-2:]), (), ()))
    assert agent.choose_give(without_diamond, 0) == "C-4"


def test_random_agent_plays_legal_cards():
    agent = RandomAgent(rng=random.Random(4))
    state = _make_last_seat_state((0, 0, 0))
    state = replace(state, player_hands=((), (), tuple(_cards(["S-2", "S-K", "H-A", "D-4"]))))
    for _ in range(20):
        assert agent.choose_card(state, 2) in {"S-2", "S-K"}
