# tests/test_game_log_summary.py
import random

import pytest

from arena358.agents import HeuristicAgent, RandomAgent
from arena358.game_log import FIELDNAMES, build_hand_score_rows
from arena358.paths import default_plot_name, resolve_results_path
from arena358.runner import GameRunner
from arena358.summary import (
    plot_delta_histograms,
    rows_to_frame,
    summarize_agents,
    summarize_by_target,
)


def _play_short_game():
    agents = [HeuristicAgent(), HeuristicAgent(), RandomAgent(rng=random.Random(3))]
    runner = GameRunner(agents=agents, seed=3, max_hands=3, victory_target=50)
    return runner.play_game()


def _make_rows():
    rows = []
    for hand, (a_delta, b_delta) in enumerate([(1, -1), (-1, 1), (2, -2)], start=1):
        for seat, (agent, delta) in enumerate([("alpha", a_delta), ("beta", b_delta)]):
            rows.append(
                {
                    "game_id": "g",
                    "hand_number": hand,
                    "dealer_index": 0,
                    "seat": seat,
                    "player_name": agent,
                    "agent": agent,
                    "target": 8 if seat == 0 else 5,
                    "tricks_taken": 0,
                    "delta": delta,
                    "total_score": 0,
                    "cutter_suit": "S",
                    "winner": hand == 3 and agent == "alpha",
                }
            )
    return rows


def test_rows_cover_every_hand_and_seat():
    state = _play_short_game()
    rows = build_hand_score_rows(state, agent_labels=["h", "h", "r"])

    assert len(rows) == 3 * len(state.hand_history)
    assert all(set(row) == set(FIELDNAMES) for row in rows)
    assert [row["agent"] for row in rows[:3]] == ["h", "h", "r"]
    assert sum(row["delta"] for row in rows) == 0

    final = {row["seat"]: row["total_score"] for row in rows[-3:]}
    assert tuple(final[s] for s in range(3)) == state.score_total
    assert not any(row["winner"] for row in rows)


def test_rows_reject_bad_labels():
    with pytest.raises(ValueError):
        build_hand_score_rows(_play_short_game(), agent_labels=["only-one"])


def test_summarize_agents():
    df = rows_to_frame(_make_rows())
    stats = summarize_agents(df).set_index("agent")

    assert stats.loc["alpha", "mean"] == pytest.approx(2 / 3)
    assert stats.loc["beta", "mean"] == pytest.approx(-2 / 3)
    assert stats.loc["alpha", "count"] == 3
    assert stats.loc["alpha", "wins"] == 1
    assert stats.loc["beta", "wins"] == 0
    assert stats.loc["alpha", "ci95"] == pytest.approx(1.96 * stats.loc["alpha", "se"])


def test_summarize_by_target():
    stats = summarize_by_target(rows_to_frame(_make_rows()))
    assert set(zip(stats["agent"], stats["target"])) == {("alpha", 8), ("beta", 5)}


def test_empty_rows_give_empty_frame():
    df = rows_to_frame([])
    assert df.empty
    assert list(df.columns) == FIELDNAMES


def test_plot_delta_histograms(tmp_path):
    path = plot_delta_histograms(rows_to_frame(_make_rows()), tmp_path / "deltas.png")
    assert path.exists()

    with pytest.raises(ValueError):
        plot_delta_histograms(rows_to_frame([]), tmp_path / "empty.png")


def test_results_paths(tmp_path):
    absolute = tmp_path / "x.png"
    assert resolve_results_path(absolute) == absolute

    relative = resolve_results_path("y.png", base=tmp_path / "results")
    assert relative == tmp_path / "results" / "y.png"
    assert relative.parent.is_dir()

    assert default_plot_name(3, 10) == "arena358_deltas_seed3_10games.png"
