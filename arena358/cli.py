# arena358/cli.py
from __future__ import annotations

import argparse
import logging
import os
import random
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from .agents import HeuristicAgent, RandomAgent, SeatAgent
from .errors import EngineError
from .game_log import build_hand_score_rows
from .paths import default_plot_name, resolve_results_path
from .runner import GameRunner
from .summary import (
    plot_delta_histograms,
    rows_to_frame,
    summarize_agents,
    summarize_by_target,
)

load_dotenv()

AGENT_CHOICES = ("heuristic", "random")
DEFAULT_MAX_HANDS = 200


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise SystemExit(f"{name} must be an integer, got {raw!r}") from exc


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Run 3-5-8 games between AI seats and report per-agent delta "
            "statistics. Defaults can be set through ARENA358_* variables "
            "or a .env file."
        )
    )
    parser.add_argument(
        "--agents",
        nargs=3,
        choices=AGENT_CHOICES,
        default=["heuristic", "heuristic", "random"],
        help="Agent type for each of the three seats (default: heuristic heuristic random).",
    )
    parser.add_argument(
        "--games",
        type=int,
        default=_env_int("ARENA358_GAMES", 10),
        help="Number of full games to play (default: 10).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=_env_int("ARENA358_SEED", 0),
        help="Base random seed for dealing, seating and random agents.",
    )
    parser.add_argument(
        "--victory-target",
        type=int,
        default=_env_int("ARENA358_VICTORY_TARGET", 10),
        help="Cumulative score that wins a game (default: 10).",
    )
    parser.add_argument(
        "--max-hands",
        type=int,
        default=DEFAULT_MAX_HANDS,
        help="Stop a game without a winner after this many hands (default: %(default)s).",
    )
    parser.add_argument(
        "--plot",
        nargs="?",
        const="",
        default=None,
        help=(
            "Save a histogram of per-hand deltas. Optional file name; relative "
            "paths land in the results folder."
        ),
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=os.getenv("ARENA358_LOG_LEVEL", "INFO"),
        help="Logging level (DEBUG, INFO, WARNING, ...). Default: INFO.",
    )

    args = parser.parse_args(argv)
    if args.games < 1:
        parser.error("--games must be at least 1")
    if args.victory_target < 1:
        parser.error("--victory-target must be at least 1")
    if args.max_hands < 1:
        parser.error("--max-hands must be at least 1")
    return args


def build_agent(kind: str, seed: int) -> SeatAgent:
    if kind == "heuristic":
        return HeuristicAgent()
    if kind == "random":
        return RandomAgent(rng=random.Random(seed))
    raise ValueError(f"Unknown agent kind {kind!r}")


def play_single_game(
    game_index: int,
    args: argparse.Namespace,
) -> tuple[List[Dict[str, Any]], bool]:
    """Play one game; returns its rows and whether it was stopped by an error."""
    game_id = f"game-{game_index}"

    seating = list(args.agents)
    random.Random(args.seed + game_index).shuffle(seating)
    logging.info("Seating order for %s: %s", game_id, ", ".join(seating))

    agents = [
        build_agent(kind, args.seed + game_index * 1000 + seat)
        for seat, kind in enumerate(seating)
    ]
    runner = GameRunner(
        agents=agents,
        player_names=[f"{kind}@{seat}" for seat, kind in enumerate(seating)],
        seed=args.seed + game_index,
        victory_target=args.victory_target,
        max_hands=args.max_hands,
        game_label=game_id,
    )

    stopped = False
    try:
        state = runner.play_game()
    except EngineError as exc:
        logging.error("Halting %s after a rejected action: %s", game_id, exc)
        state = runner.state
        stopped = True

    rows = build_hand_score_rows(state, game_id=game_id, agent_labels=seating)
    return rows, stopped


def main(argv: List[str] | None = None) -> Optional[Dict[str, Any]]:
    args = parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logging.info("Agents: %s", ", ".join(args.agents))
    logging.info("Games to play: %d", args.games)

    all_rows: List[Dict[str, Any]] = []
    games_played = 0
    for game_index in range(args.games):
        rows, stopped = play_single_game(game_index, args)
        all_rows.extend(rows)
        games_played += 1
        if stopped:
            logging.error("Stopping the run after game %d", game_index)
            break

    df = rows_to_frame(all_rows)
    if df.empty:
        logging.warning("No completed hands to summarize")
        return None

    by_agent = summarize_agents(df)
    by_target = summarize_by_target(df)
    logging.info("Finished %d games, %d hand rows", games_played, len(df))
    logging.info("Per-agent delta:\n%s", by_agent.to_string(index=False))
    logging.info("Per-target delta:\n%s", by_target.to_string(index=False))

    plot_path = None
    if args.plot is not None:
        plot_path = resolve_results_path(args.plot or default_plot_name(args.seed, args.games))
        plot_delta_histograms(df, plot_path)
        logging.info("Saved delta histogram to %s", plot_path)

    return {
        "games_played": games_played,
        "by_agent": by_agent,
        "by_target": by_target,
        "plot_path": plot_path,
    }


if __name__ == "__main__":
    main()

'''
python3 -m arena358.cli --agents heuristic heuristic random --games 50 --seed 1 --plot
'''
