# tests/test_cli.py
import pytest

from arena358.agents import HeuristicAgent, RandomAgent
from arena358.cli import build_agent, main, parse_args


def test_parse_args_defaults(monkeypatch):
    for name in ("ARENA358_GAMES", "ARENA358_SEED", "ARENA358_VICTORY_TARGET"):
        monkeypatch.delenv(name, raising=False)
    args = parse_args([])

    assert args.agents == ["heuristic", "heuristic", "random"]
    assert args.games == 10
    assert args.seed == 0
    assert args.victory_target == 10
    assert args.max_hands == 200
    assert args.plot is None


def test_parse_args_reads_environment(monkeypatch):
    monkeypatch.setenv("ARENA358_GAMES", "4")
    monkeypatch.setenv("ARENA358_SEED", "17")
    args = parse_args([])
    assert args.games == 4
    assert args.seed == 17

    # Flags win over the environment.
    assert parse_args(["--games", "2"]).games == 2


def test_parse_args_plot_flag_without_name():
    assert parse_args(["--plot"]).plot == ""
    assert parse_args(["--plot", "out.png"]).plot == "out.png"


@pytest.mark.parametrize(
    "argv",
    [
        ["--games", "0"],
        ["--victory-target", "0"],
        ["--max-hands", "0"],
        ["--agents", "heuristic", "random"],
        ["--agents", "heuristic", "random", "llm"],
    ],
)
def test_parse_args_rejects_bad_values(argv):
    with pytest.raises(SystemExit):
        parse_args(argv)


def test_build_agent():
    assert isinstance(build_agent("heuristic", 0), HeuristicAgent)
    assert isinstance(build_agent("random", 0), RandomAgent)
    with pytest.raises(ValueError):
        build_agent("human", 0)


def test_main_runs_games_and_saves_plot(tmp_path):
    plot = tmp_path / "deltas.png"
    result = main([
        "--games", "2",
        "--seed", "5",
        "--max-hands", "2",
        "--victory-target", "30",
        "--plot", str(plot),
        "--log-level", "WARNING",
    ])

    assert result["games_played"] == 2
    assert result["plot_path"] == plot
    assert plot.exists()

    by_agent = result["by_agent"]
    assert set(by_agent["agent"]) == {"heuristic", "random"}
    assert by_agent["count"].sum() == 2 * 2 * 3
    assert set(result["by_target"]["target"]) <= {3, 5, 8}
