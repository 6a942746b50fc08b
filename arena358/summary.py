# arena358/summary.py
"""
Aggregate statistics and charts for arena runs.

Works on the rows produced by game_log.build_hand_score_rows: one row per
(hand, seat) with the seat's delta for that hand.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
import pandas as pd  # noqa: E402

from .game_log import FIELDNAMES  # noqa: E402


def rows_to_frame(rows: List[Dict[str, Any]]) -> pd.DataFrame:
    """DataFrame with the FIELDNAMES columns, even when `rows` is empty."""
    return pd.DataFrame(rows, columns=FIELDNAMES)


def _with_ci(stats: pd.DataFrame) -> pd.DataFrame:
    # 95% confidence interval: mean ± 1.96 * (std / sqrt(n))
    stats["se"] = stats["std"] / np.sqrt(stats["count"])
    stats["ci95"] = 1.96 * stats["se"]
    return stats


def summarize_agents(df: pd.DataFrame) -> pd.DataFrame:
    """
    Per-agent delta statistics and game wins.

    Columns: agent, mean, std, count, se, ci95, wins.
    """
    stats = df.groupby("agent")["delta"].agg(["mean", "std", "count"]).reset_index()
    stats = _with_ci(stats)
    wins = df.groupby("agent")["winner"].sum().astype(int).rename("wins").reset_index()
    return stats.merge(wins, on="agent", how="left")


def summarize_by_target(df: pd.DataFrame) -> pd.DataFrame:
    """Mean delta per agent and per target (8, 5, 3) with a 95% CI."""
    stats = (
        df.groupby(["agent", "target"])["delta"]
          .agg(["mean", "std", "count"])
          .reset_index()
    )
    return _with_ci(stats)


def plot_delta_histograms(df: pd.DataFrame, path: Path) -> Path:
    """One histogram of per-hand delta per agent, saved as an image at `path`."""
    agents = sorted(df["agent"].dropna().unique())
    if not agents:
        raise ValueError("No agent rows to plot")

    # common bin edges across agents so the histograms are comparable
    delta_min = df["delta"].min()
    delta_max = df["delta"].max()
    bins = np.arange(np.floor(delta_min) - 0.5, np.ceil(delta_max) + 1.5, 1.0)

    fig, axes = plt.subplots(1, len(agents), figsize=(5 * len(agents), 4), sharey=True)
    axes = np.atleast_1d(axes)

    for ax, agent in zip(axes, agents):
        subset = df[df["agent"] == agent]["delta"]
        ax.hist(subset, bins=bins, rwidth=0.8)
        ax.axvline(0, linestyle="--")  # on-target line
        ax.set_title(agent)
        ax.set_xlabel("delta (tricks taken - target)")
        ax.grid(True, axis="y", linestyle=":", alpha=0.5)

    axes[0].set_ylabel("Hands")
    fig.suptitle("Per-hand delta by agent\n(negative = under target, positive = over)", y=1.03)
    fig.tight_layout()
    fig.savefig(path, bbox_inches="tight")
    plt.close(fig)
    return path
