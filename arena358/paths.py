# arena358/paths.py
from __future__ import annotations

from pathlib import Path

# Generated charts from arena runs land here unless an absolute path is given.
RESULTS_DIR = Path(__file__).resolve().parent / "results"


def ensure_results_dir(base: Path = RESULTS_DIR) -> Path:
    """Create the results directory if it does not exist and return it."""
    base.mkdir(parents=True, exist_ok=True)
    return base


def resolve_results_path(path_like: str | Path, base: Path = RESULTS_DIR) -> Path:
    """
    Anchor a user-supplied output path.

    Absolute paths are returned unchanged; relative ones are placed inside
    `base`, which is created on demand.
    """
    path = Path(path_like)
    if path.is_absolute():
        return path
    return ensure_results_dir(base) / path


def default_plot_name(seed: int, games: int) -> str:
    return f"arena358_deltas_seed{seed}_{games}games.png"
