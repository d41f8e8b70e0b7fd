"""Path configuration utilities."""

from pathlib import Path


def get_repo_root() -> Path:
    """Find the project root directory (where pyproject.toml is).

    Returns
    -------
    Path
        Path to repository root.
    """
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / "pyproject.toml").exists():
            return parent
    # Fallback: assume src/utils/config structure
    return current.parent.parent.parent.parent


def get_data_dir(experiment: str, create: bool = True) -> Path:
    """Directory for an experiment's parquet results (data/<experiment>)."""
    path = get_repo_root() / "data" / experiment
    if create:
        path.mkdir(parents=True, exist_ok=True)
    return path


def get_figures_dir(experiment: str, create: bool = True) -> Path:
    """Directory for an experiment's figures (figures/<experiment>)."""
    path = get_repo_root() / "figures" / experiment
    if create:
        path.mkdir(parents=True, exist_ok=True)
    return path
