"""Color palettes for benchmark plots (Paul Tol's colorblind-safe vibrant)."""

from typing import Dict, List

# One color per backend, stable across figures
BACKENDS: Dict[str, str] = {
    "python": "#CC3311",          # Red
    "numpy": "#0077BB",           # Blue
    "numba": "#EE7733",           # Orange
    "numba_parallel": "#009988",  # Teal
}

# Parallel Gamma modes
MODES: Dict[str, str] = {
    "processes": "#0077BB",
    "threads": "#009988",
    "mpi": "#EE3377",
    "ideal": "#888888",  # Grey dashed line for ideal scaling
}

CATEGORICAL: List[str] = [
    "#0077BB",
    "#EE7733",
    "#009988",
    "#CC3311",
    "#33BBEE",
    "#EE3377",
    "#BBBBBB",
]


def backend_palette(backends) -> Dict[str, str]:
    """Palette dict for seaborn ``hue`` over the given backends."""
    return {
        b: BACKENDS.get(b, CATEGORICAL[i % len(CATEGORICAL)])
        for i, b in enumerate(backends)
    }
