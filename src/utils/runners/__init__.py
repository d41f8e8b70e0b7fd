"""Script execution utilities.

- discover_scripts: Find scripts by pattern in Experiments/
- run_scripts: Run scripts sequentially or concurrently
"""

from .scripts import (
    discover_scripts,
    run_script,
    run_scripts,
    run_plot_scripts,
    run_compute_scripts,
)

__all__ = [
    "discover_scripts",
    "run_script",
    "run_scripts",
    "run_plot_scripts",
    "run_compute_scripts",
]
