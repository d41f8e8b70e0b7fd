"""Plotting utilities for benchmark figures.

Automatically applies styles on import:
    from utils import plotting  # Styles applied!

Or import specific utilities:
    from utils.plotting import format_backend_label, palettes
"""

from .styles import apply_styles
from .formatters import (
    format_scientific_latex,
    format_backend_label,
    format_speedup,
)
from . import palettes

# Apply styles when module is imported
apply_styles()

__all__ = [
    "apply_styles",
    "format_scientific_latex",
    "format_backend_label",
    "format_speedup",
    "palettes",
]
