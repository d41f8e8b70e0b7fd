"""Formatting utilities for plot labels and annotations."""

from __future__ import annotations


BACKEND_LABELS = {
    "python": "Python",
    "numpy": "NumPy",
    "numba": "Numba",
    "numba_parallel": "Numba (parallel)",
}


def format_scientific_latex(value: float | str, precision: int = 2) -> str:
    """Format a value as LaTeX scientific notation.

    Examples
    --------
    >>> format_scientific_latex(0.001)
    '1.00 \\times 10^{-3}'
    """
    if value == "?":
        return "?"

    mantissa, exp = f"{float(value):.{precision}e}".split("e")
    return rf"{mantissa} \times 10^{{{int(exp)}}}"


def format_backend_label(backend: str, numba_threads: int | None = None) -> str:
    """Legend label for a backend, with the thread count for parallel numba.

    Examples
    --------
    >>> format_backend_label("numba_parallel", 4)
    'Numba (4T)'
    """
    if backend == "numba_parallel" and numba_threads:
        return f"Numba ({numba_threads}T)"
    return BACKEND_LABELS.get(backend, backend)


def format_speedup(ratio: float) -> str:
    """Annotate a ratio, e.g. ``12.3x`` or ``0.45x``."""
    if ratio >= 10:
        return f"{ratio:.0f}x"
    if ratio >= 1:
        return f"{ratio:.1f}x"
    return f"{ratio:.2f}x"
