"""Input generation and closed-form references for the benchmark workloads.

All inputs are float64 NumPy arrays. Random inputs use a seeded
``np.random.default_rng`` so repeated setups produce identical data.
"""

import math

import numpy as np


# Sizes used for the vectorised sine comparison
SINE_SIZES = {"small": 100, "large": 1_000_000}


def create_array_3d(n: int, value: float = 0.0) -> np.ndarray:
    """Create an n x n x n float64 array filled with ``value``.

    Parameters
    ----------
    n : int
        Edge length.
    value : float
        Initial value of every element (default: 0.0).

    Returns
    -------
    np.ndarray
        Array of shape (n, n, n).
    """
    if n < 0:
        raise ValueError(f"Array size must be non-negative, got {n}")
    return np.full((n, n, n), value, dtype=np.float64)


def random_matrices(n: int, seed: int = 0):
    """Two dense n x n float64 matrices drawn from U[0, 1)."""
    if n < 1:
        raise ValueError(f"Matrix size must be positive, got {n}")
    rng = np.random.default_rng(seed)
    a = rng.random((n, n))
    b = rng.random((n, n))
    return a, b


def gamma_sample_points(n: int, low: float = 1.0, high: float = 10.0) -> np.ndarray:
    """Evenly spaced Gamma evaluation points on [low, high].

    Parameters
    ----------
    n : int
        Number of points.
    low, high : float
        Interval bounds. Must satisfy 0 < low <= high.

    Returns
    -------
    np.ndarray
        1-D float64 array of length n.
    """
    if n < 0:
        raise ValueError(f"Number of points must be non-negative, got {n}")
    if low <= 0 or high < low:
        raise ValueError(f"Invalid interval [{low}, {high}] for Gamma sample points")
    return np.linspace(low, high, n, dtype=np.float64)


def integer_points(n_max: int) -> np.ndarray:
    """The integers 1..n_max as float64 (points where Gamma has a closed form)."""
    if n_max < 1:
        raise ValueError(f"n_max must be at least 1, got {n_max}")
    return np.arange(1, n_max + 1, dtype=np.float64)


def sine_inputs(n, seed: int = 0) -> np.ndarray:
    """Uniform samples on [0, 2*pi).

    ``n`` may be an integer length or one of the keys of ``SINE_SIZES``.
    """
    if isinstance(n, str):
        if n not in SINE_SIZES:
            raise ValueError(f"Unknown sine size '{n}'. Choose from {list(SINE_SIZES)}")
        n = SINE_SIZES[n]
    if n < 0:
        raise ValueError(f"Number of samples must be non-negative, got {n}")
    rng = np.random.default_rng(seed)
    return rng.uniform(0.0, 2.0 * np.pi, size=n)


def factorial_reference(points: np.ndarray) -> np.ndarray:
    """Closed-form Gamma values at positive integers: Gamma(n) = (n - 1)!

    Raises
    ------
    ValueError
        If any point is not a positive integer.
    """
    points = np.asarray(points, dtype=np.float64)
    if np.any(points < 1) or np.any(points != np.floor(points)):
        raise ValueError("Factorial identity only holds at positive integer points")
    return np.array([float(math.factorial(int(p) - 1)) for p in points], dtype=np.float64)
