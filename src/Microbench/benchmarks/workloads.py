"""Single-process workload benchmarks.

- ArrayFillBenchmark: triple nested loop writing a constant into a 3-D array
- MatmulBenchmark: dense matrix-matrix product
- GammaBenchmark: Gamma function at evenly spaced points
- SineBenchmark: element-wise sine over small or large arrays
"""

import numpy as np
from scipy import special

from .base import BaseBenchmark
from .. import problems


class ArrayFillBenchmark(BaseBenchmark):
    """Fill an N x N x N array with a constant.

    Parameters
    ----------
    size : int
        Edge length N.
    value : float
        Constant written to every element (default: 1.0).
    """

    workload = "array_fill"
    MAX_PYTHON_SIZE = 64
    rtol = 0.0

    def __init__(self, size: int, value: float = 1.0, **kwargs):
        super().__init__(size, **kwargs)
        self.value = value

    def setup(self):
        return (problems.create_array_3d(self.size),)

    def execute(self, a):
        return self.kernel.fill(a, self.value)

    def reference(self, a):
        return np.full_like(a, self.value)

    @property
    def n_elements(self) -> int:
        return self.size**3


class MatmulBenchmark(BaseBenchmark):
    """Dense N x N matrix product."""

    workload = "matmul"
    MAX_PYTHON_SIZE = 96
    rtol = 1e-9
    atol = 1e-9

    def setup(self):
        return problems.random_matrices(self.size, seed=self.seed)

    def execute(self, a, b):
        return self.kernel.matmul(a, b)

    def reference(self, a, b):
        return np.dot(a, b)

    @property
    def n_elements(self) -> int:
        # Multiply-add operations
        return self.size**3


class GammaBenchmark(BaseBenchmark):
    """Gamma function at ``size`` evenly spaced points on [low, high].

    The python backend integrates the Euler integral with scipy quad, the
    numba backends with compiled Simpson quadrature, and the numpy backend
    calls ``scipy.special.gamma``. All are checked against the library.
    """

    workload = "gamma"
    MAX_PYTHON_SIZE = 20_000
    rtol = 1e-6

    def __init__(self, size: int, low: float = 1.0, high: float = 10.0, **kwargs):
        super().__init__(size, **kwargs)
        self.low = low
        self.high = high

    def setup(self):
        points = problems.gamma_sample_points(self.size, self.low, self.high)
        return points, np.empty_like(points)

    def execute(self, points, out):
        return self.kernel.gamma(points, out)

    def reference(self, points, out):
        return special.gamma(points)

    @property
    def n_elements(self) -> int:
        return self.size


class SineBenchmark(BaseBenchmark):
    """Element-wise sine over uniform samples on [0, 2*pi).

    ``size`` is a length or one of ``problems.SINE_SIZES`` ("small", "large").
    """

    workload = "sine"
    rtol = 1e-12
    atol = 1e-12

    def __init__(self, size, **kwargs):
        if isinstance(size, str):
            if size not in problems.SINE_SIZES:
                raise ValueError(
                    f"Unknown sine size '{size}'. Choose from {list(problems.SINE_SIZES)}"
                )
            size = problems.SINE_SIZES[size]
        super().__init__(size, **kwargs)

    def setup(self):
        x = problems.sine_inputs(self.size, seed=self.seed)
        return x, np.empty_like(x)

    def execute(self, x, out):
        return self.kernel.sine(x, out)

    def reference(self, x, out):
        return np.sin(x)

    @property
    def n_elements(self) -> int:
        return self.size
