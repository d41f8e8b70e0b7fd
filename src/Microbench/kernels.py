"""Workload kernels, one class per backend.

Every kernel exposes the same methods (fill, matmul, gamma, sine, warmup)
so benchmarks can swap backends without changing the timing code.

- PythonKernel: interpreted loops, no JIT
- NumPyKernel: vectorised NumPy / BLAS / scipy.special
- NumbaKernel: numba JIT loops, optionally parallel (prange over shared memory)
"""

import math

import numba
import numpy as np
from numba import njit, prange
from scipy import integrate, special


BACKENDS = ("python", "numpy", "numba", "numba_parallel")

# Simpson intervals used by the compiled Gamma quadrature
DEFAULT_SIMPSON_INTERVALS = 4000


# ============================================================================
# Gamma quadrature
# ============================================================================


def gamma_integrand(t: float, z: float) -> float:
    """Euler integrand t^(z-1) * exp(-t), evaluated in log space."""
    if t == 0.0:
        if z > 1.0:
            return 0.0
        if z == 1.0:
            return 1.0
        return math.inf
    return math.exp((z - 1.0) * math.log(t) - t)


_gamma_integrand_jit = njit(gamma_integrand)


def gamma_quad(z: float) -> float:
    """Gamma(z) by adaptive quadrature of the Euler integral over [0, inf)."""
    if z <= 0.0:
        raise ValueError(f"Gamma quadrature requires z > 0, got {z}")
    if z < 1.0:
        # Integrand is singular at t=0; use Gamma(z) = Gamma(z+1) / z
        return gamma_quad(z + 1.0) / z
    value, _ = integrate.quad(gamma_integrand, 0.0, np.inf, args=(z,))
    return value


@njit
def gamma_simpson(z, n_intervals, t_max):
    """Gamma(z) by composite Simpson quadrature on [0, t_max].

    The argument is shifted up with Gamma(z) = Gamma(z+1) / z until z >= 6
    so the integrand is smooth at the origin. ``t_max <= 0`` selects
    ``50 + 10 z``, past which the integrand is negligible.
    """
    scale = 1.0
    while z < 6.0:
        scale *= z
        z += 1.0
    if t_max <= 0.0:
        t_max = 50.0 + 10.0 * z
    if n_intervals % 2 == 1:
        n_intervals += 1

    h = t_max / n_intervals
    total = _gamma_integrand_jit(0.0, z) + _gamma_integrand_jit(t_max, z)
    for i in range(1, n_intervals):
        weight = 4.0 if i % 2 == 1 else 2.0
        total += weight * _gamma_integrand_jit(i * h, z)
    return total * h / 3.0 / scale


# ============================================================================
# Numba implementations
# ============================================================================


@njit
def _fill_numba(a, value):
    for i in range(a.shape[0]):
        for j in range(a.shape[1]):
            for k in range(a.shape[2]):
                a[i, j, k] = value
    return a


@njit(parallel=True)
def _fill_numba_parallel(a, value):
    for i in prange(a.shape[0]):
        for j in range(a.shape[1]):
            for k in range(a.shape[2]):
                a[i, j, k] = value
    return a


@njit
def _matmul_numba(a, b):
    n, m = a.shape
    p = b.shape[1]
    c = np.zeros((n, p))
    for i in range(n):
        for k in range(m):
            aik = a[i, k]
            for j in range(p):
                c[i, j] += aik * b[k, j]
    return c


@njit(parallel=True)
def _matmul_numba_parallel(a, b):
    n, m = a.shape
    p = b.shape[1]
    c = np.zeros((n, p))
    for i in prange(n):
        for k in range(m):
            aik = a[i, k]
            for j in range(p):
                c[i, j] += aik * b[k, j]
    return c


@njit
def _gamma_numba(points, out, n_intervals):
    for i in range(points.shape[0]):
        out[i] = gamma_simpson(points[i], n_intervals, 0.0)
    return out


@njit(parallel=True)
def _gamma_numba_parallel(points, out, n_intervals):
    for i in prange(points.shape[0]):
        out[i] = gamma_simpson(points[i], n_intervals, 0.0)
    return out


@njit
def _sine_numba(x, out):
    for i in range(x.shape[0]):
        out[i] = math.sin(x[i])
    return out


@njit(parallel=True)
def _sine_numba_parallel(x, out):
    for i in prange(x.shape[0]):
        out[i] = math.sin(x[i])
    return out


# ============================================================================
# Shared validation
# ============================================================================


def _prepare_output(x, out):
    """Coerce input to float64 and allocate or validate the output array."""
    x = np.ascontiguousarray(x, dtype=np.float64)
    if x.ndim != 1:
        raise ValueError(f"Expected a 1-D input array, got shape {x.shape}")
    if out is None:
        out = np.empty_like(x)
    elif out.shape != x.shape:
        raise ValueError(
            f"Output length {out.shape[0]} does not match input length {x.shape[0]}"
        )
    return x, out


def _check_matmul_shapes(a, b):
    if a.ndim != 2 or b.ndim != 2:
        raise ValueError("matmul expects 2-D arrays")
    if a.shape[1] != b.shape[0]:
        raise ValueError(f"Inner dimensions do not match: {a.shape} x {b.shape}")


def _check_gamma_domain(points):
    if points.size and np.min(points) <= 0.0:
        raise ValueError("Gamma quadrature requires all points > 0")


# ============================================================================
# Kernels
# ============================================================================


class PythonKernel:
    """Interpreted Python loops (no JIT)."""

    name = "python"

    def __init__(self, numba_threads: int = 1):
        self.observed_numba_threads = None  # Not applicable

    def fill(self, a: np.ndarray, value: float) -> np.ndarray:
        n0, n1, n2 = a.shape
        for i in range(n0):
            for j in range(n1):
                for k in range(n2):
                    a[i, j, k] = value
        return a

    def matmul(self, a: np.ndarray, b: np.ndarray) -> np.ndarray:
        _check_matmul_shapes(a, b)
        n, m = a.shape
        p = b.shape[1]
        c = np.zeros((n, p), dtype=np.float64)
        for i in range(n):
            for k in range(m):
                aik = a[i, k]
                for j in range(p):
                    c[i, j] += aik * b[k, j]
        return c

    def gamma(self, points: np.ndarray, out: np.ndarray = None) -> np.ndarray:
        points, out = _prepare_output(points, out)
        _check_gamma_domain(points)
        for i in range(points.shape[0]):
            out[i] = gamma_quad(points[i])
        return out

    def sine(self, x: np.ndarray, out: np.ndarray = None) -> np.ndarray:
        x, out = _prepare_output(x, out)
        for i in range(x.shape[0]):
            out[i] = math.sin(x[i])
        return out

    def warmup(self, warmup_size: int = 10):
        """No-op for interpreted kernel."""
        pass


class NumPyKernel:
    """Vectorised NumPy kernel (BLAS matmul, scipy.special.gamma)."""

    name = "numpy"

    def __init__(self, numba_threads: int = 1):
        self.observed_numba_threads = None  # Not applicable for NumPy

    def fill(self, a: np.ndarray, value: float) -> np.ndarray:
        a.fill(value)
        return a

    def matmul(self, a: np.ndarray, b: np.ndarray) -> np.ndarray:
        _check_matmul_shapes(a, b)
        return np.dot(a, b)

    def gamma(self, points: np.ndarray, out: np.ndarray = None) -> np.ndarray:
        points, out = _prepare_output(points, out)
        special.gamma(points, out=out)
        return out

    def sine(self, x: np.ndarray, out: np.ndarray = None) -> np.ndarray:
        x, out = _prepare_output(x, out)
        np.sin(x, out=out)
        return out

    def warmup(self, warmup_size: int = 10):
        """No-op for NumPy kernel."""
        pass


class NumbaKernel:
    """Numba JIT-compiled kernel.

    Parameters
    ----------
    numba_threads : int
        Requested thread count for parallel loops (default: 1). Clamped to
        the NUMBA_NUM_THREADS limit.
    parallel : bool
        Use the prange variants (default: False).
    n_intervals : int
        Simpson intervals for the Gamma quadrature.
    """

    def __init__(
        self,
        numba_threads: int = 1,
        parallel: bool = False,
        n_intervals: int = DEFAULT_SIMPSON_INTERVALS,
    ):
        self.parallel = parallel
        self.n_intervals = n_intervals
        self.name = "numba_parallel" if parallel else "numba"

        if numba_threads is not None:
            numba.set_num_threads(
                max(1, min(numba_threads, numba.config.NUMBA_NUM_THREADS))
            )

        # Record what Numba actually reports
        self.observed_numba_threads = numba.get_num_threads()

    def fill(self, a: np.ndarray, value: float) -> np.ndarray:
        if self.parallel:
            return _fill_numba_parallel(a, value)
        return _fill_numba(a, value)

    def matmul(self, a: np.ndarray, b: np.ndarray) -> np.ndarray:
        _check_matmul_shapes(a, b)
        a = np.ascontiguousarray(a, dtype=np.float64)
        b = np.ascontiguousarray(b, dtype=np.float64)
        if self.parallel:
            return _matmul_numba_parallel(a, b)
        return _matmul_numba(a, b)

    def gamma(self, points: np.ndarray, out: np.ndarray = None) -> np.ndarray:
        points, out = _prepare_output(points, out)
        _check_gamma_domain(points)
        if self.parallel:
            return _gamma_numba_parallel(points, out, self.n_intervals)
        return _gamma_numba(points, out, self.n_intervals)

    def sine(self, x: np.ndarray, out: np.ndarray = None) -> np.ndarray:
        x, out = _prepare_output(x, out)
        if self.parallel:
            return _sine_numba_parallel(x, out)
        return _sine_numba(x, out)

    def warmup(self, warmup_size: int = 10):
        """Trigger JIT compilation with a small problem."""
        self.fill(np.zeros((warmup_size, warmup_size, warmup_size)), 1.0)
        a = np.ones((warmup_size, warmup_size))
        self.matmul(a, a)
        x = np.linspace(1.0, 2.0, warmup_size)
        self.gamma(x)
        self.sine(x)


def get_kernel(backend: str, numba_threads: int = 1):
    """Create the kernel for a backend name (see ``BACKENDS``)."""
    if backend == "python":
        return PythonKernel()
    if backend == "numpy":
        return NumPyKernel()
    if backend == "numba":
        return NumbaKernel(numba_threads=numba_threads, parallel=False)
    if backend == "numba_parallel":
        return NumbaKernel(numba_threads=numba_threads, parallel=True)
    raise ValueError(f"Unknown backend '{backend}'. Choose from {list(BACKENDS)}")
