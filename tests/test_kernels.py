"""Tests for workload kernels across backends."""

import math

import numba
import numpy as np
import pytest
from scipy import special

from Microbench import (
    BACKENDS,
    NumbaKernel,
    NumPyKernel,
    PythonKernel,
    factorial_reference,
    get_kernel,
    integer_points,
    random_matrices,
)
from Microbench.kernels import gamma_quad, gamma_simpson


@pytest.fixture(scope="module")
def kernels():
    """One warmed-up kernel per backend."""
    out = {}
    for backend in BACKENDS:
        kernel = get_kernel(backend, numba_threads=2)
        kernel.warmup()
        out[backend] = kernel
    return out


class TestKernelAgreement:
    """All backends should compute the same results."""

    @pytest.mark.parametrize("backend", BACKENDS)
    def test_fill(self, kernels, backend):
        a = np.zeros((6, 7, 8))
        result = kernels[backend].fill(a, 3.0)

        assert result.shape == (6, 7, 8)
        assert np.all(result == 3.0)

    @pytest.mark.parametrize("backend", BACKENDS)
    def test_matmul(self, kernels, backend):
        a, b = random_matrices(12, seed=1)
        assert np.allclose(kernels[backend].matmul(a, b), a @ b, rtol=1e-12, atol=1e-12)

    @pytest.mark.parametrize("backend", BACKENDS)
    def test_matmul_rectangular(self, kernels, backend):
        a = np.arange(6.0).reshape(2, 3)
        b = np.arange(12.0).reshape(3, 4)
        assert np.allclose(kernels[backend].matmul(a, b), a @ b)

    @pytest.mark.parametrize("backend", BACKENDS)
    def test_sine(self, kernels, backend):
        x = np.linspace(0.0, 2.0 * np.pi, 50)
        assert np.allclose(kernels[backend].sine(x), np.sin(x), atol=1e-14)

    @pytest.mark.parametrize("backend", BACKENDS)
    def test_gamma_factorial_identity(self, kernels, backend):
        """Gamma(n) = (n-1)! to within 1e-6 relative error."""
        points = integer_points(10)
        result = kernels[backend].gamma(points)
        assert np.allclose(result, factorial_reference(points), rtol=1e-6, atol=0.0)

    @pytest.mark.parametrize("backend", BACKENDS)
    def test_gamma_non_integer(self, kernels, backend):
        points = np.array([0.5, 1.5, 2.25, 7.75])
        assert np.allclose(kernels[backend].gamma(points), special.gamma(points), rtol=1e-6)

    @pytest.mark.parametrize("backend", BACKENDS)
    def test_empty_input(self, kernels, backend):
        """Empty inputs give empty outputs."""
        x = np.empty(0)
        assert kernels[backend].sine(x).shape == (0,)
        assert kernels[backend].gamma(x).shape == (0,)


class TestKernelValidation:
    """Tests for argument checking."""

    @pytest.mark.parametrize("backend", BACKENDS)
    def test_gamma_rejects_non_positive(self, kernels, backend):
        if backend == "numpy":
            pytest.skip("library Gamma is defined on the negative axis")
        with pytest.raises(ValueError):
            kernels[backend].gamma(np.array([1.0, 0.0]))

    @pytest.mark.parametrize("backend", BACKENDS)
    def test_output_length_mismatch(self, kernels, backend):
        with pytest.raises(ValueError):
            kernels[backend].sine(np.ones(5), np.empty(4))

    @pytest.mark.parametrize("backend", BACKENDS)
    def test_matmul_shape_mismatch(self, kernels, backend):
        with pytest.raises(ValueError):
            kernels[backend].matmul(np.ones((2, 3)), np.ones((2, 3)))

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            get_kernel("fortran")

    def test_output_written_in_place(self):
        x = np.linspace(0.0, 1.0, 10)
        out = np.empty_like(x)
        result = NumPyKernel().sine(x, out)
        assert result is out


class TestGammaQuadrature:
    """Tests for the scalar quadrature routines."""

    def test_quad_at_integers(self):
        for n in range(1, 8):
            assert math.isclose(gamma_quad(float(n)), math.factorial(n - 1), rel_tol=1e-7)

    def test_quad_half(self):
        """Gamma(1/2) = sqrt(pi)."""
        assert math.isclose(gamma_quad(0.5), math.sqrt(math.pi), rel_tol=1e-7)

    def test_quad_rejects_non_positive(self):
        with pytest.raises(ValueError):
            gamma_quad(0.0)

    def test_simpson_matches_library(self):
        for z in [0.3, 1.0, 3.5, 9.9]:
            assert math.isclose(gamma_simpson(z, 4000, 0.0), special.gamma(z), rel_tol=1e-7)


class TestNumbaThreads:
    """Tests for numba thread configuration."""

    def test_threads_clamped(self):
        """Requested threads are clamped to the numba limit."""
        kernel = NumbaKernel(numba_threads=10_000, parallel=True)
        assert kernel.observed_numba_threads == numba.config.NUMBA_NUM_THREADS

    def test_single_thread(self):
        kernel = NumbaKernel(numba_threads=1)
        assert kernel.observed_numba_threads == 1
        assert kernel.name == "numba"

    def test_non_numba_kernels_report_none(self):
        assert PythonKernel().observed_numba_threads is None
        assert NumPyKernel().observed_numba_threads is None
