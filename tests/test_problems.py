"""Tests for workload input generation."""

import math

import numpy as np
import pytest
from Microbench import (
    SINE_SIZES,
    create_array_3d,
    random_matrices,
    gamma_sample_points,
    integer_points,
    sine_inputs,
    factorial_reference,
)


class TestArrayCreation:
    """Tests for 3-D array and matrix inputs."""

    def test_array_shape_and_value(self):
        """Array should be N x N x N and filled with the given value."""
        a = create_array_3d(5, value=2.5)

        assert a.shape == (5, 5, 5)
        assert a.dtype == np.float64
        assert np.all(a == 2.5)

    def test_empty_array(self):
        """Size zero gives an empty array."""
        assert create_array_3d(0).size == 0

    def test_negative_size_rejected(self):
        with pytest.raises(ValueError):
            create_array_3d(-1)

    def test_random_matrices_seeded(self):
        """Same seed should give identical matrices."""
        a1, b1 = random_matrices(8, seed=3)
        a2, b2 = random_matrices(8, seed=3)

        assert a1.shape == b1.shape == (8, 8)
        assert np.array_equal(a1, a2)
        assert np.array_equal(b1, b2)
        assert not np.array_equal(a1, b1)


class TestGammaPoints:
    """Tests for Gamma evaluation points."""

    def test_sample_points_span_interval(self):
        points = gamma_sample_points(11, low=1.0, high=6.0)

        assert len(points) == 11
        assert points[0] == 1.0
        assert points[-1] == 6.0
        assert np.all(np.diff(points) > 0)

    @pytest.mark.parametrize("low,high", [(0.0, 5.0), (-1.0, 2.0), (5.0, 1.0)])
    def test_invalid_interval(self, low, high):
        """Points must lie in the positive domain with low <= high."""
        with pytest.raises(ValueError):
            gamma_sample_points(10, low=low, high=high)

    def test_integer_points(self):
        assert np.array_equal(integer_points(4), [1.0, 2.0, 3.0, 4.0])

    def test_factorial_reference(self):
        """Gamma(n) = (n-1)! at positive integers."""
        expected = [math.factorial(n - 1) for n in range(1, 8)]
        assert np.array_equal(factorial_reference(integer_points(7)), expected)

    def test_factorial_reference_rejects_non_integers(self):
        with pytest.raises(ValueError):
            factorial_reference(np.array([1.5, 2.0]))
        with pytest.raises(ValueError):
            factorial_reference(np.array([0.0]))


class TestSineInputs:
    """Tests for sine inputs."""

    @pytest.mark.parametrize("label", list(SINE_SIZES))
    def test_named_sizes(self, label):
        x = sine_inputs(label)
        assert len(x) == SINE_SIZES[label]

    def test_range(self):
        x = sine_inputs(1000)
        assert np.all(x >= 0.0)
        assert np.all(x < 2.0 * np.pi)

    def test_unknown_label(self):
        with pytest.raises(ValueError):
            sine_inputs("medium")
