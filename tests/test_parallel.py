"""Tests for shared-array parallel Gamma evaluation."""

import multiprocessing
import os
import subprocess
import sys
import textwrap
from pathlib import Path

import numpy as np
import pytest
from scipy import special

from Microbench import ParallelGamma, SharedArray, gamma_sample_points, gamma_threads, partition_range
from Microbench.parallel import evaluate_gamma

SRC_DIR = str(Path(__file__).resolve().parents[1] / "src")


class TestPartitionRange:
    """Tests for splitting an index range across workers."""

    @pytest.mark.parametrize("n,parts", [(10, 3), (7, 7), (100, 8), (1, 1)])
    def test_chunks_cover_range(self, n, parts):
        """Chunks should be disjoint, contiguous and cover [0, n)."""
        chunks = partition_range(n, parts)

        assert chunks[0][0] == 0
        assert chunks[-1][1] == n
        for (_, stop), (start, _) in zip(chunks, chunks[1:]):
            assert stop == start

    def test_balanced(self):
        """Chunk sizes differ by at most one."""
        sizes = [stop - start for start, stop in partition_range(10, 4)]
        assert sizes == [3, 3, 2, 2]

    def test_more_parts_than_items(self):
        """Empty chunks are dropped."""
        assert partition_range(2, 5) == [(0, 1), (1, 2)]

    def test_empty_range(self):
        assert partition_range(0, 4) == []

    def test_invalid_parts(self):
        with pytest.raises(ValueError):
            partition_range(10, 0)


class TestSharedArray:
    """Tests for shared memory backed arrays."""

    def test_from_array_copies(self):
        data = np.arange(5.0)
        with SharedArray.from_array(data) as shared:
            assert np.array_equal(shared.array, data)
            assert shared.array.dtype == np.float64

    def test_attach_by_name(self):
        """A second handle sees writes made through the first."""
        with SharedArray(4) as owner:
            owner.array[:] = 0.0
            view = SharedArray(4, name=owner.name, create=False)
            view.array[2] = 7.0
            assert owner.array[2] == 7.0
            view.close()

    def test_zero_length(self):
        with SharedArray(0) as shared:
            assert shared.array.shape == (0,)


@pytest.fixture(scope="module")
def pool():
    """Two-worker pool shared by the tests below."""
    with ParallelGamma(n_workers=2) as pool:
        yield pool


class TestParallelGamma:
    """Tests for the process pool Gamma evaluation."""

    def test_matches_library(self, pool):
        points = gamma_sample_points(101)
        assert np.allclose(pool.run(points), special.gamma(points), rtol=1e-12)

    def test_dispatch_returns_futures(self, pool):
        """dispatch() returns without waiting; collect() joins."""
        points = gamma_sample_points(50)
        futures = pool.dispatch(points)

        assert len(futures) == 2
        result = pool.collect()
        assert all(f.done() for f in futures)
        assert np.allclose(result, special.gamma(points))

    def test_repeated_runs_use_fresh_arrays(self, pool):
        """Consecutive runs with different lengths give independent results."""
        first = pool.run(gamma_sample_points(10))
        second = pool.run(gamma_sample_points(30, low=2.0, high=3.0))

        assert len(first) == 10
        assert len(second) == 30
        assert np.allclose(second, special.gamma(gamma_sample_points(30, low=2.0, high=3.0)))

    def test_fewer_points_than_workers(self, pool):
        points = np.array([4.0])
        assert np.allclose(pool.run(points), [6.0])

    def test_empty_input(self, pool):
        assert pool.run(np.empty(0)).shape == (0,)

    def test_quad_method(self):
        points = gamma_sample_points(8)
        with ParallelGamma(n_workers=2, method="quad") as pool:
            assert np.allclose(pool.run(points), special.gamma(points), rtol=1e-7)

    def test_collect_before_dispatch(self):
        with ParallelGamma(n_workers=1) as pool:
            with pytest.raises(RuntimeError):
                pool.collect()

    def test_invalid_arguments(self):
        with pytest.raises(ValueError):
            ParallelGamma(n_workers=0)
        with pytest.raises(ValueError):
            ParallelGamma(method="stirling")

    def test_shutdown_stops_workers(self):
        """No worker processes outlive the context manager."""
        before = set(multiprocessing.active_children())
        with ParallelGamma(n_workers=2) as pool:
            pool.warmup()
            assert set(multiprocessing.active_children()) - before
        assert not set(multiprocessing.active_children()) - before

    def test_worker_error_propagates(self):
        """Errors raised inside a worker surface in the parent."""
        with ParallelGamma(n_workers=1, method="quad") as pool:
            with pytest.raises(ValueError):
                pool.run(np.array([1.0, -1.0]))


class TestThreadsAndEvaluate:
    """Tests for numba-threaded Gamma and the per-slice evaluator."""

    def test_gamma_threads(self):
        points = gamma_sample_points(200)
        result = gamma_threads(points, numba_threads=2)
        assert np.allclose(result, special.gamma(points), rtol=1e-6)

    @pytest.mark.parametrize("method", ["library", "quad"])
    def test_evaluate_gamma(self, method):
        points = np.array([1.0, 2.5, 5.0])
        assert np.allclose(evaluate_gamma(points, method), special.gamma(points), rtol=1e-7)

    def test_evaluate_unknown_method(self):
        with pytest.raises(ValueError):
            evaluate_gamma(np.ones(2), "stirling")


class TestInterpreterExit:
    """A process that used numba threads and then a worker pool must exit."""

    SCRIPT = textwrap.dedent(
        """
        import numpy as np
        from Microbench import NumbaKernel, ParallelGamma

        if __name__ == "__main__":
            points = np.linspace(1.0, 5.0, 64)
            NumbaKernel(numba_threads=2, parallel=True).gamma(points)
            with ParallelGamma(n_workers=2) as pool:
                pool.run(points)
            print("done")
        """
    )

    def test_exits_after_threads_then_processes(self, tmp_path):
        script = tmp_path / "threads_then_pool.py"
        script.write_text(self.SCRIPT)
        env = dict(os.environ)
        env["PYTHONPATH"] = os.pathsep.join(filter(None, [SRC_DIR, env.get("PYTHONPATH")]))

        result = subprocess.run(
            [sys.executable, str(script)], capture_output=True, text=True, env=env, timeout=120
        )

        assert result.returncode == 0, result.stderr
        assert "done" in result.stdout
