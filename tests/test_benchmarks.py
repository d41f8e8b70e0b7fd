"""Tests for workload benchmarks and backend comparisons."""

import multiprocessing

import numpy as np
import pandas as pd
import pytest
from Microbench import (
    ArrayFillBenchmark,
    GammaBenchmark,
    MatmulBenchmark,
    ParallelGammaBenchmark,
    SineBenchmark,
    WORKLOADS,
    compare_backends,
    create_benchmark,
    ratio_table,
)


class TestSingleProcessBenchmarks:
    """Tests for run(), verification and metrics."""

    @pytest.mark.parametrize(
        "workload,size",
        [("array_fill", 8), ("matmul", 16), ("gamma", 50), ("sine", "small")],
    )
    @pytest.mark.parametrize("backend", ["python", "numpy", "numba"])
    def test_run_verifies(self, workload, size, backend):
        """Every workload should match its reference on every backend."""
        bench = create_benchmark(workload, size, backend=backend, repeats=2, warmup=1)
        bench.warmup()
        metrics = bench.run()

        assert metrics.verified
        assert metrics.n_runs == 2
        assert len(bench.timeseries.run_times) == 2
        assert metrics.min_time <= metrics.mean_time
        assert metrics.throughput > 0

    def test_numba_parallel_threads_recorded(self):
        bench = GammaBenchmark(100, backend="numba_parallel", numba_threads=2, repeats=1)
        bench.warmup()
        metrics = bench.run()

        assert metrics.verified
        assert metrics.observed_numba_threads is not None

    def test_run_resets_previous_metrics(self):
        bench = ArrayFillBenchmark(4, repeats=3)
        bench.run()
        bench.run()
        assert len(bench.timeseries.run_times) == 3

    def test_sine_named_size(self):
        assert SineBenchmark("large").size == 1_000_000

    def test_params(self):
        params = MatmulBenchmark(8, backend="numba", repeats=2, seed=4).params()
        assert params == {
            "workload": "matmul", "backend": "numba", "size": 8, "repeats": 2,
            "warmup": 1, "numba_threads": 1, "seed": 4,
        }


class TestVerification:
    """Tests for comparison against the reference."""

    def test_mismatch_not_verified(self):
        bench = ArrayFillBenchmark(3)
        bench.verify(np.zeros((3, 3, 3)), np.ones((3, 3, 3)))

        assert not bench.metrics.verified
        assert bench.metrics.max_abs_error == 1.0

    def test_shape_mismatch(self):
        bench = ArrayFillBenchmark(3)
        bench.verify(np.zeros(4), np.zeros(5))

        assert not bench.metrics.verified
        assert bench.metrics.max_abs_error == float("inf")

    def test_empty_input_verifies(self):
        metrics = GammaBenchmark(0, repeats=1).run()
        assert metrics.verified
        assert metrics.max_abs_error == 0.0


class TestConstruction:
    """Tests for argument validation."""

    def test_unknown_workload(self):
        with pytest.raises(ValueError):
            create_benchmark("fft", 10)

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            MatmulBenchmark(10, backend="cuda")

    def test_python_size_limit(self):
        """Interpreted backends refuse sizes that would run for minutes."""
        with pytest.raises(ValueError):
            ArrayFillBenchmark(ArrayFillBenchmark.MAX_PYTHON_SIZE + 1, backend="python")

    def test_registry(self):
        assert set(WORKLOADS) == {"array_fill", "matmul", "gamma", "sine", "parallel_gamma"}


class TestParallelGammaBenchmark:
    """Tests for the parallel Gamma benchmark modes."""

    def test_processes(self):
        with ParallelGammaBenchmark(200, n_workers=2, mode="processes", repeats=2) as bench:
            bench.warmup()
            metrics = bench.run()

        assert metrics.verified
        assert bench.params()["mode"] == "processes"
        assert bench.params()["n_workers"] == 2

    def test_threads(self):
        with ParallelGammaBenchmark(200, n_workers=2, mode="threads", repeats=2) as bench:
            bench.warmup()
            metrics = bench.run()

        assert metrics.verified
        assert bench.backend == "numba_parallel"

    def test_threads_reuse_kernel(self, monkeypatch):
        """Timed runs do not reconfigure the numba thread pool."""
        import numba

        with ParallelGammaBenchmark(100, n_workers=2, mode="threads", repeats=2) as bench:
            bench.warmup()
            monkeypatch.setattr(numba, "set_num_threads", pytest.fail)
            metrics = bench.run()

        assert metrics.verified

    def test_invalid_mode(self):
        with pytest.raises(ValueError):
            ParallelGammaBenchmark(10, mode="gpu")

    def test_invalid_method(self):
        with pytest.raises(ValueError):
            ParallelGammaBenchmark(10, method="stirling")


@pytest.fixture(scope="module")
def results():
    """Sine on three backends, compared against NumPy."""
    return compare_backends("sine", 1000, backends=["python", "numpy", "numba"], repeats=2)


class TestCompareBackends:
    """Tests for backend comparison tables."""

    def test_one_row_per_backend(self, results):
        assert list(results["backend"]) == ["python", "numpy", "numba"]
        assert results["verified"].all()

    def test_baseline_speedup_is_one(self, results):
        baseline = results.loc[results["backend"] == "numpy", "speedup"].iloc[0]
        assert baseline == pytest.approx(1.0)

    def test_ratio_table(self, results):
        table = ratio_table(results)

        assert isinstance(table, pd.DataFrame)
        assert set(table.columns) == {"python", "numpy", "numba"}
        assert table.index.tolist() == [("sine", 1000)]

    def test_baseline_must_be_compared(self):
        with pytest.raises(ValueError):
            compare_backends("sine", 10, backends=["numba"], baseline="numpy")

    def test_parallel_gamma_pool_closed(self):
        """Worker processes are shut down once the comparison returns."""
        before = set(multiprocessing.active_children())
        df = compare_backends("parallel_gamma", 200, backends=("numpy",), repeats=1, n_workers=2)

        assert df["verified"].all()
        assert not set(multiprocessing.active_children()) - before
