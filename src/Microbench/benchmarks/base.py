"""Base class for benchmarks."""

import time
from abc import ABC, abstractmethod

import numpy as np

from ..datastructures import BenchmarkMetrics, TimingSeries
from ..kernels import BACKENDS, get_kernel
from ..timing import time_callable


class BaseBenchmark(ABC):
    """Abstract base for all workload benchmarks.

    Subclasses allocate fresh inputs in ``setup()``, run the workload once in
    ``execute()`` and compute the expected output in ``reference()``.
    ``run()`` times ``repeats`` executions and verifies the last result.

    Parameters
    ----------
    size : int
        Problem size (meaning depends on the workload).
    backend : str
        One of ``BACKENDS`` (default: "numpy").
    repeats : int
        Number of timed runs (default: 5).
    warmup : int
        Untimed runs before timing (default: 1).
    numba_threads : int
        Threads for the numba_parallel backend (default: 1).
    seed : int
        Seed for random inputs (default: 0).
    """

    workload = ""

    # Largest size the interpreted backend accepts (None = unlimited)
    MAX_PYTHON_SIZE = None

    # Verification tolerances against reference()
    rtol = 1e-10
    atol = 0.0

    def __init__(
        self,
        size: int,
        backend: str = "numpy",
        repeats: int = 5,
        warmup: int = 1,
        numba_threads: int = 1,
        seed: int = 0,
    ):
        if backend not in BACKENDS:
            raise ValueError(f"Unknown backend '{backend}'. Choose from {list(BACKENDS)}")
        if (
            backend == "python"
            and self.MAX_PYTHON_SIZE is not None
            and isinstance(size, int)
            and size > self.MAX_PYTHON_SIZE
        ):
            raise ValueError(
                f"{self.workload}: size {size} too large for the python backend "
                f"(max {self.MAX_PYTHON_SIZE})"
            )

        self.size = size
        self.backend = backend
        self.repeats = repeats
        self.n_warmup = warmup
        self.numba_threads = numba_threads
        self.seed = seed

        self.kernel = get_kernel(backend, numba_threads=numba_threads)

        # Metrics containers
        self.metrics = BenchmarkMetrics()
        self.timeseries = TimingSeries()

    @abstractmethod
    def setup(self) -> tuple:
        """Allocate fresh inputs. Returns the argument tuple for execute()."""
        pass

    @abstractmethod
    def execute(self, *args):
        """Run the workload once and return its result."""
        pass

    @abstractmethod
    def reference(self, *args) -> np.ndarray:
        """Expected result for the inputs returned by setup()."""
        pass

    @property
    @abstractmethod
    def n_elements(self) -> int:
        """Elements processed per execution (for throughput)."""
        pass

    def warmup(self, warmup_size: int = 10):
        """Warmup kernel (trigger Numba JIT if used)."""
        self.kernel.warmup(warmup_size=warmup_size)

    def verify(self, result, expected) -> float:
        """Compare against the reference and record the max absolute error."""
        result = np.asarray(result)
        expected = np.asarray(expected)
        if result.shape != expected.shape:
            self.metrics.verified = False
            self.metrics.max_abs_error = float("inf")
            return self.metrics.max_abs_error

        if result.size:
            self.metrics.max_abs_error = float(np.max(np.abs(result - expected)))
        else:
            self.metrics.max_abs_error = 0.0
        self.metrics.verified = bool(
            np.allclose(result, expected, rtol=self.rtol, atol=self.atol)
        )
        return self.metrics.max_abs_error

    def run(self) -> BenchmarkMetrics:
        """Time the workload and verify the last result."""
        self._reset()

        series, result = time_callable(
            self.execute,
            repeats=self.repeats,
            warmup=self.n_warmup,
            timer=self._get_time,
            setup=self.setup,
        )
        self.timeseries.run_times.extend(series.run_times)

        self.verify(result, self.reference(*self.setup()))
        self._finalize()
        return self.metrics

    def params(self) -> dict:
        """Configuration of this benchmark (logged as MLflow params)."""
        return {
            "workload": self.workload,
            "backend": self.backend,
            "size": self.size,
            "repeats": self.repeats,
            "warmup": self.n_warmup,
            "numba_threads": self.numba_threads,
            "seed": self.seed,
        }

    def close(self):
        """Release resources held between runs (worker pools). No-op by default."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def _get_time(self) -> float:
        """Get current time. Override for MPI timing."""
        return time.perf_counter()

    def _reset(self):
        """Reset metrics and timeseries."""
        self.metrics = BenchmarkMetrics()
        self.timeseries.clear()

    def _finalize(self):
        """Fill metrics from the recorded run times."""
        for key, value in self.timeseries.summary().items():
            setattr(self.metrics, key, value)
        self.metrics.observed_numba_threads = self.kernel.observed_numba_threads
        if self.metrics.min_time and self.metrics.min_time > 0:
            self.metrics.throughput = self.n_elements / self.metrics.min_time
