"""Parallel Gamma benchmark over a shared result array."""

import numpy as np
from scipy import special

from .base import BaseBenchmark
from .. import problems
from ..parallel import GAMMA_METHODS, ParallelGamma


PARALLEL_MODES = ("processes", "threads", "mpi")


class ParallelGammaBenchmark(BaseBenchmark):
    """Gamma at ``size`` points, split across workers writing disjoint slices.

    Parameters
    ----------
    size : int
        Number of evaluation points.
    n_workers : int
        Worker processes (processes mode) or numba threads (threads mode).
    mode : str
        "processes" (process pool + shared memory), "threads" (numba prange)
        or "mpi" (ranks of COMM_WORLD + MPI shared window).
    method : str
        "library" or "quad" for the processes and mpi modes. The threads mode
        always uses compiled Simpson quadrature.
    """

    workload = "parallel_gamma"
    rtol = 1e-6

    def __init__(
        self,
        size: int,
        n_workers: int = 2,
        mode: str = "processes",
        method: str = "library",
        low: float = 1.0,
        high: float = 10.0,
        **kwargs,
    ):
        if mode not in PARALLEL_MODES:
            raise ValueError(f"Unknown parallel mode '{mode}'. Choose from {list(PARALLEL_MODES)}")
        if method not in GAMMA_METHODS:
            raise ValueError(f"Unknown Gamma method '{method}'. Choose from {list(GAMMA_METHODS)}")
        if mode == "threads":
            kwargs["backend"] = "numba_parallel"
            kwargs["numba_threads"] = n_workers
        super().__init__(size, **kwargs)

        self.n_workers = n_workers
        self.mode = mode
        self.method = method
        self.low = low
        self.high = high
        self._pool = ParallelGamma(n_workers, method=method) if mode == "processes" else None

    def setup(self):
        return (problems.gamma_sample_points(self.size, self.low, self.high),)

    def execute(self, points):
        if self.mode == "processes":
            return self._pool.run(points)
        if self.mode == "threads":
            return self.kernel.gamma(points, np.empty_like(points))

        from ..mpi import gamma_mpi

        return gamma_mpi(points, method=self.method)

    def reference(self, points):
        return special.gamma(points)

    @property
    def n_elements(self) -> int:
        return self.size

    def warmup(self, warmup_size: int = 10):
        """Start worker processes or compile the threaded kernel."""
        if self._pool is not None:
            self._pool.warmup(warmup_size)
        else:
            self.kernel.warmup(warmup_size=warmup_size)

    def params(self) -> dict:
        params = super().params()
        params.update({"n_workers": self.n_workers, "mode": self.mode, "method": self.method})
        return params

    def close(self):
        """Shut down the worker pool (processes mode)."""
        if self._pool is not None:
            self._pool.shutdown()
            self._pool = None
