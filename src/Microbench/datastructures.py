"""Data structures for benchmark configuration and results.

Architecture: Params vs Metrics, plus the raw per-run timings

    BenchmarkParams      workload, backend, size,     (input/config)
                         repeats, threads, workers...
    BenchmarkMetrics     min/mean/median time,        (output/results)
                         speedup, verified...
    TimingSeries         run_times[]                  (raw measurements)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np


@dataclass
class BenchmarkParams:
    """Run configuration - validated by Hydra, logged to MLflow as params."""

    # Required
    workload: str
    backend: str
    size: int

    # Timing
    repeats: int = 5
    warmup: int = 1

    # Parallelization
    numba_threads: int = 1
    n_workers: int = 1
    n_ranks: int = 1
    mode: Optional[str] = None  # "processes" | "threads" | "mpi" (parallel_gamma only)

    seed: int = 0

    # Experiment tracking
    experiment_name: str = "default"

    # Auto-detected at runtime (not from config)
    environment: str = field(init=False)

    def __post_init__(self):
        self.environment = (
            "hpc"
            if os.environ.get("LSB_JOBID") or os.environ.get("SLURM_JOB_ID")
            else "local"
        )

    def to_mlflow(self) -> dict:
        """Convert to MLflow-compatible params dict (bools as int, no None)."""
        return {
            k: (int(v) if isinstance(v, bool) else v)
            for k, v in self.__dict__.items()
            if v is not None
        }


@dataclass
class BenchmarkMetrics:
    """Timing summary and verification result - logged to MLflow as metrics."""

    n_runs: int = 0
    min_time: Optional[float] = None
    mean_time: Optional[float] = None
    median_time: Optional[float] = None
    std_time: Optional[float] = None
    total_time: Optional[float] = None

    # Elements processed per second (based on min_time)
    throughput: Optional[float] = None

    # Correctness against the reference implementation
    max_abs_error: Optional[float] = None
    verified: bool = False

    # Ratio baseline_time / min_time, filled in by comparisons
    speedup: Optional[float] = None

    # Numba runtime info (what was actually available)
    observed_numba_threads: Optional[int] = None

    def to_mlflow(self) -> dict:
        """Convert to MLflow-compatible dict (no None, bools as int)."""
        return {
            k: (int(v) if isinstance(v, bool) else v)
            for k, v in self.__dict__.items()
            if v is not None
        }


@dataclass
class TimingSeries:
    """Wall-clock time of every timed run, in seconds."""

    run_times: List[float] = field(default_factory=list)

    def clear(self):
        """Clear all timeseries data."""
        self.run_times.clear()

    def summary(self) -> dict:
        """Summary statistics of the recorded run times."""
        if not self.run_times:
            return {"n_runs": 0}
        times = np.asarray(self.run_times, dtype=np.float64)
        return {
            "n_runs": len(times),
            "min_time": float(times.min()),
            "mean_time": float(times.mean()),
            "median_time": float(np.median(times)),
            "std_time": float(times.std()),
            "total_time": float(times.sum()),
        }

    def to_mlflow_batch(self) -> list:
        """Convert timeseries to MLflow Metric objects for batch logging."""
        from mlflow.entities import Metric

        return [
            Metric(key=name, value=value, timestamp=0, step=step)
            for name, values in self.__dict__.items()
            for step, value in enumerate(values)
        ]
