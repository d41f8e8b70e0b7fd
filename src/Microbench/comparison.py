"""Backend comparisons: run one workload per backend and tabulate ratios."""

from dataclasses import asdict
from typing import Iterable, Optional

import pandas as pd

from .benchmarks import create_benchmark
from .timing import speedup


def compare_backends(
    workload: str,
    size,
    backends: Iterable[str] = ("numpy", "numba"),
    baseline: Optional[str] = "numpy",
    warmup_kernels: bool = True,
    **kwargs,
) -> pd.DataFrame:
    """Benchmark ``workload`` on each backend.

    Parameters
    ----------
    workload : str
        Workload name (see ``benchmarks.WORKLOADS``).
    size : int or str
        Problem size passed to every benchmark.
    backends : iterable of str
        Backends to compare.
    baseline : str, optional
        Backend whose min_time is the denominator of the ``speedup`` column.
        Must be one of ``backends``. None skips the ratio.
    warmup_kernels : bool
        Call ``warmup()`` (JIT compile) before timing (default: True).
    **kwargs
        Extra benchmark arguments (repeats, warmup, numba_threads, ...).

    Returns
    -------
    pd.DataFrame
        One row per backend with the benchmark params and metrics.
    """
    backends = list(backends)
    if baseline is not None and baseline not in backends:
        raise ValueError(f"Baseline '{baseline}' is not among the backends {backends}")

    rows = []
    for backend in backends:
        with create_benchmark(workload, size, backend=backend, **kwargs) as bench:
            if warmup_kernels:
                bench.warmup()
            metrics = bench.run()
        rows.append({**bench.params(), **asdict(metrics)})

    df = pd.DataFrame(rows)
    if baseline is not None:
        base_time = df.loc[df["backend"] == baseline, "min_time"].iloc[0]
        df["speedup"] = [speedup(base_time, t) for t in df["min_time"]]
    return df


def ratio_table(df: pd.DataFrame, value: str = "min_time") -> pd.DataFrame:
    """Pivot results into a workload x backend table of ``value``."""
    return df.pivot_table(index=["workload", "size"], columns="backend", values=value)
