"""
Parallel Gamma over a Shared Array
==================================

Distribute Gamma evaluation over worker processes (shared memory blocks)
and over numba threads (``prange``). Each worker writes a disjoint slice of
the shared result array, so no locking is needed.

The second part contrasts dispatch without join (``dispatch``, returns
futures immediately) with dispatch plus barrier (``run``).

Worker processes re-import this module under spawn/forkserver, so all work
happens under the ``__main__`` guard.
"""
import time

import pandas as pd
import mlflow

from Microbench import ParallelGamma, ParallelGammaBenchmark, gamma_sample_points
from utils.config import get_data_dir
from utils.mlflow.io import setup_mlflow_tracking, log_artifact_file

# %%
# Test Configuration
# ------------------

size = 20_000
method = "quad"
worker_counts = [1, 2, 4]
repeats = 3


# %%
# Worker Scaling
# --------------


def run_scaling() -> pd.DataFrame:
    records = []
    for mode in ["processes", "threads"]:
        print("=" * 60)
        print(f"Mode: {mode}")
        print("=" * 60)
        for n_workers in worker_counts:
            with ParallelGammaBenchmark(size, n_workers=n_workers, mode=mode,
                                        method=method, repeats=repeats) as bench:
                bench.warmup()
                metrics = bench.run()
            records.append({**bench.params(), "min_time": metrics.min_time,
                            "mean_time": metrics.mean_time, "verified": metrics.verified})
            print(f"  workers={n_workers}  min={metrics.min_time:.3e}s  verified={metrics.verified}")

    df = pd.DataFrame(records)
    for _, group in df.groupby("mode"):
        serial = group.loc[group["n_workers"] == 1, "min_time"].iloc[0]
        df.loc[group.index, "speedup"] = serial / group["min_time"]
        df.loc[group.index, "efficiency"] = df.loc[group.index, "speedup"] / group["n_workers"]
    return df


# %%
# Dispatch Without Join vs. With Join
# -----------------------------------


def run_dispatch() -> pd.DataFrame:
    points = gamma_sample_points(size)
    records = []
    with ParallelGamma(n_workers=max(worker_counts), method=method) as pool:
        pool.warmup()
        for _ in range(repeats):
            t0 = time.perf_counter()
            futures = pool.dispatch(points)
            t_dispatch = time.perf_counter() - t0
            pool.wait()
            t_total = time.perf_counter() - t0
            records.append({"n_tasks": len(futures), "dispatch_time": t_dispatch,
                            "completion_time": t_total})
            print(f"  dispatch returned after {t_dispatch:.3e}s, all done after {t_total:.3e}s")
    return pd.DataFrame(records)


if __name__ == "__main__":
    data_dir = get_data_dir("04-parallel")
    for old_file in data_dir.glob("*.parquet"):
        old_file.unlink()

    scaling_file = data_dir / "parallel_scaling.parquet"
    run_scaling().to_parquet(scaling_file, index=False)
    print(f"Saved to: {scaling_file}")

    dispatch_file = data_dir / "dispatch.parquet"
    run_dispatch().to_parquet(dispatch_file, index=False)
    print(f"Saved to: {dispatch_file}")

    try:
        setup_mlflow_tracking(mode="local")
        mlflow.set_experiment("Experiment-04-Parallel")
        with mlflow.start_run(run_name="Parallel-Compute-Data"):
            for f in [scaling_file, dispatch_file]:
                log_artifact_file(f)
    except Exception as e:
        print(f"  ✗ WARNING: MLflow logging failed: {e}")
