r"""
Gamma Function: Quadrature vs. Library
======================================

Evaluate

.. math::

    \Gamma(z) = \int_0^\infty t^{z-1} e^{-t} \, dt

by adaptive quadrature (scipy ``quad``, interpreted integrand), by compiled
Simpson quadrature (numba), and by ``scipy.special.gamma``. Correctness is
checked against the factorial identity :math:`\Gamma(n) = (n-1)!`.
"""
import numpy as np
import pandas as pd
import mlflow

from Microbench import compare_backends, get_kernel, integer_points, factorial_reference
from utils.config import get_data_dir
from utils.mlflow.io import setup_mlflow_tracking, log_artifact_file

# %%
# Test Configuration
# ------------------

problem_sizes = [100, 1_000, 10_000]
backends = ["python", "numpy", "numba", "numba_parallel"]
numba_threads = 4
repeats = 3

data_dir = get_data_dir("02-gamma")
for old_file in data_dir.glob("*.parquet"):
    old_file.unlink()

# %%
# Factorial Identity
# ------------------

points = integer_points(15)
exact = factorial_reference(points)
accuracy = []
for backend in backends:
    kernel = get_kernel(backend, numba_threads=numba_threads)
    kernel.warmup()
    values = kernel.gamma(points)
    rel_err = np.abs(values - exact) / exact
    accuracy.append(pd.DataFrame({
        "backend": backend, "z": points, "gamma": values, "exact": exact, "rel_error": rel_err,
    }))
    print(f"  {backend:<15} max relative error at integers: {rel_err.max():.2e}")

accuracy_file = data_dir / "gamma_accuracy.parquet"
pd.concat(accuracy, ignore_index=True).to_parquet(accuracy_file, index=False)

# %%
# Timing
# ------

frames = []
for N in problem_sizes:
    df = compare_backends(
        "gamma", N, backends=backends, baseline="numpy",
        repeats=repeats, numba_threads=numba_threads,
    )
    frames.append(df)
    for _, row in df.iterrows():
        print(f"  N={N:<6} {row['backend']:<15} min={row['min_time']:.3e}s "
              f"speedup vs library={row['speedup']:.3f}")

timing_file = data_dir / "gamma_timing.parquet"
pd.concat(frames, ignore_index=True).to_parquet(timing_file, index=False)
print(f"Saved to: {timing_file}")

# %%
# MLflow Logging
# --------------

try:
    setup_mlflow_tracking(mode="local")
    mlflow.set_experiment("Experiment-02-Gamma")
    with mlflow.start_run(run_name="Gamma-Compute-Data"):
        for f in [accuracy_file, timing_file]:
            log_artifact_file(f)
except Exception as e:
    print(f"  ✗ WARNING: MLflow logging failed: {e}")
