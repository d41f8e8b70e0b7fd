"""
Loop Workloads: Array Fill and Matrix Product
==============================================

Time a triple nested loop that writes a constant into an :math:`N^3` array,
and a dense :math:`N \\times N` matrix product, on every backend. The pure
Python loops are only run for the small sizes.
"""
import pandas as pd
import mlflow

from Microbench import compare_backends
from utils.config import get_data_dir
from utils.mlflow.io import setup_mlflow_tracking, log_artifact_file

# %%
# Test Configuration
# ------------------

fill_sizes = [32, 64, 128, 256]
matmul_sizes = [32, 64, 128, 256, 512]
python_max = {"array_fill": 64, "matmul": 64}
backends = ["python", "numpy", "numba", "numba_parallel"]
numba_threads = 4
repeats = 5

data_dir = get_data_dir("01-loops")
for old_file in data_dir.glob("*.parquet"):
    old_file.unlink()

# %%
# Run Benchmarks
# --------------
#
# Ratios are relative to NumPy (``a.fill`` and BLAS ``np.dot``).

frames = []
for workload, sizes in [("array_fill", fill_sizes), ("matmul", matmul_sizes)]:
    print("=" * 60)
    print(f"Workload: {workload}")
    print("=" * 60)
    for N in sizes:
        selected = [b for b in backends if b != "python" or N <= python_max[workload]]
        df = compare_backends(
            workload, N, backends=selected, baseline="numpy",
            repeats=repeats, numba_threads=numba_threads,
        )
        frames.append(df)
        for _, row in df.iterrows():
            status = "✓" if row["verified"] else "✗"
            print(f"  {status} N={N:<5} {row['backend']:<15} "
                  f"min={row['min_time']:.3e}s  speedup vs numpy={row['speedup']:.2f}")

# %%
# Save Results
# ------------

output_file = data_dir / "loops.parquet"
pd.concat(frames, ignore_index=True).to_parquet(output_file, index=False)
print(f"Saved to: {output_file}")

# %%
# MLflow Logging
# --------------

try:
    setup_mlflow_tracking(mode="local")
    mlflow.set_experiment("Experiment-01-Loops")
    with mlflow.start_run(run_name="Loops-Compute-Data"):
        log_artifact_file(output_file)
except Exception as e:
    print(f"  ✗ WARNING: MLflow logging failed: {e}")
