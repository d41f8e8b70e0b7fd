"""
Vectorised Sine
===============

Element-wise ``sin`` over a small (100) and a large (1,000,000) input. For
small inputs call overhead dominates; for large inputs the loop itself does.
"""
import pandas as pd
import mlflow

from Microbench import compare_backends, SINE_SIZES
from utils.config import get_data_dir
from utils.mlflow.io import setup_mlflow_tracking, log_artifact_file

backends = ["python", "numpy", "numba", "numba_parallel"]
numba_threads = 4
repeats = 10

data_dir = get_data_dir("03-sine")
for old_file in data_dir.glob("*.parquet"):
    old_file.unlink()

# %%
# Run Benchmarks
# --------------

frames = []
for label in SINE_SIZES:
    df = compare_backends(
        "sine", label, backends=backends, baseline="numpy",
        repeats=repeats, numba_threads=numba_threads,
    )
    df["input"] = label
    frames.append(df)
    print(f"\n{label} input ({SINE_SIZES[label]} elements)")
    print("-" * 60)
    for _, row in df.iterrows():
        print(f"  {row['backend']:<15} min={row['min_time']:.3e}s speedup={row['speedup']:.2f}")

output_file = data_dir / "sine.parquet"
pd.concat(frames, ignore_index=True).to_parquet(output_file, index=False)
print(f"Saved to: {output_file}")

try:
    setup_mlflow_tracking(mode="local")
    mlflow.set_experiment("Experiment-03-Sine")
    with mlflow.start_run(run_name="Sine-Compute-Data"):
        log_artifact_file(output_file)
except Exception as e:
    print(f"  ✗ WARNING: MLflow logging failed: {e}")
