"""
Tracked Backend Runs
====================

Minimum time against problem size for every backend, read back from the
MLflow runs logged by the ``experiment=backends`` Hydra sweep::

    python run_benchmark.py +experiment=backends
"""
import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns

from utils import plotting
from utils.config import get_figures_dir
from utils.mlflow.io import load_runs, setup_mlflow_tracking

setup_mlflow_tracking(mode="local")
df = load_runs("backends", verified_only=True)

if df.empty:
    print("No tracked runs for 'backends'. Run the Hydra sweep first.")
    raise SystemExit(0)

df = pd.DataFrame({
    "workload": df["params.workload"],
    "backend": df["params.backend"],
    "size": df["params.size"].astype(int),
    "min_time": df["metrics.min_time"],
})

# Repeated sweeps: keep the fastest run per configuration
df = df.groupby(["workload", "backend", "size"], as_index=False)["min_time"].min()

fig_dir = get_figures_dir("summary")

# %%
# Minimum Time vs. Size
# ---------------------

workloads = sorted(df["workload"].unique())
fig, axes = plt.subplots(1, len(workloads), figsize=(4 * len(workloads), 4), squeeze=False)
for ax, workload in zip(axes[0], workloads):
    sub = df[df["workload"] == workload]
    sns.lineplot(data=sub, x="size", y="min_time", hue="backend", marker="o",
                 palette=plotting.palettes.backend_palette(sub["backend"].unique()), ax=ax)
    ax.set_yscale("log")
    ax.set_title(workload)
    ax.set_xlabel("Size")
    ax.set_ylabel("Minimum time [s]")

output_file = fig_dir / "tracked_runs.pdf"
fig.savefig(output_file)
print(f"Saved: {output_file}")
