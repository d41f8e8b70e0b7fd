"""
Backend Speedup Summary
=======================

Bar charts of the speedup of every backend relative to NumPy, one panel per
workload, from the parquet files written by the compute scripts.
"""
import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns

from Microbench import ratio_table
from utils import plotting
from utils.config import get_data_dir, get_figures_dir

sources = {
    "01-loops": "loops.parquet",
    "02-gamma": "gamma_timing.parquet",
    "03-sine": "sine.parquet",
}

frames = []
for experiment, filename in sources.items():
    path = get_data_dir(experiment, create=False) / filename
    if path.exists():
        frames.append(pd.read_parquet(path))
    else:
        print(f"  ✗ Missing {path}, skipping")

if not frames:
    print("No benchmark data found. Run the compute scripts first.")
    raise SystemExit(0)

df = pd.concat(frames, ignore_index=True)

fig_dir = get_figures_dir("summary")

# %%
# Speedup vs. NumPy per Workload
# ------------------------------

workloads = list(df["workload"].unique())
fig, axes = plt.subplots(1, len(workloads), figsize=(4 * len(workloads), 4), squeeze=False)
for ax, workload in zip(axes[0], workloads):
    sub = df[df["workload"] == workload]
    sns.barplot(data=sub, x="size", y="speedup", hue="backend",
                palette=plotting.palettes.backend_palette(sub["backend"].unique()), ax=ax)
    ax.set_yscale("log")
    ax.axhline(1.0, color="black", linewidth=0.8)
    ax.set_title(workload)
    ax.set_xlabel("Size")
    ax.set_ylabel("Speedup vs. NumPy")

output_file = fig_dir / "speedups.pdf"
fig.savefig(output_file)
print(f"Saved: {output_file}")

# %%
# Minimum Times
# -------------

table = ratio_table(df)
print(table.to_string(float_format=lambda v: f"{v:.3e}"))
table.to_csv(fig_dir / "min_times.csv")
