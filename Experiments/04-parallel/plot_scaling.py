"""
Parallel Gamma Scaling Plots
============================

Speedup and parallel efficiency of the shared-array Gamma benchmark versus
the number of workers.
"""
import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns

from utils import plotting
from utils.config import get_data_dir, get_figures_dir

data_file = get_data_dir("04-parallel", create=False) / "parallel_scaling.parquet"
fig_dir = get_figures_dir("04-parallel")

if not data_file.exists():
    print(f"No data at {data_file}. Run compute_parallel.py first.")
    raise SystemExit(0)

df = pd.read_parquet(data_file)

# %%
# Speedup vs. Workers
# -------------------

fig, (ax_speed, ax_eff) = plt.subplots(1, 2, figsize=(10, 4))
sns.lineplot(data=df, x="n_workers", y="speedup", hue="mode", style="mode",
             markers=True, dashes=False, palette=plotting.palettes.MODES, ax=ax_speed)
workers = sorted(df["n_workers"].unique())
ax_speed.plot(workers, workers, "--", color=plotting.palettes.MODES["ideal"], label="Ideal")
ax_speed.set_xlabel("Workers")
ax_speed.set_ylabel("Speedup")
ax_speed.set_title("Parallel Gamma speedup")
ax_speed.legend(title="Mode")

# %%
# Parallel Efficiency
# -------------------

sns.lineplot(data=df, x="n_workers", y="efficiency", hue="mode", style="mode",
             markers=True, dashes=False, palette=plotting.palettes.MODES, ax=ax_eff)
ax_eff.axhline(1.0, linestyle="--", color=plotting.palettes.MODES["ideal"])
ax_eff.set_xlabel("Workers")
ax_eff.set_ylabel("Efficiency")
ax_eff.set_ylim(0, 1.1)
ax_eff.set_title("Parallel efficiency")

output_file = fig_dir / "parallel_scaling.pdf"
fig.savefig(output_file)
print(f"Saved: {output_file}")
