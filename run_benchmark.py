"""
Benchmark Runner - runs one workload on one backend per Hydra job.

Parallel Gamma with n_ranks > 1 is re-launched under mpiexec.

Usage:
    uv run python run_benchmark.py workload=gamma backend=numba size=10000
    uv run python run_benchmark.py +experiment=backends --multirun
    uv run python run_benchmark.py workload=parallel_gamma mode=mpi n_ranks=4
"""

import logging
import os
import subprocess
import sys

import hydra
from omegaconf import DictConfig, OmegaConf

log = logging.getLogger(__name__)

# Config keys forwarded to the MPI subprocess
FORWARDED_KEYS = [
    "workload", "backend", "size", "repeats", "warmup", "numba_threads", "seed",
    "n_workers", "n_ranks", "mode", "method", "experiment_name",
]


def _create_benchmark(cfg: DictConfig):
    """Create benchmark instance from config."""
    from Microbench import create_benchmark

    kwargs = {
        "backend": cfg.get("backend", "numpy"),
        "repeats": cfg.get("repeats", 5),
        "warmup": cfg.get("warmup", 1),
        "numba_threads": cfg.get("numba_threads", 1),
        "seed": cfg.get("seed", 0),
    }
    if cfg.workload == "parallel_gamma":
        kwargs.update({
            "n_workers": cfg.get("n_workers", 2),
            "mode": cfg.get("mode", "processes"),
            "method": cfg.get("method", "library"),
        })
    return create_benchmark(cfg.workload, cfg.size, **kwargs)


def _log_results(cfg: DictConfig, bench, n_ranks: int = 1) -> str:
    """Log benchmark params, metrics and per-run timings to MLflow; returns the run id."""
    from Microbench import BenchmarkParams
    from utils.mlflow.io import (start_mlflow_run_context, log_parameters,
                                 log_metrics_dict, log_timeseries_metrics)

    params = BenchmarkParams(
        workload=cfg.workload, backend=bench.backend, size=bench.size,
        repeats=bench.repeats, warmup=bench.n_warmup, numba_threads=bench.numba_threads,
        n_workers=getattr(bench, "n_workers", 1), n_ranks=n_ranks,
        mode=getattr(bench, "mode", None), seed=bench.seed,
        experiment_name=cfg.get("experiment_name") or "default",
    )

    run_name = f"{bench.backend}_T{bench.numba_threads}"
    if params.mode:
        run_name = f"{params.mode}_W{params.n_workers}_p{n_ranks}"

    with start_mlflow_run_context(
        experiment_name=params.experiment_name,
        parent_run_name=f"{cfg.workload}_N{bench.size}",
        child_run_name=run_name,
        project_prefix=cfg.mlflow.get("project_prefix", "/Shared/Microbench"),
    ) as run:
        log_parameters(params.to_mlflow())
        log_metrics_dict(bench.metrics.to_mlflow())
        log_timeseries_metrics(bench.timeseries)

    m = bench.metrics
    log.info(f"Done: {cfg.workload}/{run_name}, min={m.min_time:.3e}s, mean={m.mean_time:.3e}s, "
             f"verified={m.verified} (max abs error {m.max_abs_error:.2e})")
    return run.info.run_id


@hydra.main(config_path="Experiments/hydra-conf", config_name="config", version_base=None)
def main(cfg: DictConfig):
    """Entry point - runs locally or spawns MPI based on n_ranks.

    Returns the MLflow run id of a local run (the job log callback uploads
    to it), or None when the run was logged by the MPI subprocess.
    """
    n_ranks = cfg.get("n_ranks", 1)
    log.info(f"{cfg.workload}, backend={cfg.get('backend')}, size={cfg.size}, n_ranks={n_ranks}")

    if n_ranks > 1:
        if cfg.workload != "parallel_gamma":
            log.error(f"n_ranks > 1 is only supported for parallel_gamma, not {cfg.workload}")
            sys.exit(1)
        _spawn_mpi(cfg, n_ranks)
        return None
    return _run_local(cfg)


def _run_local(cfg: DictConfig):
    """Run the benchmark in this process."""
    from utils.mlflow.io import setup_mlflow_tracking

    setup_mlflow_tracking(mode=cfg.mlflow.mode)

    try:
        bench = _create_benchmark(cfg)
    except ValueError as e:
        log.error(str(e))
        sys.exit(1)

    try:
        bench.warmup()
        bench.run()
    finally:
        bench.close()
    return _log_results(cfg, bench)


def _spawn_mpi(cfg: DictConfig, n_ranks: int):
    """Spawn MPI subprocess running this script in MPI mode."""
    env = os.environ.copy()
    env["MPI_SUBPROCESS"] = "1"

    cmd = ["mpiexec", "-n", str(n_ranks)]
    bind_to = cfg.get("mpi", {}).get("bind_to")
    if bind_to:
        cmd.extend(["--report-bindings", "--bind-to", str(bind_to)])
    cmd.extend([sys.executable, os.path.abspath(__file__)])

    for key in FORWARDED_KEYS:
        val = cfg.get(key)
        if val is not None:
            cmd.append(f"{key}={val}")
    cmd.append("mode=mpi")
    cmd.append(f"mlflow.mode={cfg.mlflow.mode}")

    result = subprocess.run(cmd, capture_output=True, text=True, env=env, timeout=cfg.get("timeout", 600))
    for line in (result.stdout or "").strip().split("\n"):
        if line:
            log.info(line)
    for line in (result.stderr or "").strip().split("\n"):
        if line:
            log.warning(line) if "error" in line.lower() else log.info(line)
    if result.returncode != 0:
        log.error(f"mpiexec exited with code {result.returncode}")


def _run_mpi_benchmark(cfg: DictConfig, comm):
    """Run the MPI Gamma benchmark (called within mpiexec subprocess)."""
    from utils.mlflow.io import setup_mlflow_tracking

    rank, n_ranks = comm.Get_rank(), comm.Get_size()
    if rank == 0:
        setup_mlflow_tracking(mode=cfg.mlflow.mode)
        log.info(f"parallel_gamma, size={cfg.size}, ranks={n_ranks}")

    bench = _create_benchmark(cfg)
    bench.warmup()
    bench.run()

    if rank == 0:
        _log_results(cfg, bench, n_ranks=n_ranks)


def parse_overrides(argv) -> dict:
    """Parse ``key=value`` arguments (dotted keys nest) into a dict."""
    cfg_dict = {}
    for arg in argv:
        if "=" not in arg or arg.startswith("-"):
            continue
        key, val = arg.split("=", 1)
        d = cfg_dict
        for k in key.split(".")[:-1]:
            d = d.setdefault(k, {})
        leaf = key.split(".")[-1]
        if val.lower() in ("true", "false"):
            d[leaf] = val.lower() == "true"
            continue
        try:
            d[leaf] = float(val) if ("." in val or "e" in val.lower()) else int(val)
        except ValueError:
            d[leaf] = val
    return cfg_dict


if __name__ == "__main__":
    if os.environ.get("MPI_SUBPROCESS"):
        from mpi4py import MPI

        sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), "src"))
        logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")
        _run_mpi_benchmark(OmegaConf.create(parse_overrides(sys.argv[1:])), MPI.COMM_WORLD)
    else:
        main()
