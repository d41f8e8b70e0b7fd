"""MLflow I/O for benchmark runs.

- ``setup_mlflow_tracking``: SQLite store in the working directory, or Databricks
- ``start_mlflow_run_context``: one parent run per workload/size, one child per backend
- ``log_*``: params, metrics, per-run timings, artifact files
- ``load_runs``: benchmark runs of an experiment as a DataFrame
"""

import os
import time
from contextlib import contextmanager
from dataclasses import asdict
from pathlib import Path

import mlflow
from mlflow.entities import Metric
import pandas as pd


DEFAULT_PROJECT_PREFIX = "/Shared/Microbench"

# Local tracking database, relative to the working directory
LOCAL_DB_NAME = "mlflow.db"

# log_batch accepts at most 1000 metrics per call
_BATCH_LIMIT = 1000


def local_tracking_uri(directory: Path = None) -> str:
    """SQLite tracking URI for ``directory`` (default: working directory)."""
    db_path = (Path(directory) if directory is not None else Path.cwd()) / LOCAL_DB_NAME
    return f"sqlite:///{db_path.resolve()}"


def setup_mlflow_tracking(mode: str = "local"):
    """
    Configures MLflow tracking.

    Parameters
    ----------
    mode : str
        "local" (SQLite database ``mlflow.db`` in the working directory;
        artifacts under ``./mlruns``) or "databricks".
    """
    if mode == "databricks":
        try:
            mlflow.login(backend="databricks", interactive=False)
            mlflow.set_tracking_uri("databricks")
            print("INFO: Connected to Databricks MLflow tracking.")
        except Exception as e:
            raise RuntimeError(
                "MLflow Databricks setup failed. Ensure credentials are configured."
            ) from e
    elif mode == "local":
        uri = local_tracking_uri()
        mlflow.set_tracking_uri(uri)
        print(f"INFO: Using local MLflow tracking database: {uri}")
    else:
        print(
            f"WARNING: Unknown MLflow mode '{mode}'. Using existing URI: {mlflow.get_tracking_uri()}"
        )


def get_mlflow_client() -> mlflow.tracking.MlflowClient:
    """Get an MLflow tracking client."""
    return mlflow.tracking.MlflowClient()


def _full_experiment_name(experiment_name: str, project_prefix: str) -> str:
    """Databricks experiments live under a workspace folder."""
    if mlflow.get_tracking_uri() == "databricks" and not experiment_name.startswith("/"):
        return f"{project_prefix}/{experiment_name}"
    return experiment_name


def _find_parent_run_id(experiment_id: str, parent_run_name: str):
    runs = get_mlflow_client().search_runs(
        experiment_ids=[experiment_id],
        filter_string=f"tags.mlflow.runName = '{parent_run_name}' AND tags.is_parent = 'true'",
        max_results=1,
    )
    return runs[0].info.run_id if runs else None


def _environment() -> str:
    return "hpc" if os.environ.get("LSB_JOBID") or os.environ.get("SLURM_JOB_ID") else "local"


@contextmanager
def start_mlflow_run_context(
    experiment_name: str,
    parent_run_name: str,
    child_run_name: str,
    project_prefix: str = DEFAULT_PROJECT_PREFIX,
):
    """Open ``child_run_name`` nested under the parent run ``parent_run_name``.

    An existing parent with that name is resumed, so every backend measured
    for one workload/size is grouped under a single parent.
    """
    experiment = mlflow.set_experiment(_full_experiment_name(experiment_name, project_prefix))
    print(f"INFO: Using MLflow experiment: {experiment.name}")

    parent_run_id = _find_parent_run_id(experiment.experiment_id, parent_run_name)

    with mlflow.start_run(
        run_id=parent_run_id, run_name=parent_run_name, tags={"is_parent": "true"}
    ):
        with mlflow.start_run(run_name=child_run_name, nested=True) as child_run:
            env = _environment()
            mlflow.set_tag("environment", env)
            print(f"INFO: Started MLflow run '{child_run.info.run_name}' ({child_run.info.run_id}) [{env}]")
            yield child_run


def log_parameters(params: dict):
    """Log a dictionary of parameters to the active MLflow run."""
    mlflow.log_params(params)


def log_metrics_dict(metrics: dict):
    """Log metrics to the active run; None is skipped, bools become 0/1."""
    mlflow.log_metrics({
        k: (int(v) if isinstance(v, bool) else v)
        for k, v in metrics.items()
        if v is not None
    })


def log_timeseries_metrics(timeseries_data: object):
    """Log each list field of a timing dataclass as a step-indexed metric."""
    run = mlflow.active_run()
    if run is None:
        return
    timestamp = int(time.time() * 1000)
    metrics = [
        Metric(name, float(value), timestamp, step)
        for name, values in asdict(timeseries_data).items()
        for step, value in enumerate(values)
    ]
    client = get_mlflow_client()
    for start in range(0, len(metrics), _BATCH_LIMIT):
        client.log_batch(run_id=run.info.run_id, metrics=metrics[start:start + _BATCH_LIMIT])
    if metrics:
        print(f"  ✓ Logged {len(metrics)} time-series metrics.")


def log_artifact_file(filepath: Path):
    """Log a file as an artifact to the active MLflow run."""
    filepath = Path(filepath)
    if not filepath.exists():
        print(f"  ✗ WARNING: Artifact file not found at {filepath}")
        return
    mlflow.log_artifact(str(filepath))
    print(f"  ✓ Logged artifact: {filepath.name}")


def load_runs(
    experiment: str,
    verified_only: bool = False,
    exclude_parent_runs: bool = True,
    project_prefix: str = DEFAULT_PROJECT_PREFIX,
) -> pd.DataFrame:
    """Benchmark runs of ``experiment``, newest first.

    Parameters
    ----------
    experiment : str
        Experiment name (prefixed on Databricks).
    verified_only : bool
        Keep only runs whose result matched the reference.
    exclude_parent_runs : bool
        Drop the grouping parent runs, keeping one row per backend run.
    project_prefix : str
        Databricks workspace folder.

    Returns
    -------
    pd.DataFrame
        ``mlflow.search_runs`` frame; empty if the experiment does not exist.
    """
    exp = mlflow.get_experiment_by_name(_full_experiment_name(experiment, project_prefix))
    if exp is None:
        return pd.DataFrame()

    df = mlflow.search_runs(
        experiment_ids=[exp.experiment_id],
        filter_string="metrics.verified = 1" if verified_only else "",
        order_by=["start_time DESC"],
    )

    # Parent runs carry is_parent; children have no such tag
    if exclude_parent_runs and "tags.is_parent" in df.columns:
        df = df[df["tags.is_parent"] != "true"]

    return df
