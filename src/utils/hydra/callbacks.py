"""Hydra callbacks for MLflow integration.

``MLflowLogCallback`` attaches the Hydra job log to the benchmark's MLflow
run when the job ends, so the printed timings sit next to the metrics.

Registered in ``Experiments/hydra-conf/config.yaml``:

.. code-block:: yaml

    hydra:
      callbacks:
        mlflow_log:
          _target_: utils.hydra.callbacks.MLflowLogCallback
          artifact_path: logs
"""

import logging
from pathlib import Path
from typing import Any

import mlflow
from mlflow.exceptions import MlflowException
from hydra.core.hydra_config import HydraConfig
from hydra.core.utils import JobReturn, JobStatus
from hydra.experimental.callback import Callback
from omegaconf import DictConfig

log = logging.getLogger(__name__)


class MLflowLogCallback(Callback):
    """Upload the Hydra job log to the MLflow run started by that job.

    The job function returns its run id (``run_benchmark.main``). In a
    ``--multirun`` sweep the callback outlives each job, so it never falls
    back to a process-wide "last run": a job that failed, or whose run was
    logged by a subprocess, uploads nothing.

    Parameters
    ----------
    artifact_path : str
        MLflow artifact subdirectory for log files (default: "logs").
    """

    def __init__(self, artifact_path: str = "logs") -> None:
        self.artifact_path = artifact_path

    def on_job_end(
        self, config: DictConfig, job_return: JobReturn, **kwargs: Any
    ) -> None:
        if job_return.status != JobStatus.COMPLETED:
            log.warning("Benchmark job failed, job log not uploaded to MLflow")
            return
        run_id = job_return.return_value
        if not run_id:
            log.debug("Job returned no MLflow run, skipping log upload")
            return

        hc = HydraConfig.get()
        log_file = Path(hc.runtime.output_dir) / f"{hc.job.name}.log"
        if not log_file.exists():
            log.debug(f"Job log not found: {log_file}")
            return

        try:
            mlflow.MlflowClient().log_artifact(run_id, str(log_file), artifact_path=self.artifact_path)
            log.info(f"Uploaded job log to MLflow: {log_file.name}")
        except MlflowException as e:
            # The benchmark result is already logged; a missing log is not fatal
            log.warning(f"Failed to upload job log to MLflow: {e}")
