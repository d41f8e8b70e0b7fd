"""MLflow utilities for benchmark tracking.

Provides:
- Context manager for MLflow run orchestration
- Granular logging functions for parameters, metrics, time-series, and artifacts
- Run fetching and filtering
"""

from .io import (
    setup_mlflow_tracking,
    start_mlflow_run_context,
    log_parameters,
    log_metrics_dict,
    log_timeseries_metrics,
    log_artifact_file,
    load_runs,
)

__all__ = [
    "setup_mlflow_tracking",
    "start_mlflow_run_context",
    "log_parameters",
    "log_metrics_dict",
    "log_timeseries_metrics",
    "log_artifact_file",
    "load_runs",
]
