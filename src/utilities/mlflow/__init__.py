"""MLflow utilities for experiment tracking and artifact management."""

from .io import log_artifacts, setup_experiment, setup_mlflow_tracking, to_metric_batch

__all__ = [
    "setup_mlflow_tracking",
    "setup_experiment",
    "to_metric_batch",
    "log_artifacts",
]
