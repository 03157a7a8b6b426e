"""MLflow I/O utilities for experiment tracking."""

import logging
import os
from pathlib import Path
from typing import Dict, Iterable, List, Tuple

import mlflow
from mlflow.entities import Metric

log = logging.getLogger(__name__)


def setup_mlflow_tracking(mode: str = "local", tracking_uri: str = "./mlruns") -> str:
    """Configure MLflow tracking and return the tracking URI in use.

    Parameters
    ----------
    mode : str
        "local" (file store at ``tracking_uri``) or "remote" (``tracking_uri``
        is a server URL, credentials come from the environment / ``.env``).
    tracking_uri : str
        Tracking location.
    """
    if mode == "local":
        os.environ.pop("MLFLOW_TRACKING_URI", None)
        mlruns_uri = Path(tracking_uri).resolve().as_uri()
        mlflow.set_tracking_uri(mlruns_uri)
        log.info(f"Using local file-based MLflow tracking backend: {mlruns_uri}")
        return mlruns_uri
    if mode == "remote":
        mlflow.set_tracking_uri(tracking_uri)
        log.info(f"Using remote MLflow tracking server: {tracking_uri}")
        return tracking_uri

    log.warning(f"Unknown MLflow mode '{mode}'. Using existing URI: {mlflow.get_tracking_uri()}")
    return mlflow.get_tracking_uri()


def setup_experiment(experiment_name: str, project_prefix: str = "") -> str:
    """Select (creating if needed) the MLflow experiment and return its full name."""
    if project_prefix and not experiment_name.startswith("/"):
        experiment_name = f"{project_prefix}/{experiment_name}"
    try:
        mlflow.set_experiment(experiment_name)
    except Exception as exc:
        # A deleted experiment with the same name blocks re-creation
        experiment_name = f"{experiment_name}-restored"
        log.warning(f"MLflow set_experiment failed ({exc}); using '{experiment_name}'")
        mlflow.set_experiment(experiment_name)
    return experiment_name


def to_metric_batch(series: Dict[str, List[Tuple[int, float]]], timestamp: int) -> List[Metric]:
    """Convert ``{name: [(step, value), ...]}`` into MLflow Metric entities."""
    return [
        Metric(key=name, value=float(value), timestamp=timestamp, step=step)
        for name, values in series.items()
        for step, value in values
    ]


def log_artifacts(paths: Iterable, artifact_path: str = None):
    """Log existing files as run artifacts, skipping missing ones."""
    for path in paths:
        path = Path(path)
        if path.exists():
            mlflow.log_artifact(str(path), artifact_path=artifact_path)
        else:
            log.warning(f"Artifact not found, skipping: {path}")
