"""
Heat Storage Simulator - Unified entry point for simulation and MMS verification.

Usage:
    uv run python main.py
    uv run python main.py mesh.num_cells=200 run.total_time=2.0
    uv run python main.py +experiment=mms
    uv run python main.py -m mesh.num_cells=50,100,200
"""

import logging
import sys
import time
from pathlib import Path

import hydra
import mlflow
from dotenv import load_dotenv
from omegaconf import DictConfig, OmegaConf

load_dotenv()
sys.path.insert(0, str(Path(__file__).parent / "src"))

from heat_storage import HeatStorageSimulation, MMSTester, SimulationConfig, load_config  # noqa: E402
from utilities.mlflow import (  # noqa: E402
    log_artifacts,
    setup_experiment,
    setup_mlflow_tracking,
    to_metric_batch,
)

log = logging.getLogger(__name__)


def setup_mlflow(config: SimulationConfig) -> str:
    """Setup MLflow tracking and return experiment name."""
    setup_mlflow_tracking(config.mlflow.mode, config.mlflow.tracking_uri)
    return setup_experiment(config.experiment_name, config.mlflow.project_prefix)


def run_simulation(config: SimulationConfig):
    """Run the configured simulation. Returns (metrics, output files)."""
    simulation = HeatStorageSimulation(config)
    metrics = simulation.run()
    return metrics, simulation.output_files


def run_mms(config: SimulationConfig) -> MMSTester:
    """Run the manufactured solution study configured under ``mms``."""
    tester = MMSTester(config.mms, precision=config.physics.precision)
    tester.run()
    log.info(f"MMS statistics:\n{tester.to_dataframe().to_string(index=False)}")
    log.info(f"MMS fitted order: {tester.fitted_order():.3f}")
    return tester


def generate_plots(config: SimulationConfig, output_files, tester=None):
    """Generate plots next to the output files. Returns plot paths."""
    from heat_storage.plotting import plot_fields, plot_mms_convergence

    plots = []
    output_dir = Path(config.run.output_dir)
    field_files = [f for f in output_files if str(f).endswith(".field.dat")]
    for field_file in field_files:
        plots.append(plot_fields(field_file, output_dir / "fields.pdf"))
    if tester is not None:
        plots.append(
            plot_mms_convergence(tester.to_dataframe(), Path(config.mms.output_dir) / "mms_convergence.pdf")
        )
    return [p for p in plots if p is not None]


def run_tracked(config: SimulationConfig, cfg: DictConfig):
    """Run simulation (and MMS study) inside an MLflow run."""
    with mlflow.start_run(run_name=f"{config.experiment_name}_N{config.mesh.num_cells}") as run:
        mlflow.log_params(config.to_mlflow())
        mlflow.log_dict(OmegaConf.to_container(cfg), "config.yaml")

        metrics, output_files = run_simulation(config)
        mlflow.log_metrics(metrics.to_mlflow())
        log_artifacts(output_files, artifact_path="output")

        tester = None
        if config.mms.enabled:
            tester = run_mms(config)
            batch = to_metric_batch(
                {f"mms.{k}": v for k, v in tester.to_mlflow_batch().items()},
                timestamp=int(time.time() * 1000),
            )
            mlflow.tracking.MlflowClient().log_batch(run.info.run_id, metrics=batch)
            mlflow.log_metric("mms.fitted_order", tester.fitted_order())
            log_artifacts([tester.statistics_path], artifact_path="mms")

        if config.plot:
            log_artifacts(generate_plots(config, output_files, tester), artifact_path="plots")

        return run.info.run_id


@hydra.main(config_path="conf", config_name="config", version_base=None)
def main(cfg: DictConfig) -> None:
    """Main entry point."""
    config = load_config(cfg)
    log.info(f"Experiment: {config.experiment_name}, N={config.mesh.num_cells}")

    if config.mlflow.enabled:
        log.info(f"MLflow experiment: {setup_mlflow(config)}")
        run_id = run_tracked(config, cfg)
        log.info(f"MLflow run: {run_id[:8]}")
        return

    _, output_files = run_simulation(config)
    tester = run_mms(config) if config.mms.enabled else None
    if config.plot:
        generate_plots(config, output_files, tester)


if __name__ == "__main__":
    main()
