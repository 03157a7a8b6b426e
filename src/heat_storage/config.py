"""Typed configuration schema for the heat storage simulator.

Hydra composes YAML under ``conf/``; :func:`load_config` merges the result
into the dataclass schema below so that missing and unknown keys are
rejected by OmegaConf and value ranges by the dataclasses themselves.
"""

from dataclasses import dataclass, field
from typing import Optional

from omegaconf import DictConfig, OmegaConf

from .datastructures import (
    HeatStorageParameters,
    MeshParameters,
    MMSParameters,
    RunParameters,
    ScheduleParameters,
)


@dataclass
class MLflowParameters:
    """MLflow tracking settings."""

    enabled: bool = True
    tracking_uri: str = "./mlruns"
    mode: str = "local"
    project_prefix: str = ""


@dataclass
class SimulationConfig:
    """Top-level configuration of one invocation."""

    experiment_name: str
    mesh: MeshParameters
    physics: HeatStorageParameters
    run: RunParameters
    schedule: Optional[ScheduleParameters] = None
    mms: MMSParameters = field(default_factory=MMSParameters)
    mlflow: MLflowParameters = field(default_factory=MLflowParameters)
    plot: bool = False

    def to_mlflow(self) -> dict:
        """Flatten simulation parameters into ``section.key`` MLflow params."""
        params = {"experiment_name": self.experiment_name}
        params.update({f"physics.{k}": v for k, v in self.physics.to_mlflow().items()})
        params["mesh.num_cells"] = self.mesh.num_cells
        params["mesh.domain_start"] = self.mesh.domain_start[0]
        params["mesh.domain_end"] = self.mesh.domain_end[0]
        params["run.total_time"] = self.run.total_time
        if self.schedule is not None:
            params.update(
                {
                    "schedule.duration_1": self.schedule.duration_1,
                    "schedule.duration_2": self.schedule.duration_2,
                    "schedule.duration_3": self.schedule.duration_3,
                    "schedule.duration_4": self.schedule.duration_4,
                }
            )
        if self.mms.enabled:
            params.update(self.mms.to_mlflow())
        return params


def load_config(cfg) -> SimulationConfig:
    """Validate a composed config (DictConfig or dict) against the schema.

    Raises
    ------
    omegaconf.errors.MissingMandatoryValue
        If a required key is absent.
    omegaconf.errors.ConfigKeyError
        If an unknown key is present.
    ValueError
        If a value is out of range.
    """
    if not isinstance(cfg, DictConfig):
        cfg = OmegaConf.create(cfg)
    merged = OmegaConf.merge(OmegaConf.structured(SimulationConfig), cfg)
    return OmegaConf.to_object(merged)
