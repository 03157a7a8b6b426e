"""Data structures for solver configuration and results.

This module defines the configuration and result data structures
for the heat storage solver and its verification harness.

Structure:
- Parameters: Input configuration (logged to MLflow at start)
- Layers / LayersData: Double-buffered cell fields
- Metrics: Output results (logged to MLflow at end)
- RefinementLevel: One stage of the MMS convergence study
"""

from dataclasses import dataclass, asdict, field
from enum import Enum
from typing import Any, List, Optional

import numpy as np
import pandas as pd


# ========================================================
# Layers (Double-Buffered Fields)
# ========================================================


class Layers(Enum):
    """Time level selector for double-buffered fields."""

    TIME_CURR = "time_curr"
    TIME_PREV = "time_prev"


class LayersData:
    """Pair of cell fields at the start (time_prev) and end (time_curr) of a step."""

    def __init__(self, time_curr: np.ndarray, time_prev: np.ndarray):
        self.time_curr = time_curr
        self.time_prev = time_prev

    @classmethod
    def allocate(cls, n_cells: int, value: float = 0.0, dtype=np.float64):
        """Allocate both layers filled with a constant."""
        return cls(
            time_curr=np.full(n_cells, value, dtype=dtype),
            time_prev=np.full(n_cells, value, dtype=dtype),
        )

    def get(self, layer: Layers) -> np.ndarray:
        if layer is Layers.TIME_CURR:
            return self.time_curr
        if layer is Layers.TIME_PREV:
            return self.time_prev
        raise ValueError(f"Unknown layer: {layer}")

    def swap(self):
        """Exchange buffers (zero-copy): the old current becomes the write target."""
        self.time_curr, self.time_prev = self.time_prev, self.time_curr


# ========================================================
# Parameters (Input Configuration)
# ========================================================


@dataclass
class HeatStorageParameters:
    """Heat storage solver parameters."""

    time_step: float
    fluid_velocity: float
    conductivity_fluid: float
    conductivity_solid: float
    temperature_hot: float
    temperature_cold: float
    exchange_fluid: float = 0.0
    exchange_solid: float = 0.0
    precision: str = "float64"

    def __post_init__(self):
        if self.time_step <= 0:
            raise ValueError(f"time_step must be positive, got {self.time_step}")
        if self.fluid_velocity < 0:
            raise ValueError(
                f"fluid_velocity must be non-negative (upwind from the left), got {self.fluid_velocity}"
            )
        if self.conductivity_fluid < 0 or self.conductivity_solid < 0:
            raise ValueError(
                f"Conductivities must be non-negative, got "
                f"fluid={self.conductivity_fluid}, solid={self.conductivity_solid}"
            )

    def to_dataframe(self):
        return pd.DataFrame([asdict(self)])

    def to_mlflow(self) -> dict:
        return asdict(self)


@dataclass
class MeshParameters:
    """Uniform 1D mesh over [domain_start, domain_end]."""

    num_cells: int
    domain_start: List[float] = field(default_factory=lambda: [0.0])
    domain_end: List[float] = field(default_factory=lambda: [1.0])

    def __post_init__(self):
        if self.num_cells < 1:
            raise ValueError(f"num_cells must be positive, got {self.num_cells}")


@dataclass
class RunParameters:
    """Time loop and output cadence of a simulation run."""

    total_time: float
    max_frame_index: int = 10
    max_frame_scalar_index: int = 100
    no_output: bool = False
    no_mesh_output: bool = False
    output_dir: str = "."
    filename_field: Optional[str] = None
    filename_scalar: Optional[str] = None

    def __post_init__(self):
        if self.total_time <= 0:
            raise ValueError(f"total_time must be positive, got {self.total_time}")
        if self.max_frame_index < 1 or self.max_frame_scalar_index < 1:
            raise ValueError(
                f"Frame counts must be positive, got max_frame_index={self.max_frame_index}, "
                f"max_frame_scalar_index={self.max_frame_scalar_index}"
            )


@dataclass
class ScheduleParameters:
    """Durations of the charging / idle / discharging / idle phases."""

    duration_1: float
    duration_2: float
    duration_3: float
    duration_4: float


@dataclass
class MMSParameters:
    """Manufactured solution convergence study."""

    enabled: bool = False
    exact_solution: str = "cos(kx)"
    fluid_velocity: float = 1.0
    alpha: float = 0.001
    wavenumber: float = 1.0
    T_left: float = 1.0
    mesh_initial: int = 10
    num_stages: int = 3
    factor: int = 2
    domain_length: float = 1.0
    num_steps: int = 3000
    time_step: float = 0.002
    step_threshold: float = 1e-12
    output_dir: str = "."
    field_name_prefix: str = "field_T_fluid_"

    def __post_init__(self):
        if self.mesh_initial < 1 or self.num_stages < 1 or self.factor < 1:
            raise ValueError(
                f"mesh_initial, num_stages and factor must be positive, got "
                f"{self.mesh_initial}, {self.num_stages}, {self.factor}"
            )
        if self.num_steps < 0:
            raise ValueError(f"num_steps must be non-negative, got {self.num_steps}")

    def to_mlflow(self) -> dict:
        return {f"mms.{k}": v for k, v in asdict(self).items()}


# ========================================================
# Metrics (Output Results)
# ========================================================


@dataclass
class SimulationMetrics:
    """Simulation metrics - output results of a driver run."""

    steps: int = 0
    final_time: float = 0.0
    wall_time_seconds: float = 0.0
    min_fluid_temperature: float = 0.0
    max_fluid_temperature: float = 0.0
    min_solid_temperature: float = 0.0
    max_solid_temperature: float = 0.0

    def to_dataframe(self):
        return pd.DataFrame([asdict(self)])

    def to_mlflow(self) -> dict:
        return {k: float(v) for k, v in asdict(self).items()}


# ========================================================
# MMS Refinement Levels
# ========================================================


@dataclass
class RefinementLevel:
    """One stage of the MMS study: mesh, solver, fields and diagnostics."""

    num_cells: int
    mesh: Any
    solver: Any
    fluid_temperature: np.ndarray
    exact_fluid_temperature: np.ndarray
    error: float
    diff_prev: float
    time_step: float
    num_steps: int
    step_diff: float

    def to_row(self) -> dict:
        """Statistics row, columns in output order."""
        return {
            "num_cells": self.num_cells,
            "error": float(self.error),
            "diff": float(self.diff_prev),
            "dt": float(self.time_step),
            "num_steps": self.num_steps,
            "step_diff": float(self.step_diff),
        }
