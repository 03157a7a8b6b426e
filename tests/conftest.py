"""Pytest configuration and fixtures for heat storage tests."""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


@pytest.fixture
def unit_mesh():
    """Uniform 10-cell mesh on [0, 1]."""
    from meshing.mesh_data import create_uniform_mesh_1d

    return create_uniform_mesh_1d((0.0, 1.0), 10)


@pytest.fixture
def solver_params():
    """Inflow of hot fluid into a cold duct (u=1, k_f=0.01, k_s=0, dt=0.01)."""
    return {
        "time_step": 0.01,
        "fluid_velocity": 1.0,
        "conductivity_fluid": 0.01,
        "conductivity_solid": 0.0,
        "temperature_hot": 1.0,
        "temperature_cold": 0.0,
    }


@pytest.fixture
def config_dict(tmp_path):
    """Minimal valid configuration writing into a temporary directory."""
    return {
        "experiment_name": "test",
        "mesh": {"num_cells": 10, "domain_start": [0.0], "domain_end": [1.0]},
        "physics": {
            "time_step": 0.01,
            "fluid_velocity": 1.0,
            "conductivity_fluid": 0.01,
            "conductivity_solid": 0.01,
            "temperature_hot": 1.0,
            "temperature_cold": 0.0,
        },
        "run": {
            "total_time": 0.5,
            "max_frame_index": 5,
            "max_frame_scalar_index": 10,
            "output_dir": str(tmp_path),
        },
        "mlflow": {"enabled": False},
    }


@pytest.fixture
def rng():
    return np.random.default_rng(42)
