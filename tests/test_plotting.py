"""Smoke tests for convergence and field plots."""

import matplotlib

matplotlib.use("Agg")

import pandas as pd  # noqa: E402

from heat_storage.config import load_config  # noqa: E402
from heat_storage.plotting import plot_fields, plot_mms_convergence  # noqa: E402
from heat_storage.simulation import HeatStorageSimulation  # noqa: E402


def test_mms_convergence_plot(tmp_path):
    stats = pd.DataFrame(
        {
            "num_cells": [10, 20, 40],
            "error": [0.04, 0.02, 0.01],
            "diff": [0.0, 0.02, 0.01],
            "dt": [0.002] * 3,
            "num_steps": [3000] * 3,
            "step_diff": [1e-10] * 3,
        }
    )
    path = plot_mms_convergence(stats, tmp_path / "convergence.png")
    assert path.exists()


def test_empty_statistics(tmp_path):
    assert plot_mms_convergence(pd.DataFrame(), tmp_path / "convergence.png") is None


def test_field_plot(config_dict, tmp_path):
    HeatStorageSimulation(load_config(config_dict)).run()
    path = plot_fields(tmp_path / "test.field.dat", tmp_path / "fields.png", max_frames=3)
    assert path.exists()
