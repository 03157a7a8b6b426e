"""Tests for configuration loading and validation."""

import copy
from pathlib import Path

import pytest
from omegaconf import OmegaConf
from omegaconf.errors import ConfigKeyError, MissingMandatoryValue

from heat_storage.config import SimulationConfig, load_config
from heat_storage.datastructures import HeatStorageParameters, MMSParameters, ScheduleParameters

CONF_DIR = Path(__file__).parent.parent / "conf"


class TestLoadConfig:
    def test_valid_dict(self, config_dict):
        config = load_config(config_dict)
        assert isinstance(config, SimulationConfig)
        assert isinstance(config.physics, HeatStorageParameters)
        assert config.mesh.num_cells == 10
        assert config.physics.exchange_fluid == 0.0
        assert config.physics.precision == "float64"
        assert config.schedule is None
        assert isinstance(config.mms, MMSParameters)
        assert config.mms.enabled is False
        assert config.mlflow.enabled is False

    def test_dictconfig_input(self, config_dict):
        config = load_config(OmegaConf.create(config_dict))
        assert config.run.total_time == 0.5

    def test_schedule(self, config_dict):
        config_dict["schedule"] = {
            "duration_1": 1.0,
            "duration_2": 0.5,
            "duration_3": 1.0,
            "duration_4": 0.5,
        }
        config = load_config(config_dict)
        assert isinstance(config.schedule, ScheduleParameters)
        assert config.schedule.duration_2 == 0.5

    def test_missing_required_key(self, config_dict):
        del config_dict["physics"]["time_step"]
        with pytest.raises(MissingMandatoryValue):
            load_config(config_dict)

    def test_missing_section(self, config_dict):
        del config_dict["run"]
        with pytest.raises(MissingMandatoryValue):
            load_config(config_dict)

    def test_unknown_key(self, config_dict):
        config_dict["physics"]["viscosity"] = 1.0
        with pytest.raises(ConfigKeyError):
            load_config(config_dict)

    @pytest.mark.parametrize(
        "section,key,value",
        [
            ("physics", "time_step", -0.1),
            ("physics", "conductivity_solid", -1.0),
            ("physics", "fluid_velocity", -2.0),
            ("mesh", "num_cells", 0),
            ("run", "total_time", 0.0),
            ("run", "max_frame_index", 0),
        ],
    )
    def test_out_of_range(self, config_dict, section, key, value):
        config_dict[section][key] = value
        with pytest.raises(ValueError):
            load_config(config_dict)

    def test_to_mlflow(self, config_dict):
        config_dict = copy.deepcopy(config_dict)
        config_dict["mms"] = {"enabled": True}
        params = load_config(config_dict).to_mlflow()
        assert params["physics.time_step"] == 0.01
        assert params["mesh.num_cells"] == 10
        assert params["mesh.domain_end"] == 1.0
        assert params["mms.enabled"] is True
        assert not any(key.startswith("schedule.") for key in params)


class TestConfFiles:
    """The shipped YAML matches the schema."""

    def test_default_config(self, tmp_path):
        cfg = OmegaConf.load(CONF_DIR / "config.yaml")
        cfg.pop("hydra")
        cfg.run.output_dir = str(tmp_path)
        cfg.mms.output_dir = str(tmp_path / "mms")
        config = load_config(cfg)
        assert config.schedule is not None
        assert config.mesh.num_cells == 100

    def test_mms_experiment(self, tmp_path):
        cfg = OmegaConf.load(CONF_DIR / "config.yaml")
        cfg.pop("hydra")
        experiment = OmegaConf.load(CONF_DIR / "experiment" / "mms.yaml")
        cfg = OmegaConf.merge(cfg, experiment)
        cfg.run.output_dir = str(tmp_path)
        cfg.mms.output_dir = str(tmp_path / "mms")
        config = load_config(cfg)
        assert config.mms.enabled is True
        assert config.mms.exact_solution == "cos(kx)"
        assert config.mms.step_threshold == pytest.approx(1e-12)
