from pathlib import Path

import pytest

from pc_power_sim.config import EngineSettings, load_config
from pc_power_sim.system import RgbLevel
from pc_power_sim.workloads import Workload

REPO_CONFIG = Path(__file__).resolve().parents[1] / "config.yaml"


def test_defaults_without_config(monkeypatch):
    monkeypatch.delenv("PC_SIM_CONFIG", raising=False)
    monkeypatch.delenv("PC_SIM_LOG_LEVEL", raising=False)
    settings = load_config()
    assert settings == EngineSettings()
    assert settings.defaults.workload is Workload.GAMING
    assert settings.catalog_path is None


def test_repo_config_loads(monkeypatch):
    monkeypatch.delenv("PC_SIM_LOG_LEVEL", raising=False)
    settings = load_config(REPO_CONFIG)
    assert settings.tick_interval == pytest.approx(0.1)
    assert settings.max_history == 300
    assert settings.defaults.rgb_level is RgbLevel.MODERATE
    assert settings.defaults.storage.nvme == 1
    assert settings.defaults.preferred["cpu"] == "i9-12900k"


def test_config_from_env(tmp_path, monkeypatch):
    path = tmp_path / "sim.yaml"
    path.write_text(
        "simulation:\n  speed: 40\n  max_history: 10\n"
        "defaults:\n  workload: rendering\n  fan_count: 2\n"
        "catalog:\n  path: parts.yaml\n"
    )
    monkeypatch.setenv("PC_SIM_CONFIG", str(path))
    settings = load_config()
    assert settings.speed == 10.0
    assert settings.max_history == 10
    assert settings.defaults.workload is Workload.RENDERING
    assert settings.defaults.fan_count == 2
    assert settings.catalog_path == Path("parts.yaml")


def test_log_level_env_override(monkeypatch):
    monkeypatch.setenv("PC_SIM_LOG_LEVEL", "debug")
    settings = EngineSettings.from_config_dict({"logging": {"level": "WARNING"}})
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize(
    "raw",
    [
        {"simulation": {"tick_interval": 0}},
        {"simulation": {"max_history": 0}},
        {"simulation": {"speed": "fast"}},
        {"defaults": {"fan_count": -1}},
        {"defaults": {"airflow_quality": 1.5}},
        {"defaults": {"workload": "mining"}},
        {"defaults": {"rgb_level": "disco"}},
    ],
)
def test_invalid_settings_rejected(raw):
    with pytest.raises(ValueError):
        EngineSettings.from_config_dict(raw)


def test_missing_config_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.yaml")
