"""Engine settings loaded from config.yaml."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .system import RgbLevel, StorageConfig
from .workloads import Workload

logger = logging.getLogger(__name__)

CONFIG_ENV = "PC_SIM_CONFIG"
LOG_LEVEL_ENV = "PC_SIM_LOG_LEVEL"

MIN_SPEED = 0.25
MAX_SPEED = 10.0


def clamp_speed(speed: float) -> float:
    return max(MIN_SPEED, min(MAX_SPEED, float(speed)))


@dataclass(frozen=True)
class DefaultsSettings:
    """Initial environment knobs and preferred hardware ids."""

    workload: Workload = Workload.GAMING
    fan_count: int = 4
    ambient_temp: float = 25.0
    airflow_quality: float = 0.85
    rgb_level: RgbLevel = RgbLevel.MODERATE
    storage: StorageConfig = field(default_factory=StorageConfig)
    preferred: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class EngineSettings:
    tick_interval: float = 0.1  # seconds between ticks
    history_interval: float = 1.0  # seconds between history samples
    max_history: int = 300
    max_delta_time: float = 2.0  # clamp after stalls
    speed: float = 1.0
    defaults: DefaultsSettings = field(default_factory=DefaultsSettings)
    catalog_path: Optional[Path] = None
    log_level: str = "INFO"

    @classmethod
    def from_config_dict(cls, config: Optional[Dict[str, Any]]) -> "EngineSettings":
        """Parse EngineSettings from a config.yaml dictionary.

        Missing sections fall back to defaults.

        Raises:
            ValueError: If a value is out of range or of the wrong kind
        """
        config = config or {}
        sim = config.get("simulation") or {}
        defaults_cfg = config.get("defaults") or {}
        catalog_cfg = config.get("catalog") or {}
        logging_cfg = config.get("logging") or {}

        try:
            tick_interval = float(sim.get("tick_interval", 0.1))
            history_interval = float(sim.get("history_interval", 1.0))
            max_history = int(sim.get("max_history", 300))
            max_delta_time = float(sim.get("max_delta_time", 2.0))
            speed = float(sim.get("speed", 1.0))
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid simulation settings: {e}") from e

        if tick_interval <= 0 or history_interval <= 0 or max_delta_time <= 0:
            raise ValueError(
                "simulation.tick_interval, history_interval and max_delta_time must be positive"
            )
        if max_history < 1:
            raise ValueError(f"simulation.max_history must be at least 1, got {max_history}")

        fan_count = int(defaults_cfg.get("fan_count", 4))
        airflow = float(defaults_cfg.get("airflow_quality", 0.85))
        if fan_count < 0:
            raise ValueError(f"defaults.fan_count must be non-negative, got {fan_count}")
        if not 0 <= airflow <= 1:
            raise ValueError(f"defaults.airflow_quality must be within [0, 1], got {airflow}")

        defaults = DefaultsSettings(
            workload=Workload.from_id(defaults_cfg.get("workload", "gaming")),
            fan_count=fan_count,
            ambient_temp=float(defaults_cfg.get("ambient_temp", 25.0)),
            airflow_quality=airflow,
            rgb_level=RgbLevel(defaults_cfg.get("rgb_level", "moderate")),
            storage=StorageConfig.from_dict(defaults_cfg.get("storage") or {}),
            preferred={k: str(v) for k, v in (defaults_cfg.get("preferred") or {}).items() if v},
        )

        catalog_path = catalog_cfg.get("path")
        return cls(
            tick_interval=tick_interval,
            history_interval=history_interval,
            max_history=max_history,
            max_delta_time=max_delta_time,
            speed=clamp_speed(speed),
            defaults=defaults,
            catalog_path=Path(catalog_path) if catalog_path else None,
            log_level=str(os.environ.get(LOG_LEVEL_ENV) or logging_cfg.get("level", "INFO")).upper(),
        )


def load_config(path: Optional[Path] = None) -> EngineSettings:
    """
    Load settings from YAML.

    Args:
        path: Config file; falls back to $PC_SIM_CONFIG, then built-in defaults

    Raises:
        FileNotFoundError: If an explicitly given file does not exist
        yaml.YAMLError: If the file is not valid YAML
        ValueError: If settings are out of range
    """
    path = path or os.environ.get(CONFIG_ENV)
    if not path:
        logger.info("No config file given, using built-in defaults")
        return EngineSettings.from_config_dict({})

    with open(path, "r") as f:
        raw = yaml.safe_load(f)
    logger.info(f"Loaded config from {path}")
    return EngineSettings.from_config_dict(raw)
