"""User-chosen system configuration: hardware selection plus environment knobs."""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Optional

from .hardware.models import CoolerSpec, CpuSpec, DriveClass, GpuSpec, MemorySpec, PsuSpec
from .workloads import Workload


class RgbLevel(str, Enum):
    """Case lighting, in watts."""

    NONE = "none"
    MINIMAL = "minimal"
    MODERATE = "moderate"
    EXTENSIVE = "extensive"

    @property
    def watts(self) -> float:
        return {"none": 0.0, "minimal": 2.0, "moderate": 5.0, "extensive": 12.0}[self.value]


@dataclass(frozen=True)
class StorageConfig:
    """Number of installed drives per class."""

    nvme: int = 1
    nvme_gen4: int = 0
    nvme_gen5: int = 0
    sata: int = 0
    hdd: int = 0

    def counts(self) -> Dict[DriveClass, int]:
        return {dc: getattr(self, dc.value) for dc in DriveClass}

    @classmethod
    def from_dict(cls, counts: Dict[str, Any]) -> "StorageConfig":
        unknown = set(counts) - {dc.value for dc in DriveClass}
        if unknown:
            raise ValueError(f"Unknown drive classes: {sorted(unknown)}")
        return cls(**{k: max(0, int(v)) for k, v in counts.items()})


@dataclass(frozen=True)
class SimulationConfig:
    """
    Current hardware selection and environment.

    Replaced wholesale whenever the user changes a selection or knob.
    """

    cpu: Optional[CpuSpec] = None
    gpu: Optional[GpuSpec] = None
    memory: Optional[MemorySpec] = None
    psu: Optional[PsuSpec] = None
    cooling: Optional[CoolerSpec] = None
    workload: Workload = Workload.GAMING
    fan_count: int = 4
    ambient_temp: float = 25.0
    airflow_quality: float = 0.85  # 0 = restricted, 1 = open bench
    storage: StorageConfig = field(default_factory=StorageConfig)
    rgb_level: RgbLevel = RgbLevel.MODERATE

    def with_changes(self, **changes: Any) -> "SimulationConfig":
        """Return a copy with knob values coerced and clamped."""
        if "workload" in changes:
            changes["workload"] = Workload.from_id(changes["workload"])
        if "rgb_level" in changes:
            changes["rgb_level"] = RgbLevel(changes["rgb_level"])
        if "storage" in changes and isinstance(changes["storage"], dict):
            changes["storage"] = StorageConfig.from_dict(changes["storage"])
        if "fan_count" in changes:
            changes["fan_count"] = max(0, int(changes["fan_count"]))
        if "airflow_quality" in changes:
            changes["airflow_quality"] = min(1.0, max(0.0, float(changes["airflow_quality"])))
        if "ambient_temp" in changes:
            changes["ambient_temp"] = float(changes["ambient_temp"])
        return replace(self, **changes)
