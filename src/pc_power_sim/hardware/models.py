"""Hardware catalog records.

Records are immutable and normalized on construction: any optional figure
missing from the raw catalog entry is derived once here so the power and
thermal formulas never need fallbacks of their own.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class CatalogError(Exception):
    """Hardware catalog failed validation."""

    def __init__(self, message: str, details: Optional[List[str]] = None):
        super().__init__(message)
        self.details = details or []


def _require(record: Dict[str, Any], fields: Tuple[str, ...], kind: str) -> None:
    missing = [name for name in fields if record.get(name) is None]
    if missing:
        rid = record.get("id", "<no id>")
        raise CatalogError(
            f"{kind} '{rid}' missing fields: {', '.join(missing)}",
            [f"{kind} '{rid}' missing fields: {', '.join(missing)}"],
        )


def _number(record: Dict[str, Any], name: str, default: Optional[float] = None) -> float:
    value = record.get(name)
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        rid = record.get("id", "<no id>")
        raise CatalogError(
            f"'{rid}' field {name} is not numeric: {value!r}",
            [f"'{rid}' field {name} is not numeric: {value!r}"],
        ) from None


@dataclass(frozen=True)
class CpuSpec:
    """Processor power, clock and thermal limits."""

    id: str
    name: str
    tdp: float
    idle_power: float
    light_load_power: float
    gaming_power: float
    rendering_power: float
    stress_power: float
    short_boost_power: float
    short_boost_duration: float  # seconds
    sustained_power: float
    base_clock: float  # GHz
    boost_clock: float
    all_core_turbo: float
    max_safe_temp: float
    throttle_temp: float
    supported_memory: Tuple[str, ...] = ("DDR4",)
    vendor: str = ""
    generation: str = ""
    cores: int = 0
    threads: int = 0
    supported_memory_note: str = ""

    REQUIRED = ("id", "name", "tdp", "idle_power", "gaming_power", "rendering_power", "stress_power")

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "CpuSpec":
        _require(record, cls.REQUIRED, "cpu")
        idle = _number(record, "idle_power")
        gaming = _number(record, "gaming_power")
        stress = _number(record, "stress_power")
        tdp = _number(record, "tdp")
        base = _number(record, "base_clock", 3.0)
        boost = _number(record, "boost_clock", base + 0.5)
        max_safe = _number(record, "max_safe_temp", 90.0)
        return cls(
            id=str(record["id"]),
            name=str(record["name"]),
            tdp=tdp,
            idle_power=idle,
            light_load_power=_number(record, "light_load_power", (idle + gaming) / 2),
            gaming_power=gaming,
            rendering_power=_number(record, "rendering_power"),
            stress_power=stress,
            short_boost_power=_number(record, "short_boost_power", stress),
            short_boost_duration=_number(record, "short_boost_duration", 0.0),
            sustained_power=_number(record, "sustained_power", tdp),
            base_clock=base,
            boost_clock=boost,
            all_core_turbo=_number(record, "all_core_turbo", (base + boost) / 2),
            max_safe_temp=max_safe,
            throttle_temp=_number(record, "throttle_temp", max_safe - 5),
            supported_memory=tuple(record.get("supported_memory") or ("DDR4",)),
            vendor=str(record.get("vendor", "")),
            generation=str(record.get("generation", "")),
            cores=int(_number(record, "cores", 0)),
            threads=int(_number(record, "threads", 0)),
            supported_memory_note=str(record.get("supported_memory_note", "")),
        )

    def supports_memory(self, memory_type: str) -> bool:
        return memory_type in self.supported_memory


@dataclass(frozen=True)
class GpuSpec:
    """Graphics card draw points and transient behavior."""

    id: str
    name: str
    board_power: float
    idle_draw: float
    light_load_draw: float
    gaming_draw: float
    rendering_draw: float
    stress_draw: float
    transient_multiplier: float
    transient_duration: float = 20.0  # microseconds, informational
    base_clock: float = 1500.0  # MHz
    boost_clock: float = 1800.0
    vendor: str = ""
    generation: str = ""
    recommended_psu: Optional[float] = None

    REQUIRED = ("id", "name", "board_power", "idle_draw", "gaming_draw", "rendering_draw", "stress_draw")

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "GpuSpec":
        _require(record, cls.REQUIRED, "gpu")
        idle = _number(record, "idle_draw")
        base = _number(record, "base_clock", 1500.0)
        return cls(
            id=str(record["id"]),
            name=str(record["name"]),
            board_power=_number(record, "board_power"),
            idle_draw=idle,
            light_load_draw=_number(record, "light_load_draw", idle * 3),
            gaming_draw=_number(record, "gaming_draw"),
            rendering_draw=_number(record, "rendering_draw"),
            stress_draw=_number(record, "stress_draw"),
            transient_multiplier=_number(record, "transient_multiplier", 1.5),
            transient_duration=_number(record, "transient_duration", 20.0),
            base_clock=base,
            boost_clock=_number(record, "boost_clock", base + 300),
            vendor=str(record.get("vendor", "")),
            generation=str(record.get("generation", "")),
            recommended_psu=_number(record, "recommended_psu"),
        )


@dataclass(frozen=True)
class MemorySpec:
    """Memory kit power points."""

    id: str
    name: str
    type: str
    capacity: int  # GB
    idle_power: float
    load_power: float
    heat_contribution: float
    sticks: int = 2

    REQUIRED = ("id", "type", "capacity", "idle_power", "load_power")

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "MemorySpec":
        _require(record, cls.REQUIRED, "memory")
        capacity = int(_number(record, "capacity"))
        return cls(
            id=str(record["id"]),
            name=str(record.get("name") or f"{capacity}GB {record['type']}"),
            type=str(record["type"]),
            capacity=capacity,
            idle_power=_number(record, "idle_power"),
            load_power=_number(record, "load_power"),
            heat_contribution=_number(record, "heat_contribution", 0.1),
            sticks=int(_number(record, "sticks", 2)),
        )


@dataclass(frozen=True)
class PsuSpec:
    """Power supply rating and efficiency curve.

    `efficiency` is a tuple of (load_percent, efficiency) pairs sorted by
    load percent.
    """

    id: str
    name: str
    wattage: float
    efficiency: Tuple[Tuple[float, float], ...]
    rating: str = ""
    transient_response: float = 0.8

    REQUIRED = ("id", "name", "wattage", "efficiency")

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "PsuSpec":
        _require(record, cls.REQUIRED, "psu")
        raw_curve = record["efficiency"]
        if not isinstance(raw_curve, dict) or not raw_curve:
            raise CatalogError(
                f"psu '{record['id']}' efficiency must be a non-empty mapping",
                [f"psu '{record['id']}' efficiency must be a non-empty mapping"],
            )
        try:
            curve = tuple(sorted((float(k), float(v)) for k, v in raw_curve.items()))
        except (TypeError, ValueError):
            raise CatalogError(
                f"psu '{record['id']}' efficiency points must be numeric: {raw_curve!r}",
                [f"psu '{record['id']}' efficiency points must be numeric: {raw_curve!r}"],
            ) from None
        return cls(
            id=str(record["id"]),
            name=str(record["name"]),
            wattage=_number(record, "wattage"),
            efficiency=curve,
            rating=str(record.get("rating", "")),
            transient_response=_number(record, "transient_response", 0.8),
        )


@dataclass(frozen=True)
class CoolerSpec:
    """CPU cooler capacity, inertia and acoustics."""

    id: str
    name: str
    heat_dissipation: float  # W at the reference delta-T
    thermal_mass: float
    type: str = ""
    response_time: float = 2.0
    airflow_effectiveness: float = 0.8
    noise_baseline: float = 20.0  # dBA
    noise_max: float = 40.0
    max_recommended_tdp: Optional[float] = None

    REQUIRED = ("id", "name", "heat_dissipation", "thermal_mass")

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "CoolerSpec":
        _require(record, cls.REQUIRED, "cooling")
        return cls(
            id=str(record["id"]),
            name=str(record["name"]),
            heat_dissipation=_number(record, "heat_dissipation"),
            thermal_mass=_number(record, "thermal_mass"),
            type=str(record.get("type", "")),
            response_time=_number(record, "response_time", 2.0),
            airflow_effectiveness=_number(record, "airflow_effectiveness", 0.8),
            noise_baseline=_number(record, "noise_baseline", 20.0),
            noise_max=_number(record, "noise_max", 40.0),
            max_recommended_tdp=_number(record, "max_recommended_tdp"),
        )


class DriveClass(str, Enum):
    """Storage drive classes present in a configuration."""

    NVME = "nvme"
    NVME_GEN4 = "nvme_gen4"
    NVME_GEN5 = "nvme_gen5"
    SATA = "sata"
    HDD = "hdd"


@dataclass(frozen=True)
class StorageSpec:
    """Per-drive power figures for a drive class."""

    id: str
    name: str
    idle: float
    active: float
    burst: float
    heat_factor: float

    REQUIRED = ("id", "idle", "active", "heat_factor")

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "StorageSpec":
        _require(record, cls.REQUIRED, "storage")
        try:
            DriveClass(record["id"])
        except ValueError:
            raise CatalogError(
                f"storage '{record['id']}' is not a known drive class",
                [f"storage '{record['id']}' is not a known drive class"],
            ) from None
        active = _number(record, "active")
        return cls(
            id=str(record["id"]),
            name=str(record.get("name", record["id"])),
            idle=_number(record, "idle"),
            active=active,
            burst=_number(record, "burst", active),
            heat_factor=_number(record, "heat_factor"),
        )


DEFAULT_STORAGE_SPECS: Dict[DriveClass, StorageSpec] = {
    DriveClass.NVME: StorageSpec("nvme", "NVMe SSD (Gen3)", 1.0, 3.5, 7.0, 0.015),
    DriveClass.NVME_GEN4: StorageSpec("nvme_gen4", "NVMe SSD (Gen4)", 1.5, 5.0, 9.0, 0.02),
    DriveClass.NVME_GEN5: StorageSpec("nvme_gen5", "NVMe SSD (Gen5)", 2.2, 7.0, 12.0, 0.025),
    DriveClass.SATA: StorageSpec("sata", "SATA SSD", 0.5, 2.8, 4.0, 0.01),
    DriveClass.HDD: StorageSpec("hdd", "Hard Disk Drive", 4.2, 7.5, 10.0, 0.03),
}


@dataclass(frozen=True)
class HardwareCatalog:
    """Read-only collections of component records."""

    cpus: Tuple[CpuSpec, ...]
    gpus: Tuple[GpuSpec, ...]
    psus: Tuple[PsuSpec, ...]
    cooling: Tuple[CoolerSpec, ...]
    memory: Tuple[MemorySpec, ...]
    storage: Dict[DriveClass, StorageSpec] = field(
        default_factory=lambda: dict(DEFAULT_STORAGE_SPECS)
    )

    def collection(self, category: str) -> Tuple[Any, ...]:
        """Records for a selectable category (cpu, gpu, psu, cooling, memory)."""
        collections = {
            "cpu": self.cpus,
            "gpu": self.gpus,
            "psu": self.psus,
            "cooling": self.cooling,
            "memory": self.memory,
        }
        if category not in collections:
            available = ", ".join(sorted(collections))
            raise ValueError(f"Unknown hardware category '{category}'. Available: {available}")
        return collections[category]

    def find(self, category: str, item_id: str) -> Optional[Any]:
        for item in self.collection(category):
            if item.id == item_id:
                return item
        return None

    def counts(self) -> Dict[str, int]:
        return {
            "cpus": len(self.cpus),
            "gpus": len(self.gpus),
            "psus": len(self.psus),
            "cooling": len(self.cooling),
            "memory": len(self.memory),
        }
