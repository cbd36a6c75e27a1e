"""Hardware catalog loading, validation and default selection."""

import logging
import math
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from .models import (
    DEFAULT_STORAGE_SPECS,
    CatalogError,
    CoolerSpec,
    CpuSpec,
    DriveClass,
    GpuSpec,
    HardwareCatalog,
    MemorySpec,
    PsuSpec,
    StorageSpec,
)

logger = logging.getLogger(__name__)

PACKAGED_CATALOG = Path(__file__).resolve().parent.parent / "data" / "hardware.yaml"

# dataset name -> record type
REQUIRED_DATASETS = {
    "cpus": CpuSpec,
    "gpus": GpuSpec,
    "psus": PsuSpec,
    "cooling": CoolerSpec,
    "memory": MemorySpec,
}


class InitializationError(Exception):
    """No valid initial state could be established from the catalog."""

    pass


def load_catalog(path: Optional[Path] = None) -> HardwareCatalog:
    """
    Load and validate a hardware catalog YAML file.

    Args:
        path: Catalog file; the packaged catalog is used when None

    Returns:
        Validated, normalized catalog

    Raises:
        CatalogError: If the file is unreadable or any dataset is invalid
    """
    path = Path(path) if path else PACKAGED_CATALOG
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise CatalogError(f"Catalog file not found: {path}") from None
    except yaml.YAMLError as e:
        raise CatalogError(f"Error parsing catalog file {path}: {e}") from e

    catalog = build_catalog(data or {})
    logger.info(f"Catalog loaded from {path}: {catalog.counts()}")
    return catalog


def build_catalog(data: Dict[str, Any]) -> HardwareCatalog:
    """
    Validate raw catalog datasets and build normalized records.

    Every problem found is collected before raising, so one error lists
    all broken datasets and records.
    """
    errors: List[str] = []

    for name in REQUIRED_DATASETS:
        dataset = data.get(name)
        if dataset is None:
            errors.append(f"Missing required dataset: {name}")
        elif not isinstance(dataset, list):
            errors.append(f"Dataset {name} is not a list")
        elif not dataset:
            errors.append(f"Dataset {name} is empty")

    if errors:
        raise CatalogError("Hardware data validation failed", errors)

    records: Dict[str, Tuple[Any, ...]] = {}
    for name, spec_cls in REQUIRED_DATASETS.items():
        parsed = []
        seen = set()
        for index, raw in enumerate(data[name]):
            if not isinstance(raw, dict):
                errors.append(f"Dataset {name} item {index} is not a mapping")
                continue
            try:
                record = spec_cls.from_record(raw)
            except CatalogError as e:
                errors.extend(f"Dataset {name} item {index}: {d}" for d in e.details or [str(e)])
                continue
            if record.id in seen:
                logger.warning(f"Duplicate {name} id '{record.id}', keeping first entry")
                continue
            seen.add(record.id)
            parsed.append(record)
        records[name] = tuple(parsed)

    storage = dict(DEFAULT_STORAGE_SPECS)
    storage_data = data.get("storage") or []
    if not isinstance(storage_data, list):
        errors.append("Dataset storage is not a list")
        storage_data = []
    for index, raw in enumerate(storage_data):
        if not isinstance(raw, dict):
            errors.append(f"Dataset storage item {index} is not a mapping")
            continue
        try:
            spec = StorageSpec.from_record(raw)
        except CatalogError as e:
            errors.extend(f"Dataset storage item {index}: {d}" for d in e.details or [str(e)])
            continue
        storage[DriveClass(spec.id)] = spec

    if errors:
        raise CatalogError("Hardware data validation failed", errors)

    return HardwareCatalog(storage=storage, **records)


def check_memory_compatibility(
    cpu: Optional[CpuSpec], memory: Optional[MemorySpec]
) -> Tuple[bool, str]:
    """
    Check whether a memory kit works with a CPU's memory controller.

    Returns:
        (compatible, reason). Missing hardware is treated as compatible.
    """
    if cpu is None or memory is None:
        return True, ""

    if not cpu.supports_memory(memory.type):
        supported = " or ".join(cpu.supported_memory)
        return False, (
            f"{cpu.name} ({cpu.generation}) only supports {supported}. "
            f"{memory.name} is {memory.type}."
        )
    return True, ""


def find_compatible_memory(
    catalog: HardwareCatalog, cpu: CpuSpec
) -> Optional[MemorySpec]:
    """First memory kit in the catalog the CPU supports."""
    for memory in catalog.memory:
        if cpu.supports_memory(memory.type):
            return memory
    return None


def _middle(items: List[Any]) -> Optional[Any]:
    return items[len(items) // 2] if items else None


def find_defaults(
    catalog: HardwareCatalog, preferred: Optional[Dict[str, str]] = None
) -> Dict[str, Any]:
    """
    Pick a sensible initial component for every category.

    Preferred ids win when present; otherwise mid-range parts are chosen and
    the PSU and cooler are sized from the chosen CPU and GPU.

    Raises:
        InitializationError: If a category has no usable component
    """
    preferred = preferred or {}

    # CPU: preferred id, else a mid-tier part (65-125W TDP)
    cpu = catalog.find("cpu", preferred["cpu"]) if "cpu" in preferred else None
    if cpu is None:
        mid_tier = [c for c in catalog.cpus if 65 <= c.tdp <= 125]
        cpu = _middle(mid_tier) or _middle(list(catalog.cpus))
    if cpu is None:
        raise InitializationError("CPU dataset is empty or invalid")
    logger.info(f"Default CPU: {cpu.name} ({cpu.tdp:.0f}W)")

    # GPU: preferred id, else mid-tier (150-250W), else median board power
    gpu = catalog.find("gpu", preferred["gpu"]) if "gpu" in preferred else None
    if gpu is None:
        mid_tier = [g for g in catalog.gpus if 150 <= g.board_power <= 250]
        gpu = _middle(mid_tier)
    if gpu is None:
        valid = sorted((g for g in catalog.gpus if g.board_power > 0), key=lambda g: g.board_power)
        gpu = _middle(valid)
    if gpu is None:
        raise InitializationError("GPU dataset is empty or invalid")
    logger.info(f"Default GPU: {gpu.name} ({gpu.board_power:.0f}W)")

    # PSU: CPU + GPU + 150W overhead, rounded up to the next 100W
    recommended = math.ceil((cpu.tdp + gpu.board_power + 150) / 100) * 100
    psu = catalog.find("psu", preferred["psu"]) if "psu" in preferred else None
    if psu is None:
        psu = next(
            (p for p in catalog.psus if p.wattage >= recommended and "Gold" in p.rating),
            None,
        )
    if psu is None:
        psu = next((p for p in catalog.psus if p.wattage >= recommended), None)
    if psu is None:
        valid = [p for p in catalog.psus if p.wattage > 0]
        psu = max(valid, key=lambda p: p.wattage) if valid else None
    if psu is None:
        raise InitializationError("PSU dataset is empty or invalid")
    logger.info(f"Default PSU: {psu.name} (recommended {recommended}W, selected {psu.wattage:.0f}W)")

    # Cooling: preferred id, else adequate for 1.2x CPU TDP
    cooling = catalog.find("cooling", preferred["cooling"]) if "cooling" in preferred else None
    if cooling is None:
        adequate = [c for c in catalog.cooling if c.heat_dissipation >= cpu.tdp * 1.2]
        cooling = _middle(adequate) or _middle(list(catalog.cooling))
    if cooling is None:
        raise InitializationError("Cooling dataset is empty or invalid")
    logger.info(f"Default cooling: {cooling.name} ({cooling.heat_dissipation:.0f}W capacity)")

    # Memory: compatible with the CPU, 16GB first
    compatible = [m for m in catalog.memory if cpu.supports_memory(m.type)]
    memory = catalog.find("memory", preferred["memory"]) if "memory" in preferred else None
    if memory is not None and not cpu.supports_memory(memory.type):
        memory = None
    if memory is None:
        memory = next((m for m in compatible if m.capacity == 16), None)
    if memory is None:
        memory = _middle(compatible) or (catalog.memory[0] if catalog.memory else None)
    if memory is None:
        raise InitializationError("Memory dataset is empty or invalid")
    logger.info(f"Default memory: {memory.capacity}GB {memory.type}")

    return {"cpu": cpu, "gpu": gpu, "psu": psu, "cooling": cooling, "memory": memory}
