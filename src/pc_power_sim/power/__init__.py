from .boost import BoostState, advance_boost, boost_for_workload_change
from .display import ClockJitter
from .model import (
    CpuPower,
    FixedPower,
    GpuPower,
    MemoryPower,
    PowerResult,
    StoragePower,
    apply_throttling,
    calculate_cpu_power,
    calculate_fixed_power,
    calculate_gpu_power,
    calculate_memory_power,
    calculate_storage_power,
    calculate_total_power,
    fan_power_each,
)
from .psu import PsuResult, calculate_psu_load, calculate_wall_power, get_psu_efficiency, transient_limit

__all__ = [
    "BoostState",
    "ClockJitter",
    "CpuPower",
    "FixedPower",
    "GpuPower",
    "MemoryPower",
    "PowerResult",
    "PsuResult",
    "StoragePower",
    "advance_boost",
    "apply_throttling",
    "boost_for_workload_change",
    "calculate_cpu_power",
    "calculate_fixed_power",
    "calculate_gpu_power",
    "calculate_memory_power",
    "calculate_psu_load",
    "calculate_storage_power",
    "calculate_total_power",
    "calculate_wall_power",
    "fan_power_each",
    "get_psu_efficiency",
    "transient_limit",
]
