"""
Component power model.

Maps hardware specs + workload + transient state to instantaneous power
draw, clock estimates and heat contributions. Every function accepts a
missing (None) component and returns a zero result instead of raising.

Transient peak:
    transient = sustained - gpu_sustained + gpu_sustained_adjusted * transient_multiplier
Only the GPU spike is modeled; other components are assumed not to spike
at the same instant.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional

from ..hardware.models import DEFAULT_STORAGE_SPECS, CpuSpec, DriveClass, GpuSpec, MemorySpec, StorageSpec
from ..system import SimulationConfig, StorageConfig
from ..workloads import IntensityTier, LoadType, Workload
from .boost import BoostState

# Exponential easing rate applied to displayed CPU power per tick
CPU_POWER_SMOOTHING = 0.15

# GPU leakage grows with ambient above 25°C
GPU_LEAKAGE_PER_DEGREE = 0.003
# GPUs shed power less aggressively than CPUs when throttled
GPU_THROTTLE_FACTOR = 0.4
GPU_CLOCK_THROTTLE_FACTOR = 0.5
GPU_IDLE_CLOCK = 210.0  # MHz, 2D clocks

MOTHERBOARD_POWER = {
    IntensityTier.IDLE: 18.0,  # chipset, VRMs at idle
    IntensityTier.LIGHT: 28.0,
    IntensityTier.MODERATE: 38.0,
    IntensityTier.HEAVY: 45.0,  # VRM losses under load
}

PERIPHERAL_POWER = {
    "usb": 2.5,
    "audio": 1.5,
    "ethernet": 1.2,
    "other": 2.8,  # SATA controller, misc
}

FAN_POWER_MIN = 1.0  # W per fan at the bottom of the PWM range
FAN_POWER_MAX = 4.8  # W per fan at 100%
FAN_POWER_EXPONENT = 2.5
DEFAULT_FAN_SPEED = 30.0

# Older DDR generations draw more for the same activity
MEMORY_GENERATION_MULTIPLIER = {"DDR3": 1.3, "DDR4": 1.0, "DDR5": 1.0}
MEMORY_GENERATION_EFFICIENCY = {"DDR3": 0.65, "DDR4": 0.85, "DDR5": 1.0}

STORAGE_HEAVY_ACTIVITY_SCALE = 1.4


@dataclass(frozen=True)
class CpuPower:
    current: float
    target: float
    is_boost: bool
    clock_speed: float  # GHz
    clock_mode: str
    load_type: Optional[LoadType] = None


@dataclass(frozen=True)
class GpuPower:
    sustained: float
    transient: float
    clock_speed: float  # MHz
    clock_mode: str
    base: float = 0.0
    leakage_added: float = 0.0
    load_type: Optional[LoadType] = None


@dataclass(frozen=True)
class MemoryPower:
    power: float
    heat: float
    activity: float = 0.0
    efficiency: float = 0.0


@dataclass(frozen=True)
class StoragePower:
    power: float
    heat: float
    breakdown: Dict[DriveClass, float] = field(default_factory=dict)


@dataclass(frozen=True)
class FixedPower:
    motherboard: float
    peripherals: float
    rgb: float
    fans: float
    fan_power_each: float
    intensity: IntensityTier

    @property
    def total(self) -> float:
        return self.motherboard + self.peripherals + self.rgb + self.fans


@dataclass(frozen=True)
class PowerResult:
    """One tick's power snapshot."""

    cpu: float
    cpu_target: float
    cpu_is_boost: bool
    cpu_clock: float
    cpu_mode: str
    gpu: float
    gpu_transient: float
    gpu_clock: float
    gpu_mode: str
    memory: float
    memory_heat: float
    storage: float
    storage_heat: float
    motherboard: float
    peripherals: float
    rgb: float
    fans: float
    sustained_total: float
    transient_peak: float

    @property
    def components(self) -> Dict[str, float]:
        return {
            "cpu": self.cpu,
            "gpu": self.gpu,
            "memory": self.memory,
            "storage": self.storage,
            "motherboard": self.motherboard,
            "peripherals": self.peripherals,
            "rgb": self.rgb,
            "fans": self.fans,
        }


def apply_throttling(power: float, throttle_percent: float) -> float:
    """Scale power down by a throttle percentage."""
    return power * (1 - throttle_percent / 100)


def _cpu_target(cpu: CpuSpec, load_type: LoadType, boost_state: BoostState):
    if load_type in (LoadType.RENDERING, LoadType.STRESS):
        if boost_state.boost_time_remaining > 0 and cpu.short_boost_duration > 0:
            return cpu.short_boost_power, True
        if load_type is LoadType.RENDERING:
            return cpu.rendering_power, False
        return cpu.stress_power, False

    return {
        LoadType.IDLE: cpu.idle_power,
        LoadType.LIGHT: cpu.light_load_power,
        LoadType.GAMING: cpu.gaming_power,
    }[load_type], False


def calculate_cpu_power(
    cpu: Optional[CpuSpec],
    workload: Workload,
    boost_state: Optional[BoostState] = None,
    throttle_percent: float = 0.0,
) -> CpuPower:
    """
    CPU draw for the workload, eased toward the target from the last value.

    The boost window (if open) replaces rendering/stress draw with the
    short-boost power. Throttling scales the target and the clock.
    """
    if cpu is None:
        return CpuPower(current=0.0, target=0.0, is_boost=False, clock_speed=0.0, clock_mode="None")

    boost_state = boost_state or BoostState()
    load_type = workload.profile.cpu_load_type
    target, is_boost = _cpu_target(cpu, load_type, boost_state)

    if throttle_percent > 0:
        target = apply_throttling(target, throttle_percent)

    current = boost_state.current_power or target
    smoothed = current + (target - current) * CPU_POWER_SMOOTHING

    if load_type is LoadType.IDLE:
        clock, mode = cpu.base_clock * 0.4, "Idle (C-states)"
    elif load_type is LoadType.LIGHT:
        clock, mode = cpu.base_clock * 0.7, "Light (1-2 cores)"
    elif load_type is LoadType.GAMING:
        clock, mode = cpu.all_core_turbo * 0.95, "Gaming (mixed cores)"
    elif is_boost:
        clock, mode = cpu.boost_clock, "Boost (all cores)"
    else:
        clock, mode = cpu.all_core_turbo, "Sustained (all cores)"

    if throttle_percent > 0:
        clock = apply_throttling(clock, throttle_percent)
        mode = f"Throttled (-{throttle_percent:.0f}%)"

    return CpuPower(
        current=max(cpu.idle_power, smoothed),
        target=target,
        is_boost=is_boost,
        clock_speed=clock,
        clock_mode=mode,
        load_type=load_type,
    )


def calculate_gpu_power(
    gpu: Optional[GpuSpec],
    workload: Workload,
    ambient_temp: float = 25.0,
    throttle_percent: float = 0.0,
) -> GpuPower:
    """GPU sustained draw and transient spike for the workload."""
    if gpu is None:
        return GpuPower(sustained=0.0, transient=0.0, clock_speed=0.0, clock_mode="None")

    load_type = workload.profile.gpu_load_type
    base = {
        LoadType.IDLE: gpu.idle_draw,
        LoadType.LIGHT: gpu.light_load_draw,
        LoadType.GAMING: gpu.gaming_draw,
        LoadType.RENDERING: gpu.rendering_draw,
        LoadType.STRESS: gpu.stress_draw,
    }[load_type]

    # Higher ambient -> hotter silicon -> more leakage current
    leakage = 1 + max(0.0, (ambient_temp - 25) * GPU_LEAKAGE_PER_DEGREE)
    adjusted = base * leakage

    if throttle_percent > 0:
        adjusted = adjusted * (1 - throttle_percent / 100 * GPU_THROTTLE_FACTOR)

    transient = adjusted * gpu.transient_multiplier if load_type is not LoadType.IDLE else adjusted

    clock, mode = {
        LoadType.IDLE: (GPU_IDLE_CLOCK, "Idle (2D)"),
        LoadType.LIGHT: (gpu.base_clock * 0.5, "Light load"),
        LoadType.GAMING: (gpu.boost_clock, "Gaming (Boost)"),
        LoadType.RENDERING: (gpu.boost_clock * 0.95, "Compute load"),
        LoadType.STRESS: (gpu.boost_clock, "Max Boost"),
    }[load_type]

    if throttle_percent > 0:
        clock = clock * (1 - throttle_percent / 100 * GPU_CLOCK_THROTTLE_FACTOR)

    return GpuPower(
        sustained=max(gpu.idle_draw, adjusted),
        transient=transient,
        clock_speed=clock,
        clock_mode=mode,
        base=base,
        leakage_added=adjusted - base,
        load_type=load_type,
    )


def calculate_memory_power(memory: Optional[MemorySpec], workload: Workload) -> MemoryPower:
    """Memory draw interpolated between idle and load by workload activity."""
    if memory is None:
        return MemoryPower(power=0.0, heat=0.0)

    activity = workload.profile.memory_activity
    base = memory.idle_power + (memory.load_power - memory.idle_power) * activity
    power = base * MEMORY_GENERATION_MULTIPLIER.get(memory.type, 1.0)
    heat = memory.heat_contribution * activity * (memory.sticks / 2)

    return MemoryPower(
        power=power,
        heat=heat,
        activity=activity,
        efficiency=MEMORY_GENERATION_EFFICIENCY.get(memory.type, 0.85),
    )


def calculate_storage_power(
    storage: StorageConfig,
    workload: Workload,
    specs: Optional[Dict[DriveClass, StorageSpec]] = None,
) -> StoragePower:
    """Sum drive draw over every installed drive class."""
    specs = specs or DEFAULT_STORAGE_SPECS
    activity = workload.profile.storage_activity
    if workload.profile.storage_heavy:
        activity = min(activity * STORAGE_HEAVY_ACTIVITY_SCALE, 1.0)

    total_power = 0.0
    total_heat = 0.0
    breakdown = {}
    for drive_class, count in storage.counts().items():
        if count <= 0:
            continue
        spec = specs.get(drive_class, DEFAULT_STORAGE_SPECS[drive_class])
        # Bursts are transient and excluded from sustained draw
        power = spec.idle * count + (spec.active - spec.idle) * activity * count
        total_power += power
        total_heat += spec.heat_factor * activity * count
        breakdown[drive_class] = power

    return StoragePower(power=total_power, heat=total_heat, breakdown=breakdown)


def fan_power_each(fan_speed: float) -> float:
    """Per-fan draw; fan power rises super-linearly with speed."""
    ratio = max(0.0, min(fan_speed, 100.0)) / 100
    return FAN_POWER_MIN + (FAN_POWER_MAX - FAN_POWER_MIN) * ratio**FAN_POWER_EXPONENT


def calculate_fixed_power(
    config: SimulationConfig, fan_speed: float = DEFAULT_FAN_SPEED
) -> FixedPower:
    """Motherboard, peripheral, RGB and fan draw."""
    intensity = config.workload.profile.intensity
    each = fan_power_each(fan_speed)
    return FixedPower(
        motherboard=MOTHERBOARD_POWER[intensity],
        peripherals=sum(PERIPHERAL_POWER.values()),
        rgb=config.rgb_level.watts,
        fans=each * config.fan_count,
        fan_power_each=each,
        intensity=intensity,
    )


def calculate_total_power(
    config: SimulationConfig,
    boost_state: Optional[BoostState] = None,
    throttle_percent: float = 0.0,
    fan_speed: float = DEFAULT_FAN_SPEED,
    storage_specs: Optional[Dict[DriveClass, StorageSpec]] = None,
) -> PowerResult:
    """
    Aggregate system power for one tick.

    Args:
        config: Hardware selection and environment
        boost_state: CPU boost window and last smoothed CPU power
        throttle_percent: Current thermal throttle (0-95)
        fan_speed: Current fan speed percent, drives fan power
        storage_specs: Per-class drive figures from the catalog

    Returns:
        PowerResult with per-component draw, sustained total and transient peak
    """
    workload = config.workload
    cpu = calculate_cpu_power(config.cpu, workload, boost_state, throttle_percent)
    gpu = calculate_gpu_power(config.gpu, workload, config.ambient_temp, throttle_percent)
    memory = calculate_memory_power(config.memory, workload)
    storage = calculate_storage_power(config.storage, workload, storage_specs)
    fixed = calculate_fixed_power(config, fan_speed)

    sustained = cpu.current + gpu.sustained + memory.power + storage.power + fixed.total
    transient = sustained - gpu.sustained + gpu.transient

    return PowerResult(
        cpu=cpu.current,
        cpu_target=cpu.target,
        cpu_is_boost=cpu.is_boost,
        cpu_clock=cpu.clock_speed,
        cpu_mode=cpu.clock_mode,
        gpu=gpu.sustained,
        gpu_transient=gpu.transient,
        gpu_clock=gpu.clock_speed,
        gpu_mode=gpu.clock_mode,
        memory=memory.power,
        memory_heat=memory.heat,
        storage=storage.power,
        storage_heat=storage.heat,
        motherboard=fixed.motherboard,
        peripherals=fixed.peripherals,
        rgb=fixed.rgb,
        fans=fixed.fans,
        sustained_total=sustained,
        transient_peak=transient,
    )
