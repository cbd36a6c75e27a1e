"""
Single-node thermal model with asymptotic approach to equilibrium.

The CPU is treated as one thermal mass coupled to ambient through the
cooler. Each tick:
- Heat in = CPU + GPU power + scaled memory/storage/PSU waste
- Conductivity G = effective cooling capacity / reference delta-T (60°C)
- T_eq = T_amb + Q_cpu / G + case offset
- T_{k+1} = T_k + (T_eq - T_k) * k_approach / (C * tau) * dt

The case is a second, much slower node heated by system heat plus a share
of CPU/GPU heat and cooled by exhaust airflow.
"""

import math
from dataclasses import dataclass, replace
from typing import Dict, Optional

from ..hardware.models import CoolerSpec
from .explain import explain

CPU_PACKAGE_MASS = 0.03  # IHS/package, responds quickly
MIN_FAN_SPEED = 20.0
CASE_THERMAL_MASS = 500.0
APPROACH_RATE = 0.05
REFERENCE_DELTA_T = 60.0  # °C, cooler design point

# Heat share multipliers for the smaller contributors
MEMORY_HEAT_SCALE = 40.0
STORAGE_HEAT_SCALE = 30.0

FAN_RESPONSE_RATE = 0.8  # per simulated second
FAN_IDLE_OFFSET = 12.0  # fans ramp above ambient + this
FAN_DANGER_ZONE = 8.0  # aggressive ramp within this of max safe
FAN_CURVE_EXPONENT = 1.3

MIN_COOLING_CAPACITY = 50.0
NO_COOLER_CAPACITY = 100.0
CASE_PENALTY_START = 35.0  # °C
CASE_PENALTY_PER_DEGREE = 0.015
CASE_TEMP_OFFSET_SHARE = 0.3

THROTTLE_PER_DEGREE = 4.0
MAX_THROTTLE = 95.0
THROTTLE_RAMP = 0.15
THROTTLE_DECAY = 0.92
THROTTLE_HYSTERESIS = 3.0
THROTTLE_SNAP = 0.5

CASE_LEAK_SHARE = 0.15  # share of CPU+GPU heat that ends up in the case
CASE_EXHAUST_PER_FAN = 12.0
MAX_CASE_RISE = 25.0

DEFAULT_MAX_CPU_TEMP = 90.0


@dataclass(frozen=True)
class ThermalState:
    """Thermal snapshot. `cpu_temp >= ambient_temp` always holds."""

    cpu_temp: float
    case_temp: float
    ambient_temp: float
    gpu_temp: float
    fan_speed: float = MIN_FAN_SPEED
    noise_level: float = 20.0
    throttle_percent: float = 0.0
    heat_generated: float = 0.0
    heat_dissipated: float = 0.0
    equilibrium_temp: float = 25.0
    cooling_capacity: float = NO_COOLER_CAPACITY
    thermal_headroom: float = 100.0
    time_to_equilibrium: float = 0.0
    explanation: str = ""

    @property
    def is_throttling(self) -> bool:
        return self.throttle_percent > 0


@dataclass(frozen=True)
class HeatBreakdown:
    cpu: float
    gpu: float
    memory: float
    storage: float
    psu: float

    @property
    def system(self) -> float:
        return self.memory + self.storage + self.psu

    @property
    def total(self) -> float:
        return self.cpu + self.gpu + self.system


@dataclass(frozen=True)
class ThermalInputs:
    """Per-tick inputs to the thermal update."""

    cpu_power: float
    gpu_power: float
    memory_heat: float
    storage_heat: float
    psu_heat_waste: float
    cooling: Optional[CoolerSpec]
    fan_count: int
    airflow_quality: float
    max_cpu_temp: float = DEFAULT_MAX_CPU_TEMP
    throttle_temp: Optional[float] = None
    delta_time: float = 0.1


def create_thermal_state(ambient_temp: float = 25.0) -> ThermalState:
    """Fresh state seeded at ambient with minimum fan speed and no throttling."""
    return ThermalState(
        cpu_temp=ambient_temp,
        case_temp=ambient_temp + 2,
        ambient_temp=ambient_temp,
        gpu_temp=ambient_temp,
        equilibrium_temp=ambient_temp,
    )


def with_ambient(state: ThermalState, ambient_temp: float) -> ThermalState:
    """Change ambient, lifting any temperature that would fall below it."""
    return replace(
        state,
        ambient_temp=ambient_temp,
        cpu_temp=max(state.cpu_temp, ambient_temp),
        case_temp=max(state.case_temp, ambient_temp),
        gpu_temp=max(state.gpu_temp, ambient_temp),
    )


def calculate_heat_generated(
    cpu_power: float,
    gpu_power: float,
    memory_heat: float = 0.0,
    storage_heat: float = 0.0,
    psu_heat_waste: float = 0.0,
) -> HeatBreakdown:
    """Nearly all electrical power ends up as heat."""
    return HeatBreakdown(
        cpu=cpu_power,
        gpu=gpu_power,
        memory=(memory_heat or 0.0) * MEMORY_HEAT_SCALE,
        storage=(storage_heat or 0.0) * STORAGE_HEAT_SCALE,
        psu=psu_heat_waste or 0.0,
    )


def cooling_factors(
    cooling: CoolerSpec,
    fan_count: int,
    fan_speed: float,
    airflow_quality: float,
    case_temp: float,
) -> Dict[str, float]:
    """Multipliers applied to the cooler's rated dissipation."""
    fan_ratio = max(0.0, fan_speed) / 100
    return {
        # Diminishing returns at high fan speed
        "fan_efficiency": 0.15 + 0.85 * fan_ratio**1.1,
        # Poor airflow recirculates hot air
        "airflow_penalty": 1 - (1 - airflow_quality) * 0.45,
        "fan_bonus": 1 + math.log2(max(1, fan_count)) * 0.06,
        "case_temp_penalty": (
            1 - (case_temp - CASE_PENALTY_START) * CASE_PENALTY_PER_DEGREE
            if case_temp > CASE_PENALTY_START
            else 1.0
        ),
        "cooler_effectiveness": cooling.airflow_effectiveness or 0.8,
    }


def calculate_cooling_capacity(
    cooling: Optional[CoolerSpec],
    fan_count: int,
    fan_speed: float,
    airflow_quality: float,
    case_temp: float,
) -> float:
    """
    Effective heat the cooler can move at the reference delta-T.

    Args:
        cooling: Selected cooler
        fan_count: Number of case fans
        fan_speed: Current fan speed percent
        airflow_quality: Case airflow in [0, 1]
        case_temp: Current case air temperature

    Returns:
        Capacity in watts, never below 50 W with a cooler, 100 W without
    """
    if cooling is None:
        return NO_COOLER_CAPACITY

    factors = cooling_factors(cooling, fan_count, fan_speed, airflow_quality, case_temp)
    capacity = cooling.heat_dissipation * math.prod(factors.values())
    return max(MIN_COOLING_CAPACITY, capacity)


def calculate_effective_cooling(
    cooling: Optional[CoolerSpec], fan_count: int, airflow_quality: float
) -> Dict[str, float]:
    """Static cooling summary for display, independent of fan speed and case temperature."""
    if cooling is None:
        return {"capacity": NO_COOLER_CAPACITY, "effectiveness_multiplier": 1.0}

    airflow_penalty = 1 - (1 - airflow_quality) * 0.45
    fan_bonus = 1 + math.log2(max(1, fan_count)) * 0.08
    return {
        "capacity": cooling.heat_dissipation * airflow_penalty * fan_bonus * cooling.airflow_effectiveness,
        "base_capacity": cooling.heat_dissipation,
        "effectiveness_multiplier": airflow_penalty * fan_bonus,
        "airflow_penalty": airflow_penalty,
        "fan_bonus": fan_bonus,
        "cooler_effectiveness": cooling.airflow_effectiveness,
    }


def calculate_equilibrium_temp(
    cpu_heat: float,
    cooling: Optional[CoolerSpec],
    cooling_capacity: float,
    ambient_temp: float,
    case_temp: float,
) -> float:
    """Temperature where heat in equals heat out for the current load."""
    if cooling is None or cpu_heat <= 0:
        return ambient_temp

    conductivity = cooling_capacity / REFERENCE_DELTA_T
    # Elevated case temperature raises the floor
    case_offset = max(0.0, (case_temp - ambient_temp) * CASE_TEMP_OFFSET_SHARE)
    return ambient_temp + cpu_heat / conductivity + case_offset


def calculate_fan_speed(cpu_temp: float, max_safe_temp: float, ambient_temp: float) -> float:
    """Target fan speed percent from the fan curve."""
    idle_temp = ambient_temp + FAN_IDLE_OFFSET
    load_temp = max_safe_temp - FAN_DANGER_ZONE

    if cpu_temp <= idle_temp:
        return MIN_FAN_SPEED
    if cpu_temp >= max_safe_temp:
        return 100.0
    if cpu_temp >= load_temp:
        overshoot = (cpu_temp - load_temp) / (max_safe_temp - load_temp)
        return 85 + overshoot * 15

    span = load_temp - idle_temp
    if span <= 0:
        return 85.0
    position = (cpu_temp - idle_temp) / span
    return MIN_FAN_SPEED + position**FAN_CURVE_EXPONENT * (85 - MIN_FAN_SPEED)


def step_throttle(throttle_percent: float, cpu_temp: float, throttle_temp: float) -> float:
    """
    Advance throttle by one tick with hysteresis.

    Above the threshold throttle eases toward 4% per degree over (max 95%).
    It only releases once 3°C below the threshold, decaying multiplicatively
    and snapping to 0 below 0.5%.
    """
    if cpu_temp > throttle_temp:
        target = min(MAX_THROTTLE, (cpu_temp - throttle_temp) * THROTTLE_PER_DEGREE)
        return throttle_percent + (target - throttle_percent) * THROTTLE_RAMP
    if cpu_temp < throttle_temp - THROTTLE_HYSTERESIS and throttle_percent > 0:
        released = throttle_percent * THROTTLE_DECAY
        return 0.0 if released < THROTTLE_SNAP else released
    return throttle_percent


def calculate_noise(cooling: Optional[CoolerSpec], fan_speed: float, fan_count: int) -> float:
    """Noise in dBA; each doubling of case fans adds about 2 dB."""
    if cooling is None:
        return 30.0
    ratio = max(0.0, fan_speed) / 100
    cooler_noise = cooling.noise_baseline + (cooling.noise_max - cooling.noise_baseline) * ratio**1.8
    return cooler_noise + 2 * math.log2(max(1, fan_count))


def calculate_time_to_equilibrium(current_temp: float, equilibrium_temp: float, thermal_mass: float) -> float:
    """Simulated seconds to cover ~95% of the gap (three time constants)."""
    if abs(equilibrium_temp - current_temp) < 1:
        return 0.0
    return thermal_mass * 200 * 3


def update_thermal_state(state: ThermalState, inputs: ThermalInputs) -> ThermalState:
    """
    Advance the thermal state by `inputs.delta_time` simulated seconds.

    Args:
        state: Thermal state from the previous tick
        inputs: Heat sources, cooling configuration and elapsed time

    Returns:
        New thermal state
    """
    ambient = state.ambient_temp
    dt = max(0.0, inputs.delta_time)
    cooling = inputs.cooling

    heat = calculate_heat_generated(
        inputs.cpu_power,
        inputs.gpu_power,
        inputs.memory_heat,
        inputs.storage_heat,
        inputs.psu_heat_waste,
    )

    # Fans follow the curve with inertia
    target_fan = calculate_fan_speed(state.cpu_temp, inputs.max_cpu_temp, ambient)
    fan_rate = min(1.0, FAN_RESPONSE_RATE * dt)
    fan_speed = state.fan_speed + (target_fan - state.fan_speed) * fan_rate

    capacity = calculate_cooling_capacity(
        cooling, inputs.fan_count, fan_speed, inputs.airflow_quality, state.case_temp
    )
    equilibrium = calculate_equilibrium_temp(heat.cpu, cooling, capacity, ambient, state.case_temp)

    # Thermal mass combines CPU package and cooler
    cooler_mass = cooling.thermal_mass if cooling else 0.1
    response_time = (cooling.response_time or 2.0) if cooling else 1.0
    total_mass = CPU_PACKAGE_MASS + cooler_mass
    approach = min(1.0, APPROACH_RATE / (total_mass * response_time) * dt)
    cpu_temp = max(ambient, state.cpu_temp + (equilibrium - state.cpu_temp) * approach)

    heat_dissipated = capacity / REFERENCE_DELTA_T * (cpu_temp - ambient)

    throttle_temp = inputs.throttle_temp or (inputs.max_cpu_temp - 5)
    throttle = step_throttle(state.throttle_percent, cpu_temp, throttle_temp)

    internal_heat = heat.system + (heat.cpu + heat.gpu) * CASE_LEAK_SHARE
    # Exhaust removes at most the whole excess over ambient per step
    exhaust_rate = min(
        1.0, inputs.fan_count * CASE_EXHAUST_PER_FAN * inputs.airflow_quality / CASE_THERMAL_MASS * dt
    )
    case_temp = (
        state.case_temp
        + internal_heat / CASE_THERMAL_MASS * dt
        - (state.case_temp - ambient) * exhaust_rate
    )
    case_temp = max(ambient, min(case_temp, ambient + MAX_CASE_RISE))

    headroom = max(0.0, inputs.max_cpu_temp - equilibrium)

    return replace(
        state,
        cpu_temp=cpu_temp,
        gpu_temp=ambient + inputs.gpu_power / 4,  # simplified GPU model
        case_temp=case_temp,
        fan_speed=fan_speed,
        throttle_percent=throttle,
        heat_generated=heat.cpu,
        heat_dissipated=heat_dissipated,
        equilibrium_temp=equilibrium,
        cooling_capacity=capacity,
        thermal_headroom=headroom,
        time_to_equilibrium=calculate_time_to_equilibrium(cpu_temp, equilibrium, total_mass),
        noise_level=calculate_noise(cooling, fan_speed, inputs.fan_count),
        explanation=explain(
            cooling,
            cpu_temp,
            equilibrium,
            inputs.max_cpu_temp,
            throttle_temp,
            throttle,
            heat.cpu,
            capacity,
            fan_speed,
        ),
    )
