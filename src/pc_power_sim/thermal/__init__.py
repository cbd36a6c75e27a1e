from .explain import ThermalNarrative, classify, explain
from .model import (
    HeatBreakdown,
    ThermalInputs,
    ThermalState,
    calculate_cooling_capacity,
    calculate_effective_cooling,
    calculate_equilibrium_temp,
    calculate_fan_speed,
    calculate_heat_generated,
    calculate_noise,
    calculate_time_to_equilibrium,
    create_thermal_state,
    step_throttle,
    update_thermal_state,
    with_ambient,
)

__all__ = [
    "HeatBreakdown",
    "ThermalInputs",
    "ThermalNarrative",
    "ThermalState",
    "calculate_cooling_capacity",
    "calculate_effective_cooling",
    "calculate_equilibrium_temp",
    "calculate_fan_speed",
    "calculate_heat_generated",
    "calculate_noise",
    "calculate_time_to_equilibrium",
    "classify",
    "create_thermal_state",
    "explain",
    "step_throttle",
    "update_thermal_state",
    "with_ambient",
]
