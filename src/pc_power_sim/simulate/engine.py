"""
Per-tick computation.

Pure functions from the previous simulation state to the next results:
boost window -> power (with prior throttle and fan speed) -> PSU ->
thermal -> warnings. The scheduler in `simulation` decides when to call
them and commits the results.
"""

import logging
from dataclasses import dataclass, replace
from typing import Dict, Optional, Tuple

from ..diagnostics import SystemWarning, generate_warnings
from ..hardware.models import DriveClass, StorageSpec
from ..power.boost import BoostState, advance_boost
from ..power.model import PowerResult, calculate_total_power
from ..power.psu import PsuResult, calculate_wall_power
from ..system import SimulationConfig
from ..thermal.model import (
    DEFAULT_MAX_CPU_TEMP,
    ThermalInputs,
    ThermalState,
    calculate_effective_cooling,
    update_thermal_state,
)
from .state import SimulationState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TickResult:
    power: PowerResult
    psu: PsuResult
    thermal: ThermalState
    boost: BoostState
    warnings: Tuple[SystemWarning, ...]
    effective_cooling: Dict[str, float]


def thermal_inputs(
    config: SimulationConfig, power: PowerResult, psu: PsuResult, delta_time: float
) -> ThermalInputs:
    cpu = config.cpu
    return ThermalInputs(
        cpu_power=power.cpu,
        gpu_power=power.gpu,
        memory_heat=power.memory_heat,
        storage_heat=power.storage_heat,
        psu_heat_waste=psu.heat_waste,
        cooling=config.cooling,
        fan_count=config.fan_count,
        airflow_quality=config.airflow_quality,
        max_cpu_temp=cpu.max_safe_temp if cpu else DEFAULT_MAX_CPU_TEMP,
        throttle_temp=cpu.throttle_temp if cpu else None,
        delta_time=delta_time,
    )


def compute_tick(
    state: SimulationState,
    delta_time: float,
    storage_specs: Optional[Dict[DriveClass, StorageSpec]] = None,
) -> TickResult:
    """
    Advance boost, power, PSU and thermal by `delta_time` simulated seconds.

    Args:
        state: Last committed simulation state
        delta_time: Simulated seconds since the last tick (already clamped and scaled)
        storage_specs: Drive class figures from the catalog

    Returns:
        TickResult to merge into the state
    """
    config = state.config
    last_cpu_power = state.power.cpu if state.power else 0.0

    boost = advance_boost(state.boost, config.workload, config.cpu, delta_time, last_cpu_power)
    power = calculate_total_power(
        config,
        boost,
        throttle_percent=state.thermal.throttle_percent,
        fan_speed=state.thermal.fan_speed,
        storage_specs=storage_specs,
    )
    # Next tick smooths from this tick's draw
    boost = replace(boost, current_power=power.cpu)

    psu = calculate_wall_power(power.sustained_total, config.psu, power.transient_peak)
    thermal = update_thermal_state(state.thermal, thermal_inputs(config, power, psu, delta_time))
    warnings = generate_warnings(config, power, thermal, psu)

    logger.debug(
        f"tick dt={delta_time:.3f}s power={power.sustained_total:.1f}W "
        f"cpu_temp={thermal.cpu_temp:.1f}°C throttle={thermal.throttle_percent:.1f}%"
    )

    return TickResult(
        power=power,
        psu=psu,
        thermal=thermal,
        boost=boost,
        warnings=tuple(warnings),
        effective_cooling=calculate_effective_cooling(
            config.cooling, config.fan_count, config.airflow_quality
        ),
    )


def compute_immediate(
    state: SimulationState,
    storage_specs: Optional[Dict[DriveClass, StorageSpec]] = None,
) -> TickResult:
    """
    Zero-time recomputation after a configuration change.

    Power, PSU and warnings are refreshed; of the thermal state only the
    equilibrium-facing fields move, temperatures and throttle do not.
    """
    config = state.config
    power = calculate_total_power(
        config,
        state.boost,
        throttle_percent=state.thermal.throttle_percent,
        fan_speed=state.thermal.fan_speed,
        storage_specs=storage_specs,
    )
    boost = replace(state.boost, current_power=power.cpu)
    psu = calculate_wall_power(power.sustained_total, config.psu, power.transient_peak)

    projected = update_thermal_state(state.thermal, thermal_inputs(config, power, psu, 0.0))
    thermal = replace(
        state.thermal,
        equilibrium_temp=projected.equilibrium_temp,
        cooling_capacity=projected.cooling_capacity,
        thermal_headroom=projected.thermal_headroom,
        explanation=projected.explanation,
    )
    warnings = generate_warnings(config, power, thermal, psu)

    return TickResult(
        power=power,
        psu=psu,
        thermal=thermal,
        boost=boost,
        warnings=tuple(warnings),
        effective_cooling=calculate_effective_cooling(
            config.cooling, config.fan_count, config.airflow_quality
        ),
    )
