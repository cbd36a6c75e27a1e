"""
Diagnostics: per-tick warnings and the configuration readiness report.

Warnings are regenerated from scratch every tick from the latest power,
PSU and thermal results. Each check is independent and silently skips
when the hardware it needs is not selected.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional

from .hardware.catalog import check_memory_compatibility
from .power.model import PowerResult
from .power.psu import PsuResult
from .system import SimulationConfig
from .thermal.model import DEFAULT_MAX_CPU_TEMP, ThermalState

PSU_LOAD_WARNING = 80.0
PSU_LOAD_DANGER = 95.0
TRANSIENT_WARNING = 90.0
TRANSIENT_MARGIN = 10.0  # points above sustained load
TEMPERATURE_WARNING_RATIO = 0.85
COOLING_MARGINAL_RATIO = 0.9
COOLING_MARGINAL_HEADROOM = 8.0  # °C

# Readiness budget: TDP + board power + this overhead
READINESS_OVERHEAD = 150.0


class Severity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    DANGER = "danger"

    @property
    def priority(self) -> int:
        return {"danger": 3, "warning": 2, "info": 1}[self.value]


class WarningType(str, Enum):
    PSU_LOAD_HIGH = "psu_load_high"
    PSU_LOAD_CRITICAL = "psu_load_critical"
    PSU_TRANSIENT = "psu_transient"
    THERMAL_THROTTLE = "thermal_throttle"
    THERMAL_WARNING = "thermal_warning"
    COOLING_INSUFFICIENT = "cooling_insufficient"
    COOLING_MARGINAL = "cooling_marginal"
    MEMORY_INCOMPATIBLE = "memory_incompatible"
    EQUILIBRIUM_EXCEEDED = "equilibrium_exceeded"


@dataclass(frozen=True)
class SystemWarning:
    type: WarningType
    severity: Severity
    title: str
    message: str
    value: float = 0.0


def _memory_warning(config: SimulationConfig) -> Optional[SystemWarning]:
    cpu, memory = config.cpu, config.memory
    compatible, _ = check_memory_compatibility(cpu, memory)
    if compatible:
        return None
    supported = " or ".join(cpu.supported_memory)
    message = (
        f"{cpu.name} ({cpu.generation}) only supports {supported} memory. The selected "
        f"{memory.name} is {memory.type}, which is physically and electrically incompatible "
        f"with this platform."
    )
    if cpu.supported_memory_note:
        message += f" {cpu.supported_memory_note}"
    return SystemWarning(
        WarningType.MEMORY_INCOMPATIBLE, Severity.DANGER, "Memory Incompatibility", message, 0.0
    )


def _equilibrium_warning(
    config: SimulationConfig, thermal: ThermalState, max_temp: float
) -> Optional[SystemWarning]:
    if config.cooling is None or thermal.equilibrium_temp <= max_temp:
        return None
    over = thermal.equilibrium_temp - max_temp
    return SystemWarning(
        WarningType.EQUILIBRIUM_EXCEEDED,
        Severity.DANGER,
        "Cooling Capacity Exceeded",
        f"Projected equilibrium temperature ({thermal.equilibrium_temp:.1f}°C) exceeds CPU "
        f"thermal limit ({max_temp:.0f}°C) by {over:.0f}°C. The {config.cooling.name} cannot "
        f"adequately dissipate {thermal.heat_generated:.0f}W of heat. System will thermally "
        f"throttle indefinitely under this workload.",
        thermal.equilibrium_temp,
    )


def _thermal_warning(
    thermal: ThermalState, max_temp: float, throttle_temp: float
) -> Optional[SystemWarning]:
    if thermal.is_throttling:
        return SystemWarning(
            WarningType.THERMAL_THROTTLE,
            Severity.DANGER,
            "Thermal Throttling Active",
            f"CPU temperature at {thermal.cpu_temp:.1f}°C has exceeded the throttle threshold "
            f"({throttle_temp:.0f}°C). Protective thermal throttling is reducing clocks and "
            f"power draw by {thermal.throttle_percent:.0f}%.",
            thermal.cpu_temp,
        )
    if max_temp > 0 and thermal.cpu_temp / max_temp >= TEMPERATURE_WARNING_RATIO:
        return SystemWarning(
            WarningType.THERMAL_WARNING,
            Severity.WARNING,
            "Elevated Temperature",
            f"CPU temperature at {thermal.cpu_temp:.1f}°C approaching thermal limit of "
            f"{max_temp:.0f}°C. Throttling will begin at {throttle_temp:.0f}°C.",
            thermal.cpu_temp,
        )
    return None


def _cooling_warning(
    config: SimulationConfig, thermal: ThermalState, max_temp: float
) -> Optional[SystemWarning]:
    cooling = config.cooling
    if cooling is None:
        return None

    capacity = thermal.cooling_capacity or cooling.heat_dissipation or 100.0
    ratio = thermal.heat_generated / capacity
    if ratio >= COOLING_MARGINAL_RATIO and thermal.equilibrium_temp > max_temp - COOLING_MARGINAL_HEADROOM:
        return SystemWarning(
            WarningType.COOLING_MARGINAL,
            Severity.WARNING,
            "Cooling Near Capacity",
            f"The {cooling.name} is operating at {ratio * 100:.0f}% of effective capacity. "
            f"Equilibrium temperature of {thermal.equilibrium_temp:.1f}°C provides only "
            f"{max_temp - thermal.equilibrium_temp:.0f}°C of thermal headroom.",
            thermal.heat_generated,
        )

    if cooling.max_recommended_tdp and thermal.heat_generated > cooling.max_recommended_tdp:
        suggested = math.ceil(thermal.heat_generated / 50) * 50
        return SystemWarning(
            WarningType.COOLING_INSUFFICIENT,
            Severity.WARNING,
            "Cooler Undersized",
            f"Current heat output ({thermal.heat_generated:.0f}W) exceeds the {cooling.name}'s "
            f"recommended TDP of {cooling.max_recommended_tdp:.0f}W. Consider a cooler rated "
            f"for {suggested}W+.",
            thermal.heat_generated,
        )
    return None


def _psu_load_warning(config: SimulationConfig, psu_result: PsuResult) -> Optional[SystemWarning]:
    load = psu_result.load_percent
    name = config.psu.name if config.psu else "PSU"
    if load >= PSU_LOAD_DANGER:
        return SystemWarning(
            WarningType.PSU_LOAD_CRITICAL,
            Severity.DANGER,
            "PSU Overload Risk",
            f"Sustained load at {load:.0f}% exceeds safe limits. The {name} may trigger "
            f"overcurrent protection. Consider a higher wattage unit.",
            load,
        )
    if load >= PSU_LOAD_WARNING:
        return SystemWarning(
            WarningType.PSU_LOAD_HIGH,
            Severity.WARNING,
            "High PSU Load",
            f"Sustained load at {load:.0f}% leaves minimal headroom for GPU transient spikes.",
            load,
        )
    return None


def _psu_transient_warning(config: SimulationConfig, psu_result: PsuResult) -> Optional[SystemWarning]:
    transient = psu_result.transient_load
    if transient >= psu_result.transient_limit:
        name = config.psu.name if config.psu else "PSU"
        return SystemWarning(
            WarningType.PSU_TRANSIENT,
            Severity.DANGER,
            "Transient Spike Instability",
            f"GPU transient spikes reaching {transient:.0f}% of PSU capacity may trigger "
            f"overcurrent protection, causing system shutdowns. The {name} tolerates about "
            f"{psu_result.transient_limit:.0f}%.",
            transient,
        )
    if transient >= TRANSIENT_WARNING and transient > psu_result.load_percent + TRANSIENT_MARGIN:
        return SystemWarning(
            WarningType.PSU_TRANSIENT,
            Severity.WARNING,
            "Transient Spike Concern",
            f"GPU transient spikes reaching {transient:.0f}% of rated capacity. While within "
            f"limits, minimal margin exists.",
            transient,
        )
    return None


def generate_warnings(
    config: SimulationConfig,
    power: Optional[PowerResult],
    thermal: Optional[ThermalState],
    psu_result: Optional[PsuResult],
) -> List[SystemWarning]:
    """
    Derive diagnostics from the latest results.

    Returns:
        Warnings in check order (memory, equilibrium, thermal, cooling,
        PSU load, PSU transient); use `sort_warnings` for display order
    """
    if power is None or thermal is None or psu_result is None:
        return []

    cpu = config.cpu
    max_temp = cpu.max_safe_temp if cpu else DEFAULT_MAX_CPU_TEMP
    throttle_temp = cpu.throttle_temp if cpu else max_temp - 5

    checks = [
        _memory_warning(config),
        _equilibrium_warning(config, thermal, max_temp),
        _thermal_warning(thermal, max_temp, throttle_temp),
        _cooling_warning(config, thermal, max_temp),
        _psu_load_warning(config, psu_result),
        _psu_transient_warning(config, psu_result),
    ]
    return [w for w in checks if w is not None]


def sort_warnings(warnings: Iterable[SystemWarning]) -> List[SystemWarning]:
    """Most severe first; stable within a severity."""
    return sorted(warnings, key=lambda w: -w.severity.priority)


def highest_severity(warnings: Iterable[SystemWarning]) -> Optional[Severity]:
    """Most severe level present, or None for no warnings."""
    severities = [w.severity for w in warnings]
    if not severities:
        return None
    return max(severities, key=lambda s: s.priority)


class ReadinessLevel(str, Enum):
    VALID = "valid"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class ReadinessReport:
    level: ReadinessLevel
    message: str
    details: List[str] = field(default_factory=list)
    can_simulate: bool = True


def check_system_readiness(config: SimulationConfig) -> ReadinessReport:
    """Static sanity check of a configuration before simulating it."""
    missing = [
        f"No {label} selected"
        for label, part in (
            ("CPU", config.cpu),
            ("GPU", config.gpu),
            ("PSU", config.psu),
            ("cooling", config.cooling),
            ("memory", config.memory),
        )
        if part is None
    ]
    if missing:
        return ReadinessReport(ReadinessLevel.ERROR, "Configuration incomplete", missing, False)

    issues: List[str] = []
    notes: List[str] = []
    cpu, gpu, psu, cooling = config.cpu, config.gpu, config.psu, config.cooling

    estimated = cpu.tdp + gpu.board_power + READINESS_OVERHEAD
    if estimated > psu.wattage * 0.95:
        issues.append(f"PSU undersized: {estimated:.0f}W load on {psu.wattage:.0f}W PSU")
    elif estimated > psu.wattage * 0.85:
        notes.append(f"PSU near capacity: {estimated / psu.wattage * 100:.0f}% load")

    if cooling.heat_dissipation < cpu.tdp:
        issues.append(
            f"Cooling insufficient: {cooling.heat_dissipation:.0f}W cooler for {cpu.tdp:.0f}W CPU"
        )
    elif cooling.heat_dissipation < cpu.tdp * 1.2:
        notes.append("Cooling marginal for sustained loads")

    if not cpu.supports_memory(config.memory.type):
        issues.append(
            f"Incompatible memory: CPU supports {'/'.join(cpu.supported_memory)}, "
            f"but {config.memory.type} selected"
        )

    if issues:
        return ReadinessReport(
            ReadinessLevel.ERROR, "Configuration has critical issues", issues + notes, False
        )
    if notes:
        return ReadinessReport(ReadinessLevel.WARNING, "Configuration valid with warnings", notes, True)
    return ReadinessReport(ReadinessLevel.VALID, "Configuration ready", [], True)
