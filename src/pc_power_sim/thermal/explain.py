"""Natural-language thermal narrative."""

from enum import Enum
from typing import Optional

from ..hardware.models import CoolerSpec

LOW_HEADROOM = 5.0  # °C
HIGH_UTILIZATION = 80.0  # % of cooling capacity
WARMING_MARGIN = 5.0
COOLING_MARGIN = 3.0


class ThermalNarrative(str, Enum):
    """Mutually exclusive thermal situations, highest priority first."""

    NO_COOLER = "no_cooler"
    THROTTLING = "throttling"
    EQUILIBRIUM_EXCEEDED = "equilibrium_exceeded"
    LOW_HEADROOM = "low_headroom"
    HIGH_LOAD = "high_load"
    WARMING = "warming"
    COOLING = "cooling"
    STABLE = "stable"


def classify(
    cooling: Optional[CoolerSpec],
    cpu_temp: float,
    equilibrium_temp: float,
    max_cpu_temp: float,
    throttle_percent: float,
    heat_generated: float,
    cooling_capacity: float,
) -> ThermalNarrative:
    if cooling is None:
        return ThermalNarrative.NO_COOLER
    if throttle_percent > 0:
        return ThermalNarrative.THROTTLING
    if equilibrium_temp > max_cpu_temp:
        return ThermalNarrative.EQUILIBRIUM_EXCEEDED
    if max(0.0, max_cpu_temp - equilibrium_temp) < LOW_HEADROOM:
        return ThermalNarrative.LOW_HEADROOM
    if cooling_capacity > 0 and heat_generated / cooling_capacity * 100 > HIGH_UTILIZATION:
        return ThermalNarrative.HIGH_LOAD
    if cpu_temp < equilibrium_temp - WARMING_MARGIN:
        return ThermalNarrative.WARMING
    if cpu_temp > equilibrium_temp + COOLING_MARGIN:
        return ThermalNarrative.COOLING
    return ThermalNarrative.STABLE


def explain(
    cooling: Optional[CoolerSpec],
    cpu_temp: float,
    equilibrium_temp: float,
    max_cpu_temp: float,
    throttle_temp: float,
    throttle_percent: float,
    heat_generated: float,
    cooling_capacity: float,
    fan_speed: float,
) -> str:
    """Describe the current thermal situation in one paragraph."""
    narrative = classify(
        cooling,
        cpu_temp,
        equilibrium_temp,
        max_cpu_temp,
        throttle_percent,
        heat_generated,
        cooling_capacity,
    )
    if narrative is ThermalNarrative.NO_COOLER:
        return "No cooling solution selected."

    capacity_pct = heat_generated / cooling_capacity * 100 if cooling_capacity > 0 else 0.0
    headroom = max(0.0, max_cpu_temp - equilibrium_temp)

    if narrative is ThermalNarrative.THROTTLING:
        return (
            f"Thermal throttling active at {throttle_percent:.0f}%. CPU temperature "
            f"({cpu_temp:.1f}°C) has exceeded the throttle threshold ({throttle_temp:.0f}°C). "
            f"The system is reducing clock speeds to limit heat generation. Current cooling "
            f"is handling {capacity_pct:.0f}% of maximum capacity. Upgrade cooling or reduce "
            f"workload intensity."
        )
    if narrative is ThermalNarrative.EQUILIBRIUM_EXCEEDED:
        return (
            f"Warning: Projected equilibrium ({equilibrium_temp:.1f}°C) exceeds CPU thermal "
            f"limit ({max_cpu_temp:.0f}°C). The {cooling.name} cannot dissipate "
            f"{heat_generated:.0f}W of heat fast enough. Throttling will occur until heat "
            f"output is reduced. Consider a more capable cooling solution."
        )
    if narrative is ThermalNarrative.LOW_HEADROOM:
        return (
            f"Near thermal limits. Equilibrium temperature {equilibrium_temp:.1f}°C leaves only "
            f"{headroom:.0f}°C headroom to {max_cpu_temp:.0f}°C limit. Fan speed at "
            f"{fan_speed:.0f}%. Additional workload or higher ambient temperature may trigger "
            f"throttling."
        )
    if narrative is ThermalNarrative.HIGH_LOAD:
        text = (
            f"High thermal load using {capacity_pct:.0f}% of cooling capacity. Temperature "
            f"stabilizing at {equilibrium_temp:.1f}°C with {headroom:.0f}°C headroom."
        )
        if fan_speed > 70:
            text += " Fans running at elevated speeds to maintain stability."
        return text
    if narrative is ThermalNarrative.WARMING:
        return (
            f"Temperature rising toward equilibrium at {equilibrium_temp:.1f}°C. Currently at "
            f"{cpu_temp:.1f}°C. The {cooling.name} is absorbing heat (thermal mass soak). "
            f"{headroom:.0f}°C headroom below {max_cpu_temp:.0f}°C limit."
        )
    if narrative is ThermalNarrative.COOLING:
        return (
            f"Temperature decreasing toward equilibrium at {equilibrium_temp:.1f}°C. Heat "
            f"dissipation exceeds current generation."
        )
    return (
        f"Stable operation at {cpu_temp:.1f}°C. Equilibrium at {equilibrium_temp:.1f}°C with "
        f"{headroom:.0f}°C headroom. Cooling system at {capacity_pct:.0f}% capacity. "
        f"Fan speed {fan_speed:.0f}%."
    )
