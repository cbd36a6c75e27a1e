"""PSU load, efficiency curve interpolation and transient stability."""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..hardware.models import PsuSpec

# Efficiency assumed when no PSU is selected
DEFAULT_EFFICIENCY = 0.85
# Share of DC draw lost as heat when no PSU is selected
DEFAULT_HEAT_FRACTION = 0.15

# Transient limit = 100 + (transient_response - 0.7) * 80
TRANSIENT_REFERENCE_RESPONSE = 0.7
TRANSIENT_RESPONSE_SCALE = 80.0
DEFAULT_TRANSIENT_RESPONSE = 0.8
# Start warning at this share of the transient limit
TRANSIENT_WARNING_BAND = 0.85


@dataclass(frozen=True)
class PsuResult:
    wall_power: float
    efficiency: float
    heat_waste: float
    load_percent: float
    transient_load: float
    transient_stable: bool
    transient_warning: bool
    transient_limit: float


def calculate_psu_load(power: float, psu: Optional[PsuSpec]) -> float:
    """Load as a percentage of rated wattage (0 without a PSU)."""
    if psu is None or psu.wattage <= 0:
        return 0.0
    return power / psu.wattage * 100


def get_psu_efficiency(load_percent: float, psu: Optional[PsuSpec]) -> float:
    """
    Efficiency at a load percentage, linearly interpolated over the PSU curve.

    Loads outside the defined points clamp to the nearest endpoint.
    """
    if psu is None or not psu.efficiency:
        return DEFAULT_EFFICIENCY
    loads = [point[0] for point in psu.efficiency]
    efficiencies = [point[1] for point in psu.efficiency]
    return float(np.interp(load_percent, loads, efficiencies))


def transient_limit(psu: Optional[PsuSpec]) -> float:
    """Transient load percent the PSU tolerates before risking shutdown."""
    response = psu.transient_response if psu else DEFAULT_TRANSIENT_RESPONSE
    return 100 + (response - TRANSIENT_REFERENCE_RESPONSE) * TRANSIENT_RESPONSE_SCALE


def calculate_wall_power(
    dc_power: float, psu: Optional[PsuSpec], transient_peak: Optional[float] = None
) -> PsuResult:
    """
    Wall draw, heat waste and transient stability for a DC load.

    Args:
        dc_power: Sustained DC power delivered to components (W)
        psu: Selected power supply
        transient_peak: Peak DC power during GPU spikes; defaults to dc_power

    Returns:
        PsuResult
    """
    if transient_peak is None:
        transient_peak = dc_power

    if psu is None:
        return PsuResult(
            wall_power=dc_power,
            efficiency=DEFAULT_EFFICIENCY,
            heat_waste=dc_power * DEFAULT_HEAT_FRACTION,
            load_percent=0.0,
            transient_load=0.0,
            transient_stable=True,
            transient_warning=False,
            transient_limit=transient_limit(None),
        )

    load = calculate_psu_load(dc_power, psu)
    efficiency = get_psu_efficiency(load, psu)
    wall = dc_power / efficiency if efficiency > 0 else dc_power
    transient_load = calculate_psu_load(transient_peak, psu)
    limit = transient_limit(psu)

    return PsuResult(
        wall_power=wall,
        efficiency=efficiency,
        heat_waste=wall - dc_power,
        load_percent=load,
        transient_load=transient_load,
        transient_stable=transient_load < limit,
        transient_warning=transient_load > limit * TRANSIENT_WARNING_BAND,
        transient_limit=limit,
    )
