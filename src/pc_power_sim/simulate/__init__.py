from .engine import TickResult, compute_immediate, compute_tick
from .simulation import ManualClock, Simulation
from .state import HistoryBuffer, HistorySample, SimulationState, Store

__all__ = [
    "HistoryBuffer",
    "HistorySample",
    "ManualClock",
    "Simulation",
    "SimulationState",
    "Store",
    "TickResult",
    "compute_immediate",
    "compute_tick",
]
