"""Observable simulation state and the bounded history buffer."""

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Optional, Tuple

import pandas as pd

from ..diagnostics import SystemWarning
from ..power.boost import BoostState
from ..power.model import PowerResult
from ..power.psu import PsuResult
from ..system import SimulationConfig
from ..thermal.model import ThermalState, create_thermal_state

DEFAULT_MAX_HISTORY = 300


@dataclass(frozen=True)
class HistorySample:
    value: float
    time: float  # simulated seconds


@dataclass(frozen=True)
class HistoryBuffer:
    """
    Two parallel FIFO sequences (system power, CPU temperature).

    Immutable: `append` returns a new buffer, dropping the oldest samples
    once more than `capacity` are held, so every committed state keeps
    the history it was delivered with.
    """

    capacity: int = DEFAULT_MAX_HISTORY
    power: Tuple[HistorySample, ...] = ()
    temperature: Tuple[HistorySample, ...] = ()

    def __post_init__(self):
        if self.capacity < 1:
            raise ValueError(f"History capacity must be at least 1, got {self.capacity}")

    def __len__(self) -> int:
        return len(self.power)

    def append(self, power: float, temperature: float, time: float) -> "HistoryBuffer":
        return replace(
            self,
            power=(self.power + (HistorySample(power, time),))[-self.capacity :],
            temperature=(self.temperature + (HistorySample(temperature, time),))[-self.capacity :],
        )

    def at(self, index: int) -> Tuple[HistorySample, HistorySample]:
        """(power, temperature) samples at an index, oldest first."""
        return self.power[index], self.temperature[index]

    def cleared(self) -> "HistoryBuffer":
        return HistoryBuffer(self.capacity)

    def to_frame(self) -> pd.DataFrame:
        """History as a DataFrame with time, power and cpu_temp columns."""
        return pd.DataFrame(
            {
                "time": [s.time for s in self.power],
                "power": [s.value for s in self.power],
                "cpu_temp": [s.value for s in self.temperature],
            }
        )


@dataclass(frozen=True)
class SimulationState:
    """Everything a presentation layer needs after each committed change."""

    config: SimulationConfig
    thermal: ThermalState
    boost: BoostState = field(default_factory=BoostState)
    power: Optional[PowerResult] = None
    psu: Optional[PsuResult] = None
    warnings: Tuple[SystemWarning, ...] = ()
    simulated_time: float = 0.0
    is_running: bool = False
    is_paused: bool = False
    speed: float = 1.0
    history_index: int = -1  # -1 = live
    compatibility_warning: Optional[str] = None
    effective_cooling: Dict[str, float] = field(default_factory=dict)
    history: HistoryBuffer = field(default_factory=HistoryBuffer)

    @property
    def workload_explanation(self) -> str:
        return self.config.workload.explanation

    @classmethod
    def initial(
        cls, config: SimulationConfig, speed: float = 1.0, max_history: int = DEFAULT_MAX_HISTORY
    ) -> "SimulationState":
        return cls(
            config=config,
            thermal=create_thermal_state(config.ambient_temp),
            speed=speed,
            history=HistoryBuffer(max_history),
        )


Subscriber = Callable[[SimulationState], None]


class Store:
    """
    Owned state value with synchronous change notification.

    `set` merges a partial update into a new state object and calls every
    subscriber in registration order before returning.
    """

    def __init__(self, initial: SimulationState):
        self._state = initial
        self._subscribers: List[Subscriber] = []

    def get(self) -> SimulationState:
        return self._state

    def set(self, **changes: Any) -> SimulationState:
        self._state = replace(self._state, **changes)
        self._notify()
        return self._state

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a subscriber; returns a function that removes it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        for callback in list(self._subscribers):
            callback(self._state)
