"""
Simulation scheduler and lifecycle.

One `Simulation` owns its state store, history buffer and timing fields.
Ticks are driven either by `run()` (sleeping `tick_interval` between
ticks) or by calling `tick(now)` directly with explicit timestamps.
"""

import logging
import time
from typing import Any, Callable, Dict, Optional, Tuple

from ..config import EngineSettings, clamp_speed
from ..hardware.catalog import check_memory_compatibility, find_compatible_memory, find_defaults
from ..hardware.models import HardwareCatalog
from ..power.boost import BoostState, boost_for_workload_change
from ..power.display import ClockJitter
from ..system import SimulationConfig
from ..thermal.model import create_thermal_state, with_ambient
from .engine import TickResult, compute_immediate, compute_tick
from .state import HistorySample, SimulationState, Store

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class ManualClock:
    """Clock advanced explicitly, for headless runs and tests."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


class Simulation:
    """
    Tick-driven PC power/thermal simulation.

    Each tick converts elapsed wall time into simulated time
    (min(elapsed, max_delta_time) * speed), advances the engine and commits
    the result. History samples are appended at most once per
    `history_interval` of wall time.
    """

    def __init__(
        self,
        catalog: HardwareCatalog,
        config: SimulationConfig,
        settings: Optional[EngineSettings] = None,
        clock: Clock = time.monotonic,
        jitter: Optional[ClockJitter] = None,
    ):
        self.catalog = catalog
        self.settings = settings or EngineSettings()
        self.clock = clock
        self.jitter = jitter or ClockJitter(enabled=False)

        self.store = Store(
            SimulationState.initial(
                config, speed=clamp_speed(self.settings.speed), max_history=self.settings.max_history
            )
        )
        self.last_tick: Optional[float] = None
        self.last_history: Optional[float] = None

    @classmethod
    def from_catalog(
        cls,
        catalog: HardwareCatalog,
        settings: Optional[EngineSettings] = None,
        **kwargs: Any,
    ) -> "Simulation":
        """Build a simulation using default hardware selection and configured knobs.

        Raises:
            InitializationError: If no usable default exists for a category
        """
        settings = settings or EngineSettings()
        defaults = settings.defaults
        parts = find_defaults(catalog, defaults.preferred)
        config = SimulationConfig(
            workload=defaults.workload,
            fan_count=defaults.fan_count,
            ambient_temp=defaults.ambient_temp,
            airflow_quality=defaults.airflow_quality,
            storage=defaults.storage,
            rgb_level=defaults.rgb_level,
            **parts,
        )
        simulation = cls(catalog, config, settings, **kwargs)
        simulation.initialize()
        return simulation

    @property
    def state(self) -> SimulationState:
        return self.store.get()

    @property
    def history(self):
        return self.state.history

    def subscribe(self, callback: Callable[[SimulationState], None]) -> Callable[[], None]:
        return self.store.subscribe(callback)

    # Lifecycle

    def initialize(self) -> None:
        """Compute the first power/thermal snapshot without advancing time."""
        config = self.state.config
        compatible, reason = check_memory_compatibility(config.cpu, config.memory)
        if not compatible:
            self.store.set(compatibility_warning=reason)
        self.immediate_update()
        logger.info(
            f"Simulation initialized: {config.workload.value}, "
            f"{self.state.power.sustained_total:.0f}W sustained"
        )

    def start(self) -> None:
        now = self.clock()
        self.last_tick = now
        self.last_history = now
        self.store.set(is_running=True, is_paused=False)
        logger.info(f"Simulation started (speed {self.state.speed}x)")

    def stop(self) -> None:
        self.store.set(is_running=False)
        logger.info(f"Simulation stopped at {self.state.simulated_time:.1f}s simulated")

    def pause(self) -> None:
        self.store.set(is_paused=True)

    def resume(self) -> None:
        # Drop the paused interval instead of integrating over it
        self.last_tick = self.clock()
        self.store.set(is_paused=False, history_index=-1)

    def toggle_pause(self) -> None:
        if self.state.is_paused:
            self.resume()
        else:
            self.pause()

    def reset(self) -> None:
        """Re-seed thermal, boost and history, then recompute immediately."""
        state = self.state
        now = self.clock()
        self.last_tick = now
        self.last_history = now
        self.store.set(
            thermal=create_thermal_state(state.config.ambient_temp),
            boost=BoostState(),
            simulated_time=0.0,
            history_index=-1,
            history=state.history.cleared(),
        )
        self.immediate_update()
        logger.info("Simulation reset")

    def set_speed(self, factor: float) -> float:
        speed = clamp_speed(factor)
        self.store.set(speed=speed)
        return speed

    def set_history_index(self, index: int) -> int:
        """
        Scrub to a history sample.

        A valid index before the newest sample fixes the view there and
        pauses; anything else returns to live (-1).
        """
        if 0 <= index < len(self.history) - 1:
            self.store.set(history_index=index, is_paused=True)
        else:
            self.store.set(history_index=-1)
        return self.state.history_index

    def historical_values(self) -> Optional[Tuple[HistorySample, HistorySample]]:
        """(power, temperature) at the scrubbed index, or None when live."""
        index = self.state.history_index
        if index < 0 or index >= len(self.history):
            return None
        return self.history.at(index)

    # Ticking

    def tick(self, now: Optional[float] = None) -> bool:
        """
        Advance one tick using wall time `now` (defaults to the clock).

        Returns:
            True if the state advanced, False while stopped or paused
        """
        state = self.state
        if not state.is_running or state.is_paused:
            return False

        now = self.clock() if now is None else now
        if self.last_tick is None:
            self.last_tick = now
        if self.last_history is None:
            self.last_history = now

        elapsed = max(0.0, now - self.last_tick)
        self.last_tick = now
        delta_time = min(elapsed, self.settings.max_delta_time) * state.speed

        result = compute_tick(state, delta_time, self.catalog.storage)
        simulated_time = state.simulated_time + delta_time

        history = state.history
        if now - self.last_history >= self.settings.history_interval:
            self.last_history = now
            history = history.append(
                result.power.sustained_total, result.thermal.cpu_temp, simulated_time
            )

        self._commit(result, simulated_time=simulated_time, history=history)
        return True

    def immediate_update(self) -> None:
        """Synchronous zero-time recomputation after a configuration change."""
        self._commit(compute_immediate(self.state, self.catalog.storage))

    def run(self, duration: Optional[float] = None) -> None:
        """
        Tick in real time until stopped or `duration` wall seconds elapse.
        """
        if not self.state.is_running:
            self.start()
        started = self.clock()
        try:
            while self.state.is_running:
                self.tick()
                if duration is not None and self.clock() - started >= duration:
                    break
                time.sleep(self.settings.tick_interval)
        except Exception as e:
            logger.error(f"Simulation loop crashed: {e}")
            raise
        finally:
            if self.state.is_running:
                self.stop()

    def _commit(self, result: TickResult, **extra: Any) -> None:
        self.store.set(
            power=result.power,
            psu=result.psu,
            thermal=result.thermal,
            boost=result.boost,
            warnings=result.warnings,
            effective_cooling=result.effective_cooling,
            **extra,
        )

    # Configuration

    def select_hardware(self, category: str, item_id: str) -> bool:
        """
        Swap one hardware component by catalog id.

        Changing the CPU clears the boost window and, if the current memory
        is unsupported, swaps in the first compatible kit.

        Returns:
            False if the id is not in the catalog (selection unchanged)

        Raises:
            ValueError: If `category` is not a hardware category
        """
        item = self.catalog.find(category, item_id)
        if item is None:
            logger.warning(f"Unknown {category} id '{item_id}', selection unchanged")
            return False

        state = self.state
        config = state.config
        changes: Dict[str, Any] = {}

        if category == "cpu":
            config = config.with_changes(cpu=item)
            # Fresh window so the new part starts at its own draw
            changes["boost"] = BoostState()
            compatible, reason = check_memory_compatibility(item, config.memory)
            if compatible:
                changes["compatibility_warning"] = None
            else:
                replacement = find_compatible_memory(self.catalog, item)
                if replacement is not None:
                    config = config.with_changes(memory=replacement)
                    changes["compatibility_warning"] = (
                        f"{reason} Switched memory to {replacement.name}."
                    )
                    logger.warning(
                        f"Memory {state.config.memory.name} incompatible with {item.name}, "
                        f"switched to {replacement.name}"
                    )
                else:
                    changes["compatibility_warning"] = reason
        elif category == "memory":
            config = config.with_changes(memory=item)
            compatible, reason = check_memory_compatibility(config.cpu, item)
            changes["compatibility_warning"] = None if compatible else reason
        else:
            config = config.with_changes(**{category: item})

        logger.info(f"Selected {category}: {item.name}")
        self.store.set(config=config, **changes)
        self.immediate_update()
        return True

    def update_config(self, **changes: Any) -> SimulationConfig:
        """
        Change workload or environment knobs (fan_count, ambient_temp,
        airflow_quality, storage, rgb_level) and recompute immediately.
        """
        state = self.state
        config = state.config.with_changes(**changes)
        updates: Dict[str, Any] = {"config": config}

        if config.workload is not state.config.workload:
            last_cpu_power = state.power.cpu if state.power else 0.0
            updates["boost"] = boost_for_workload_change(config.workload, config.cpu, last_cpu_power)
            logger.info(f"Workload changed to {config.workload.value}")
        if config.ambient_temp != state.config.ambient_temp:
            updates["thermal"] = with_ambient(state.thermal, config.ambient_temp)

        self.store.set(**updates)
        self.immediate_update()
        return config

    def display_clocks(self) -> Tuple[float, float]:
        """CPU (GHz) and GPU (MHz) clocks with optional cosmetic jitter."""
        state = self.state
        if state.power is None:
            return 0.0, 0.0
        config = state.config
        cpu_clock = self.jitter.cpu_clock(
            state.power.cpu_clock, config.cpu, config.workload.profile.cpu_load_type
        )
        gpu_clock = self.jitter.gpu_clock(
            state.power.gpu_clock, config.gpu, config.workload.profile.gpu_load_type
        )
        return cpu_clock, gpu_clock
