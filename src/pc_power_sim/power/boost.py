"""
CPU short-boost window state machine.

A high-load workload opens a boost window of `short_boost_duration`
simulated seconds during which the CPU may draw its short-boost power.
The window counts down with simulated time; once it closes, the next
high-load tick opens a new one. Dropping to a non-high-load variant clears
the window and resynchronizes the smoothed CPU power to the last observed
value.
"""

from dataclasses import dataclass, replace
from typing import Optional

from ..hardware.models import CpuSpec
from ..workloads import Workload


@dataclass(frozen=True)
class BoostState:
    """Short-term CPU boost tracking."""

    current_power: float = 0.0
    boost_time_remaining: float = 0.0
    boost_active: bool = False


def _can_boost(cpu: Optional[CpuSpec], workload: Workload) -> bool:
    return cpu is not None and workload.is_high_load and cpu.short_boost_duration > 0


def advance_boost(
    state: BoostState,
    workload: Workload,
    cpu: Optional[CpuSpec],
    delta_time: float,
    last_cpu_power: float,
) -> BoostState:
    """
    Advance the boost window by one tick.

    Args:
        state: Boost state from the previous tick
        workload: Active workload
        cpu: Selected CPU (None leaves the state untouched under high load)
        delta_time: Simulated seconds elapsed
        last_cpu_power: CPU power from the previous tick

    Returns:
        New boost state
    """
    if not workload.is_high_load:
        return BoostState(current_power=last_cpu_power)

    if not _can_boost(cpu, workload):
        return state

    if not state.boost_active and state.boost_time_remaining == 0:
        return replace(
            state,
            boost_time_remaining=cpu.short_boost_duration,
            boost_active=True,
        )

    if state.boost_time_remaining > 0:
        remaining = max(0.0, state.boost_time_remaining - delta_time)
        if remaining == 0:
            return replace(state, boost_time_remaining=0.0, boost_active=False)
        return replace(state, boost_time_remaining=remaining)

    return state


def boost_for_workload_change(
    workload: Workload, cpu: Optional[CpuSpec], last_cpu_power: float
) -> BoostState:
    """Boost state right after the user switches workload."""
    if _can_boost(cpu, workload):
        return BoostState(
            current_power=last_cpu_power,
            boost_time_remaining=cpu.short_boost_duration,
            boost_active=True,
        )
    return BoostState(current_power=last_cpu_power)
