"""
Cosmetic clock-speed jitter for display.

The power model reports deterministic clocks. Front ends that want the
reported clock to wander slightly under gaming and light loads apply this
at presentation time, so computations and tests stay reproducible.
"""

from typing import Optional

import numpy as np

from ..hardware.models import CpuSpec, GpuSpec
from ..workloads import LoadType

CPU_LIGHT_JITTER = 0.3  # GHz
CPU_GAMING_JITTER_SHARE = 0.3  # of the boost - all-core span
GPU_GAMING_JITTER = 100.0  # MHz, downward


class ClockJitter:
    """Seedable jitter source for displayed clock speeds."""

    def __init__(self, seed: Optional[int] = None, enabled: bool = True):
        self.rng = np.random.default_rng(seed)
        self.enabled = enabled

    def cpu_clock(self, clock: float, cpu: Optional[CpuSpec], load_type: Optional[LoadType]) -> float:
        if not self.enabled or cpu is None:
            return clock
        if load_type is LoadType.LIGHT:
            return clock + self.rng.random() * CPU_LIGHT_JITTER
        if load_type is LoadType.GAMING:
            span = max(0.0, cpu.boost_clock - cpu.all_core_turbo)
            return clock + self.rng.random() * span * CPU_GAMING_JITTER_SHARE
        return clock

    def gpu_clock(self, clock: float, gpu: Optional[GpuSpec], load_type: Optional[LoadType]) -> float:
        if not self.enabled or gpu is None:
            return clock
        if load_type is LoadType.GAMING:
            return clock - self.rng.random() * GPU_GAMING_JITTER
        return clock
