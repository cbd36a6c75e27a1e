"""
Workload profiles.

A workload is a closed set of variants. Each variant carries the fixed
attributes the power and thermal models need:
- cpu_load_type / gpu_load_type: which spec draw point to target
- memory_activity / storage_activity: activity fractions in [0, 1]
- intensity: motherboard load tier
- high_load: whether the CPU may open a short boost window
- storage_heavy: whether storage activity is scaled up (compiling)
"""

from dataclasses import dataclass
from enum import Enum


class LoadType(str, Enum):
    """Per-component load level used to pick a draw point."""

    IDLE = "idle"
    LIGHT = "light"
    GAMING = "gaming"
    RENDERING = "rendering"
    STRESS = "stress"


class IntensityTier(str, Enum):
    """Motherboard activity tier."""

    IDLE = "idle"
    LIGHT = "light"
    MODERATE = "moderate"
    HEAVY = "heavy"


@dataclass(frozen=True)
class WorkloadProfile:
    """Fixed attributes of a workload variant."""

    name: str
    description: str
    cpu_load_type: LoadType
    gpu_load_type: LoadType
    memory_activity: float
    storage_activity: float
    intensity: IntensityTier
    high_load: bool
    storage_heavy: bool
    explanation: str


class Workload(str, Enum):
    """Selectable workload. Unknown ids raise ValueError on construction."""

    IDLE = "idle"
    LIGHT_LOAD = "light_load"
    GAMING = "gaming"
    STREAMING = "streaming"
    RENDERING = "rendering"
    COMPILING = "compiling"
    STRESS = "stress"

    @property
    def profile(self) -> WorkloadProfile:
        return _PROFILES[self]

    @property
    def is_high_load(self) -> bool:
        return self.profile.high_load

    @property
    def explanation(self) -> str:
        return self.profile.explanation

    @classmethod
    def from_id(cls, workload_id: "str | Workload") -> "Workload":
        """Parse a workload id, accepting an existing member unchanged."""
        if isinstance(workload_id, Workload):
            return workload_id
        try:
            return cls(workload_id)
        except ValueError:
            available = ", ".join(w.value for w in cls)
            raise ValueError(
                f"Unknown workload '{workload_id}'. Available: {available}"
            ) from None


_PROFILES = {
    Workload.IDLE: WorkloadProfile(
        name="Idle",
        description="Desktop idle, light browsing",
        cpu_load_type=LoadType.IDLE,
        gpu_load_type=LoadType.IDLE,
        memory_activity=0.1,
        storage_activity=0.05,
        intensity=IntensityTier.IDLE,
        high_load=False,
        storage_heavy=False,
        explanation=(
            "System at rest. CPU runs at minimum P-state with most cores in "
            "C-state sleep. GPU enters low-power mode. Memory controllers reduce "
            "refresh rate and storage drives enter idle states. Total system power "
            "is the sum of component minimum draws plus always-on overhead "
            "(motherboard VRMs, USB devices)."
        ),
    ),
    Workload.LIGHT_LOAD: WorkloadProfile(
        name="Light Load",
        description="Web browsing, office tasks",
        cpu_load_type=LoadType.LIGHT,
        gpu_load_type=LoadType.IDLE,
        memory_activity=0.25,
        storage_activity=0.15,
        intensity=IntensityTier.LIGHT,
        high_load=False,
        storage_heavy=False,
        explanation=(
            "Light application usage. CPU sporadically boosts single cores for "
            "short bursts. GPU may briefly accelerate for video decoding. Memory "
            "sees moderate read patterns. Power fluctuates with burst activity."
        ),
    ),
    Workload.GAMING: WorkloadProfile(
        name="Gaming",
        description="Typical gaming workload (GPU-bound)",
        cpu_load_type=LoadType.GAMING,
        gpu_load_type=LoadType.GAMING,
        memory_activity=0.55,
        storage_activity=0.3,
        intensity=IntensityTier.MODERATE,
        high_load=False,
        storage_heavy=False,
        explanation=(
            "Gaming is typically GPU-bound with the CPU handling game logic, "
            "physics and draw calls. Modern engines scale to 6-8 threads. GPU "
            "transient spikes occur during scene transitions and shader "
            "compilation. Memory bandwidth matters for texture streaming."
        ),
    ),
    Workload.STREAMING: WorkloadProfile(
        name="Gaming + Streaming",
        description="Gaming while encoding stream",
        cpu_load_type=LoadType.RENDERING,
        gpu_load_type=LoadType.GAMING,
        memory_activity=0.7,
        storage_activity=0.4,
        intensity=IntensityTier.MODERATE,
        high_load=True,
        storage_heavy=False,
        explanation=(
            "CPU handles software encoding (x264) while the GPU runs the game. "
            "Hardware encoding moves load onto the GPU instead. Frame buffers and "
            "encoder state add memory pressure. A demanding mixed workload for "
            "both power and thermals."
        ),
    ),
    Workload.RENDERING: WorkloadProfile(
        name="Rendering",
        description="CPU rendering, video encoding",
        cpu_load_type=LoadType.RENDERING,
        gpu_load_type=LoadType.RENDERING,
        memory_activity=0.85,
        storage_activity=0.6,
        intensity=IntensityTier.HEAVY,
        high_load=True,
        storage_heavy=False,
        explanation=(
            "CPU rendering loads all cores at sustained 100% utilization. Power "
            "surges during turbo boost before power limits engage. Temperature "
            "rises until equilibrium is reached. The GPU assists with hardware "
            "encoding or compute acceleration."
        ),
    ),
    Workload.COMPILING: WorkloadProfile(
        name="Compiling",
        description="Software compilation, build tasks",
        cpu_load_type=LoadType.RENDERING,
        gpu_load_type=LoadType.IDLE,
        memory_activity=0.75,
        storage_activity=0.85,
        intensity=IntensityTier.HEAVY,
        high_load=True,
        storage_heavy=True,
        explanation=(
            "Parallel compilation stresses all CPU cores with frequent I/O. The "
            "workload is bursty: CPU-bound while compiling, I/O-bound while "
            "linking. Fast NVMe drives finish sooner than HDDs. Large codebases "
            "keep memory busy."
        ),
    ),
    Workload.STRESS: WorkloadProfile(
        name="Stress Test",
        description="Maximum sustained load (synthetic)",
        cpu_load_type=LoadType.STRESS,
        gpu_load_type=LoadType.STRESS,
        memory_activity=0.95,
        storage_activity=0.5,
        intensity=IntensityTier.HEAVY,
        high_load=True,
        storage_heavy=False,
        explanation=(
            "Synthetic stress tests like Prime95 or OCCT push components to their "
            "maximum sustained power draw. Power exceeds TDP ratings during the "
            "initial boost, then settles at sustained limits. Useful for "
            "validating cooling, PSU capacity and stability."
        ),
    ),
}
