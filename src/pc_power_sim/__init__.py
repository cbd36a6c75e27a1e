"""PC power and thermal simulator."""

from .hardware import CatalogError, InitializationError, load_catalog
from .simulate import Simulation
from .system import RgbLevel, SimulationConfig, StorageConfig
from .workloads import Workload

__version__ = "0.1.0"

__all__ = [
    "CatalogError",
    "InitializationError",
    "RgbLevel",
    "Simulation",
    "SimulationConfig",
    "StorageConfig",
    "Workload",
    "load_catalog",
]
