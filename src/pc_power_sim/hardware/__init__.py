"""
Hardware catalog: immutable component records and their loading.
"""

from .catalog import (
    InitializationError,
    build_catalog,
    check_memory_compatibility,
    find_compatible_memory,
    find_defaults,
    load_catalog,
)
from .models import (
    CatalogError,
    CoolerSpec,
    CpuSpec,
    DriveClass,
    GpuSpec,
    HardwareCatalog,
    MemorySpec,
    PsuSpec,
    StorageSpec,
)

__all__ = [
    "CatalogError",
    "InitializationError",
    "CoolerSpec",
    "CpuSpec",
    "DriveClass",
    "GpuSpec",
    "HardwareCatalog",
    "MemorySpec",
    "PsuSpec",
    "StorageSpec",
    "build_catalog",
    "check_memory_compatibility",
    "find_compatible_memory",
    "find_defaults",
    "load_catalog",
]
