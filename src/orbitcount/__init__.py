"""
Orbit Counter

Counts colorings of rings and rectangular tiles up to rotation and
reflection (Burnside's Lemma), with optional per-colour quotas, and
materializes one canonical representative per orbit for small results.
"""

__version__ = "1.0.0"

from .config import Config, ConfigError, parse_family, quota_range, validate_config
from .kernel import (
    Ring,
    Grid,
    Coloring,
    CapacityError,
    SymmetryFamily,
    SymmetryGroup,
    canonicalize
)
from .orbits import OrbitCount, count_orbits, InternalConsistencyError
from .enumerator import Enumeration, enumerate_canonical
from .consistency import ConsistencyReport, check_consistency
from .runner import Result, Status, compute, export_json

__all__ = [
    # Configuration
    "Config",
    "ConfigError",
    "parse_family",
    "quota_range",
    "validate_config",

    # Kernel
    "Ring",
    "Grid",
    "Coloring",
    "CapacityError",
    "SymmetryFamily",
    "SymmetryGroup",
    "canonicalize",

    # Engine
    "OrbitCount",
    "count_orbits",
    "InternalConsistencyError",
    "Enumeration",
    "enumerate_canonical",
    "ConsistencyReport",
    "check_consistency",

    # Pipeline
    "Result",
    "Status",
    "compute",
    "export_json",
]
