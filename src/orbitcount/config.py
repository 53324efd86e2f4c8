"""
Computation Configuration

One immutable Config per request: shape, palette size, symmetry family and
an optional per-colour quota. validate_config() is the hardened boundary
in front of the engine; the counting and enumeration code assumes a
validated Config.

Ranges (inclusive, frozen in param_registry):
  - colours: 2..8
  - ring beads: 2..10
  - grid width, height: 1..8
  - n_colours ** positions <= 2**64
  - quota: ceil(positions / colours)..positions
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from .core import param_registry
from .kernel.shapes import Grid, Ring, Shape
from .kernel.symmetry import SymmetryFamily

# CLI aliases accepted by parse_family, in addition to the enum values
_FAMILY_ALIASES = {
    "none": SymmetryFamily.NONE,
    "no-transforms": SymmetryFamily.NONE,
    "rotate": SymmetryFamily.ROTATE,
    "rotations": SymmetryFamily.ROTATE,
    "rotate+flip": SymmetryFamily.ROTATE_AND_FLIP,
    "rotate-and-flip": SymmetryFamily.ROTATE_AND_FLIP,
    "dihedral": SymmetryFamily.ROTATE_AND_FLIP,
}


@dataclass(frozen=True)
class Config:
    shape: Shape
    n_colours: int
    family: SymmetryFamily
    quota: Optional[int] = None

    @property
    def positions(self) -> int:
        return self.shape.positions

    @property
    def colour_limit(self) -> int:
        """Effective per-colour cap used by the enumerator."""
        return self.positions if self.quota is None else self.quota


def quota_range(shape: Shape, n_colours: int) -> Tuple[int, int]:
    """
    Valid (min, max) quota for a shape and palette size.

    The minimum is the smallest cap that still lets every position be coloured.
    """
    positions = shape.positions
    return ((positions + n_colours - 1) // n_colours, positions)


def validate_config(config: Config) -> Config:
    """
    Check every range constraint and return the config unchanged.

    Raises:
        ConfigError: On the first violated constraint.
    """
    reg = param_registry()
    shape = config.shape

    lo, hi = reg["colour_range"]
    if not isinstance(config.n_colours, int) or not lo <= config.n_colours <= hi:
        raise ConfigError(f"n_colours must be in {lo}..{hi}, got {config.n_colours}")

    if not isinstance(config.family, SymmetryFamily):
        raise ConfigError(f"family must be a SymmetryFamily, got {config.family!r}")

    if isinstance(shape, Ring):
        lo, hi = reg["ring_bead_range"]
        if not lo <= shape.n_beads <= hi:
            raise ConfigError(f"n_beads must be in {lo}..{hi}, got {shape.n_beads}")
    elif isinstance(shape, Grid):
        lo, hi = reg["grid_dimension_range"]
        if not lo <= shape.width <= hi:
            raise ConfigError(f"width must be in {lo}..{hi}, got {shape.width}")
        if not lo <= shape.height <= hi:
            raise ConfigError(f"height must be in {lo}..{hi}, got {shape.height}")
    else:
        raise ConfigError(f"Unknown shape: {shape!r}")

    if config.n_colours ** shape.positions > (1 << reg["max_state_bits"]):
        raise ConfigError(
            f"{config.n_colours} colours over {shape.positions} positions exceeds "
            f"{reg['max_state_bits']}-bit state range"
        )

    if config.quota is not None:
        q_lo, q_hi = quota_range(shape, config.n_colours)
        if not isinstance(config.quota, int) or not q_lo <= config.quota <= q_hi:
            raise ConfigError(f"quota must be in {q_lo}..{q_hi}, got {config.quota}")

    return config


def parse_family(text: str) -> SymmetryFamily:
    """
    Parse a family name (case-insensitive).

    Accepted: none, rotate, rotate+flip and the aliases no-transforms,
    rotations, rotate-and-flip, dihedral.

    Raises:
        ValueError: If the name is not recognized.
    """
    key = text.strip().lower()
    if key not in _FAMILY_ALIASES:
        raise ValueError(
            f"Unknown symmetry family: '{text}'. Expected one of {sorted(_FAMILY_ALIASES)}"
        )
    return _FAMILY_ALIASES[key]


class ConfigError(ValueError):
    """Raised when a configuration value is outside its supported range."""
    pass
