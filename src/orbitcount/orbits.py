"""
Orbit Counter (Burnside's Lemma)

  total_orbits = sum over applicable classes of ORBITS
  total_fixed  = sum over applicable classes of fixed_count(class) * ORBITS
  result_count = total_fixed / total_orbits

fixed_count is the unrestricted power formula without a quota and the
bag-draw count over the class's cycle lengths with one. No coloring is
ever materialized here.

The division must be exact. A remainder means a class formula is wrong;
it is surfaced as InternalConsistencyError (raised in strict mode,
attached to the result otherwise, with the truncated quotient kept for
display).
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from .config import Config
from .kernel.symmetry import SymmetryGroup


@dataclass(frozen=True)
class ClassCount:
    name: str
    orbits: int
    free_positions: int
    fixed: int  # per literal element


@dataclass(frozen=True)
class OrbitCount:
    total_orbits: int
    total_fixed: int
    result_count: int
    classes: Tuple[ClassCount, ...]
    error: Optional["InternalConsistencyError"] = None

    @property
    def exact(self) -> bool:
        return self.error is None


def count_orbits(
    config: Config,
    group: Optional[SymmetryGroup] = None,
    strict: bool = False
) -> OrbitCount:
    """
    Count distinct colorings of config.shape under config.family.

    Args:
        config: Validated configuration.
        group: Prebuilt group for config (built here when omitted).
        strict: Raise on a non-exact Burnside division instead of recording it.

    Returns:
        OrbitCount with totals, the per-class breakdown and any consistency error.

    Raises:
        InternalConsistencyError: In strict mode, if total_fixed % total_orbits != 0.
    """
    if group is None:
        group = SymmetryGroup(config.shape, config.family)

    total_orbits = 0
    total_fixed = 0
    classes = []

    for ec in group.classes:
        orbits = ec.orbits(config.shape)
        fixed = ec.fixed_count(config.shape, config.n_colours, config.quota)
        total_orbits += orbits
        total_fixed += fixed * orbits
        classes.append(ClassCount(
            name=ec.name,
            orbits=orbits,
            free_positions=ec.free_positions(config.shape),
            fixed=fixed
        ))

    error = None
    if total_orbits == 0:
        result_count = 0
    else:
        result_count, remainder = divmod(total_fixed, total_orbits)
        if remainder != 0:
            error = InternalConsistencyError(
                f"Fixed count {total_fixed} is not divisible by group order "
                f"{total_orbits} for {config!r}",
                {"total_fixed": total_fixed, "total_orbits": total_orbits}
            )
            if strict:
                raise error

    return OrbitCount(
        total_orbits=total_orbits,
        total_fixed=total_fixed,
        result_count=result_count,
        classes=tuple(classes),
        error=error
    )


class InternalConsistencyError(Exception):
    """
    Raised or recorded when two independent derivations of a count disagree.

    This signals a defect in a counting formula, never a user error.

    Attributes:
        operands: The disagreeing quantities by name.
    """

    def __init__(self, message: str, operands: Dict[str, int]):
        super().__init__(message)
        self.operands = dict(operands)
