"""
Consistency Checker

Cross-validates an enumeration against the closed-form orbit count.

Checks:
  - size:  number of canonical colorings == OrbitCount.result_count
  - cover: sum over canonical colorings of |G| / |Stab(c)| == assignments
           walked (orbit-stabilizer; every valid assignment lies in exactly
           one emitted orbit)

For rings with a quota, every report carries one rotation diagnostic per
shift k in 1..N-1: an estimate derived from the rotation-class formula
(its fixed count divided by N) next to the number of emitted colorings
invariant under a rotation by gcd(N, k) steps. The estimate is not a
Burnside term and may differ from the observed count on a healthy run;
diagnostics never affect `ok`.

Mismatches never raise; the InternalConsistencyError is attached to the
report for the caller to display.
"""

from dataclasses import dataclass
from math import gcd
from typing import Optional, Sequence, Tuple

from .config import Config
from .kernel.bag_draw import simple_count
from .kernel.coloring import Coloring
from .kernel.frames import stabilizer_size
from .kernel.shapes import Ring
from .kernel.symmetry import SymmetryGroup
from .orbits import InternalConsistencyError, OrbitCount


@dataclass(frozen=True)
class RotationDiagnostic:
    shift: int
    step: int  # gcd(n_beads, shift)
    expected: int  # estimate, see module docstring
    actual: int

    @property
    def matches_estimate(self) -> bool:
        return self.expected == self.actual


@dataclass(frozen=True)
class ConsistencyReport:
    ok: bool
    expected: int
    actual: int
    orbit_cover: int
    walked: int
    message: str
    rotation_diagnostics: Tuple[RotationDiagnostic, ...] = ()
    error: Optional[InternalConsistencyError] = None


def check_consistency(
    config: Config,
    count: OrbitCount,
    colorings: Sequence[Coloring],
    walked: int,
    group: Optional[SymmetryGroup] = None,
    stabilizers: Optional[Sequence[int]] = None
) -> ConsistencyReport:
    """
    Compare an enumeration with its orbit count.

    Args:
        config: Validated configuration.
        count: Closed-form count for config.
        colorings: Canonical colorings from the enumerator.
        walked: Complete assignments the enumerator visited.
        group: Prebuilt group for config (built here when omitted).
        stabilizers: |Stab(c)| per coloring from the enumerator (recomputed
            from the group when omitted).

    Returns:
        ConsistencyReport; ok is False on any mismatch and `error` holds the
        InternalConsistencyError describing it.
    """
    if group is None:
        group = SymmetryGroup(config.shape, config.family)

    expected = count.result_count
    actual = len(colorings)

    order = group.order
    if stabilizers is None:
        stabilizers = [stabilizer_size(c, group) for c in colorings]
    orbit_cover = sum(order // s for s in stabilizers)

    diagnostics: Tuple[RotationDiagnostic, ...] = ()
    if isinstance(config.shape, Ring) and config.quota is not None:
        diagnostics = rotation_diagnostics(config, colorings)

    size_ok = expected == actual
    cover_ok = orbit_cover == walked

    lines = []
    if not size_ok:
        lines.append(f"Error: Expected to find {expected} results, but found {actual} instead.")
    if not cover_ok:
        lines.append(
            f"Error: Emitted orbits cover {orbit_cover} colorings, "
            f"but {walked} were enumerated."
        )
    if lines:
        for d in diagnostics:
            lines.append(
                f"Estimated {d.expected} shapes with {d.step}-wise ({d.shift} step) "
                f"rotational symmetry, saw {d.actual}"
            )

    ok = size_ok and cover_ok
    message = "\n".join(lines) if lines else f"OK: {actual} canonical colorings"

    error = None
    if not ok:
        error = InternalConsistencyError(
            message,
            {
                "expected": expected,
                "actual": actual,
                "orbit_cover": orbit_cover,
                "walked": walked
            }
        )

    return ConsistencyReport(
        ok=ok,
        expected=expected,
        actual=actual,
        orbit_cover=orbit_cover,
        walked=walked,
        message=message,
        rotation_diagnostics=diagnostics,
        error=error
    )


def rotation_diagnostics(
    config: Config,
    colorings: Sequence[Coloring]
) -> Tuple[RotationDiagnostic, ...]:
    """
    Per-shift expected vs observed rotational symmetry counts for a quota ring.

    The expected value is the rotation class's quota-bounded fixed count
    divided by N. It is an estimate for display, not a Burnside term.
    """
    n = config.shape.n_beads
    quota = config.colour_limit
    result = []
    for shift in range(1, n):
        step = gcd(n, shift)
        cycle_length = n // step
        expected = simple_count(step, config.n_colours, quota // cycle_length) // n
        actual = sum(1 for c in colorings if _invariant_under_step(c, n, step))
        result.append(RotationDiagnostic(
            shift=shift,
            step=step,
            expected=expected,
            actual=actual
        ))
    return tuple(result)


def _invariant_under_step(coloring: Coloring, n: int, step: int) -> bool:
    return all(coloring.get(j) == coloring.get((j + step) % n) for j in range(n))
