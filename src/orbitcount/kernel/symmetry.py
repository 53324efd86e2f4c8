"""
Symmetry Groups: data-driven tables of group-element classes.

Each ElementClass groups literal symmetry operations that share a cycle
structure on the positions of a shape:
  - orbits:     how many literal group elements the class stands for
  - cycles:     cycle-length multiset; a coloring is fixed by the class iff
                it is constant on every cycle, so len(cycles) is the number
                of free positions
  - applicable: (family, is_square) -> bool, the only place that decides
                whether a class takes part in a count or a canonicalization
  - elements:   the literal operations as Coloring -> Coloring maps

Ring (N beads):
  I         1      [1]*N
  R{i}      1      [N/g]*g, g = gcd(N, i), one class per shift i in 1..N-1
  FEDGE     N/2    [2]*(N/2)                even N, axis through edges
  FCORNER   N/2    [1, 1] + [2]*((N-2)/2)   even N, axis through beads
  FMIXED    N      [1] + [2]*((N-1)/2)      odd N

Grid (W x H):
  I         1      [1]*W*H
  R90       2      [4]*(n*n//4) (+[1] if n odd)     square only
  R180      1      [2]*(W*H//2) (+[1] if W, H odd)
  FX        1      columns paired, middle column fixed if W odd
  FY        1      rows paired, middle row fixed if H odd
  FD        2      [1]*n + [2]*(n*(n-1)/2)           square only
"""

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from math import gcd
from typing import Callable, List, Optional, Tuple

from .bag_draw import count_histogram, count_weighted, histogram, simple_count
from .coloring import Coloring
from .shapes import Grid, Ring, Shape


class SymmetryFamily(Enum):
    NONE = "none"
    ROTATE = "rotate"
    ROTATE_AND_FLIP = "rotate+flip"

    @property
    def rotates(self) -> bool:
        return self in (SymmetryFamily.ROTATE, SymmetryFamily.ROTATE_AND_FLIP)

    @property
    def flips(self) -> bool:
        return self is SymmetryFamily.ROTATE_AND_FLIP


@dataclass(frozen=True)
class GroupElement:
    name: str
    apply: Callable[[Coloring], Coloring]


@dataclass(frozen=True)
class ElementClass:
    name: str
    orbits: Callable[[Shape], int]
    cycles: Callable[[Shape], Tuple[int, ...]]
    applicable: Callable[[SymmetryFamily, bool], bool]
    elements: Callable[[Shape], Tuple[GroupElement, ...]]

    def free_positions(self, shape: Shape) -> int:
        return len(self.cycles(shape))

    def fixed_count(self, shape: Shape, n_colours: int, quota: Optional[int] = None) -> int:
        """
        Colorings fixed by one element of this class.

        Unrestricted: n_colours ** free_positions. With a quota, each cycle is
        a draw whose weight is its length.
        """
        cycles = self.cycles(shape)
        if quota is None:
            return n_colours ** len(cycles)
        return restricted_fixed_count(cycles, n_colours, quota)


def restricted_fixed_count(cycles: Tuple[int, ...], n_colours: int, quota: int) -> int:
    """
    Quota-bounded fixed-point count for a cycle-length multiset.

    Strategy by cycle structure:
      - all cycles one length L: uniform form, each colour holds quota // L draws
      - one fixed position plus cycles of one length L: pick the fixed
        position's colour (n_colours ways, all colours alike), then bucket
        that colour at (quota-1) // L and the rest at quota // L
      - anything else: weighted histogram form, longest cycles first
    """
    lengths = sorted(cycles, reverse=True)
    if not lengths:
        return 1

    if len(set(lengths)) == 1:
        L = lengths[0]
        return simple_count(len(lengths), n_colours, quota // L)

    rest = lengths[:-1]
    if lengths.count(1) == 1 and len(set(rest)) == 1:
        L = rest[0]
        left_counts = [0] * (quota // L + 1)
        left_counts[quota // L] += n_colours - 1
        left_counts[(quota - 1) // L] += 1
        return n_colours * count_histogram(len(rest), left_counts)

    return count_weighted(lengths, histogram(n_colours, quota))


# ============================================================================
# Applicability predicates
# ============================================================================

def _always(family: SymmetryFamily, square: bool) -> bool:
    return True


def _rotates(family: SymmetryFamily, square: bool) -> bool:
    return family.rotates


def _rotates_square(family: SymmetryFamily, square: bool) -> bool:
    return family.rotates and square


def _flips(family: SymmetryFamily, square: bool) -> bool:
    return family.flips


def _flips_square(family: SymmetryFamily, square: bool) -> bool:
    return family.flips and square


def _identity_elements(shape: Shape) -> Tuple[GroupElement, ...]:
    return (GroupElement("I", Coloring.copy),)


# ============================================================================
# Ring table
# ============================================================================

def _ring_rotation(shift: int) -> ElementClass:
    def cycles(shape: Ring) -> Tuple[int, ...]:
        g = gcd(shape.n_beads, shift)
        return (shape.n_beads // g,) * g

    return ElementClass(
        name=f"R{shift}",
        orbits=lambda shape: 1,
        cycles=cycles,
        applicable=_rotates,
        elements=lambda shape: (GroupElement(f"R{shift}", lambda c: c.rotate(shift)),)
    )


def _ring_flips(name: str, shifts: Callable[[int], List[int]], cycles) -> ElementClass:
    # flip then rotate(k): bead j takes the colour of bead (N-1+k-j) mod N
    def elements(shape: Ring) -> Tuple[GroupElement, ...]:
        return tuple(
            GroupElement(f"F{k}", lambda c, k=k: c.flip().rotate(k))
            for k in shifts(shape.n_beads)
        )

    return ElementClass(
        name=name,
        orbits=lambda shape: len(shifts(shape.n_beads)),
        cycles=cycles,
        applicable=_flips,
        elements=elements
    )


@lru_cache(maxsize=None)
def _ring_classes(n_beads: int) -> Tuple[ElementClass, ...]:
    classes = [
        ElementClass(
            name="I",
            orbits=lambda shape: 1,
            cycles=lambda shape: (1,) * shape.n_beads,
            applicable=_always,
            elements=_identity_elements
        )
    ]
    classes.extend(_ring_rotation(i) for i in range(1, n_beads))

    if n_beads % 2 == 0:
        classes.append(_ring_flips(
            "FEDGE",
            lambda n: [k for k in range(n) if k % 2 == 0],
            lambda shape: (2,) * (shape.n_beads // 2)
        ))
        classes.append(_ring_flips(
            "FCORNER",
            lambda n: [k for k in range(n) if k % 2 == 1],
            lambda shape: (1, 1) + (2,) * ((shape.n_beads - 2) // 2)
        ))
    else:
        classes.append(_ring_flips(
            "FMIXED",
            lambda n: list(range(n)),
            lambda shape: (1,) + (2,) * ((shape.n_beads - 1) // 2)
        ))

    return tuple(classes)


# ============================================================================
# Grid table
# ============================================================================

def _rot90_cycles(shape: Grid) -> Tuple[int, ...]:
    n = shape.width
    return (4,) * (n * n // 4) + ((1,) if n % 2 == 1 else ())


def _rot180_cycles(shape: Grid) -> Tuple[int, ...]:
    W, H = shape.dims
    center = (1,) if W % 2 == 1 and H % 2 == 1 else ()
    return (2,) * (W * H // 2) + center


def _hflip_cycles(shape: Grid) -> Tuple[int, ...]:
    W, H = shape.dims
    return (2,) * (H * (W // 2)) + (1,) * (H if W % 2 == 1 else 0)


def _vflip_cycles(shape: Grid) -> Tuple[int, ...]:
    W, H = shape.dims
    return (2,) * (W * (H // 2)) + (1,) * (W if H % 2 == 1 else 0)


def _dflip_cycles(shape: Grid) -> Tuple[int, ...]:
    n = shape.width
    return (2,) * (n * (n - 1) // 2) + (1,) * n


GRID_CLASSES: Tuple[ElementClass, ...] = (
    ElementClass(
        name="I",
        orbits=lambda shape: 1,
        cycles=lambda shape: (1,) * shape.positions,
        applicable=_always,
        elements=_identity_elements
    ),
    ElementClass(
        name="R90",
        orbits=lambda shape: 2,
        cycles=_rot90_cycles,
        applicable=_rotates_square,
        elements=lambda shape: (
            GroupElement("R90", Coloring.rotate_90),
            GroupElement("R270", Coloring.rotate_270),
        )
    ),
    ElementClass(
        name="R180",
        orbits=lambda shape: 1,
        cycles=_rot180_cycles,
        applicable=_rotates,
        elements=lambda shape: (GroupElement("R180", Coloring.rotate_180),)
    ),
    ElementClass(
        name="FX",
        orbits=lambda shape: 1,
        cycles=_hflip_cycles,
        applicable=_flips,
        elements=lambda shape: (GroupElement("FX", Coloring.hflip),)
    ),
    ElementClass(
        name="FY",
        orbits=lambda shape: 1,
        cycles=_vflip_cycles,
        applicable=_flips,
        elements=lambda shape: (GroupElement("FY", Coloring.vflip),)
    ),
    ElementClass(
        name="FD",
        orbits=lambda shape: 2,
        cycles=_dflip_cycles,
        applicable=_flips_square,
        elements=lambda shape: (
            GroupElement("FD", Coloring.dflip),
            GroupElement("FAD", Coloring.antidflip),
        )
    ),
)


def _trace_source_map(element: GroupElement, shape: Shape) -> Tuple[int, ...]:
    source_of = [0] * shape.positions
    for p in range(shape.positions):
        marked = Coloring(shape)
        marked.set(p, 1)
        image = element.apply(marked)
        targets = [j for j in range(shape.positions) if image.get(j) == 1]
        if len(targets) != 1:
            raise ValueError(f"{element.name} does not permute the positions of {shape!r}")
        source_of[targets[0]] = p
    return tuple(source_of)


def element_classes(shape: Shape) -> Tuple[ElementClass, ...]:
    """Full class table for a shape, before applicability filtering."""
    if isinstance(shape, Ring):
        return _ring_classes(shape.n_beads)
    if isinstance(shape, Grid):
        return GRID_CLASSES
    raise ValueError(f"Unknown shape: {shape!r}")


class SymmetryGroup:
    """
    The active classes of one shape under one family.

    Attributes:
        shape: The shape acted on.
        family: The symmetry family.
        classes: Applicable ElementClasses in table order.
    """

    def __init__(self, shape: Shape, family: SymmetryFamily):
        self.shape = shape
        self.family = family
        self.classes = tuple(
            ec for ec in element_classes(shape)
            if ec.applicable(family, shape.is_square)
        )
        self._elements = []
        for ec in self.classes:
            self._elements.extend(ec.elements(shape))
        self._source_maps = None

    @property
    def order(self) -> int:
        """Number of literal group elements (sum of class orbits)."""
        return sum(ec.orbits(self.shape) for ec in self.classes)

    def elements(self) -> List[GroupElement]:
        """Every literal group element, identity first."""
        return list(self._elements)

    def source_maps(self) -> Tuple[Tuple[int, ...], ...]:
        """
        Pull index map of every literal element, in element order.

        Position j of g(c) holds the colour of c at source_maps()[k][j] for
        the k-th element g. Built once per group by tracing a single marked
        position through each element; needs a shape that fits a Coloring.
        """
        if self._source_maps is None:
            self._source_maps = tuple(
                _trace_source_map(element, self.shape) for element in self._elements
            )
        return self._source_maps

    def __repr__(self):
        names = [ec.name for ec in self.classes]
        return f"SymmetryGroup({self.shape!r}, {self.family.value}, {names})"
