"""
Canonical Frame Selection (group lex-min)

The canonical form of a coloring is the minimum, by packed value, over its
images under every literal element of the active SymmetryGroup. Packed
order puts position 0 in the most significant slot, so this is also the
lexicographic minimum of the per-position colour sequences, and images are
compared as colour tuples pulled through the group's source maps.

Tie-break: when several elements reach the minimum, the first in group
element order (identity first, table order after) names the frame.

Invariants:
  - Idempotent: canonicalize(canonicalize(c)) == canonicalize(c)
  - Orbit-invariant: canonicalize(g(c)) == canonicalize(c) for every g
  - Tie count of c == |Stab(c)|
"""

from typing import Dict, Sequence, Tuple

from .coloring import Coloring
from .symmetry import SymmetryGroup


def canonical_frame(
    coloring: Coloring,
    group: SymmetryGroup
) -> Tuple[str, Coloring, Dict]:
    """
    Return (element_name, canonical, receipts) for a coloring.

    Args:
        coloring: Coloring on group.shape.
        group: Active symmetry group.

    Returns:
        Tuple of (element_name, canonical, receipts):
          - element_name: first group element whose image is minimal
          - canonical: the minimal image
          - receipts: {"frame.element", "frame.tie_count", "frame.images"}

    Raises:
        ValueError: If the coloring's shape differs from the group's.
    """
    _check_shape(coloring, group)

    values = coloring.to_values()
    names = [element.name for element in group.elements()]

    min_image = None
    min_name = None
    tie_count = 0

    for name, source_of in zip(names, group.source_maps()):
        image = tuple(values[s] for s in source_of)
        if min_image is None or image < min_image:
            min_image = image
            min_name = name
            tie_count = 1
        elif image == min_image:
            tie_count += 1

    assert min_image is not None and min_name is not None

    receipts = {
        "frame.element": min_name,
        "frame.tie_count": tie_count,
        "frame.images": len(names)
    }

    return (min_name, Coloring.pack(coloring.shape, min_image), receipts)


def canonicalize(coloring: Coloring, group: SymmetryGroup) -> Coloring:
    """Lexicographically smallest image of `coloring` under `group`."""
    _check_shape(coloring, group)
    values = coloring.to_values()
    best = min(tuple(values[s] for s in source_of) for source_of in group.source_maps())
    return Coloring.pack(coloring.shape, best)


def stabilizer_size(coloring: Coloring, group: SymmetryGroup) -> int:
    """Number of group elements that leave `coloring` unchanged."""
    _check_shape(coloring, group)
    values = coloring.to_values()
    return sum(
        1 for source_of in group.source_maps()
        if all(values[s] == values[j] for j, s in enumerate(source_of))
    )


def canonical_ties(values: Sequence[int], source_maps) -> int:
    """
    Stabilizer size of `values` if it is its own canonical form, else 0.

    Each image is compared position by position and abandoned at the first
    difference, so non-canonical sequences usually exit after a few reads.
    The identity map always ties, so a canonical sequence returns >= 1.
    """
    ties = 0
    for source_of in source_maps:
        for j, s in enumerate(source_of):
            pulled = values[s]
            own = values[j]
            if pulled != own:
                if pulled < own:
                    return 0
                break
        else:
            ties += 1
    return ties


def _check_shape(coloring: Coloring, group: SymmetryGroup) -> None:
    if coloring.shape != group.shape:
        raise ValueError(
            f"Coloring on {coloring.shape!r} cannot be canonicalized by a group on {group.shape!r}"
        )
