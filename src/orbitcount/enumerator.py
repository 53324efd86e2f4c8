"""
Enumerator: backtracking walk + canonical filter.

Walks every assignment of colours to positions in scan order (ring 0..N-1,
grid row-major), colours ascending, with running per-colour usage counts.
A branch is pruned as soon as a colour's usage would exceed the quota.

A complete assignment is kept only if no group image of it is
lexicographically smaller. Every orbit is walked in full, so each orbit's
minimum is kept exactly once and no dedup table is needed. The walk visits
assignments in ascending packed order, so the output is already sorted.
The tie count from the same check is the coloring's stabilizer size.

Only run when the orbit count is at or below the enumeration threshold;
the runner enforces this.
"""

import sys
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .config import Config
from .kernel.coloring import Coloring
from .kernel.frames import canonical_ties
from .kernel.symmetry import SymmetryGroup


@dataclass(frozen=True)
class Enumeration:
    colorings: Tuple[Coloring, ...]  # sorted canonical representatives
    walked: int  # complete assignments visited
    stabilizers: Tuple[int, ...] = ()  # |Stab(c)| per coloring, same order


def enumerate_canonical(
    config: Config,
    group: Optional[SymmetryGroup] = None,
    debug: bool = False
) -> Enumeration:
    """
    Collect one canonical coloring per orbit.

    Args:
        config: Validated configuration.
        group: Prebuilt group for config (built here when omitted).
        debug: Print walk statistics to stderr.

    Returns:
        Enumeration with the sorted canonical colorings, their stabilizer
        sizes and the walk size.

    Raises:
        CapacityError: If config.shape does not fit a packed Coloring.
    """
    if group is None:
        group = SymmetryGroup(config.shape, config.family)

    # Fails fast for shapes beyond the packed capacity
    Coloring(config.shape)

    walk = _Walk(config, group.source_maps())
    walk.run(0)

    if debug:
        print(f"\n=== ENUMERATE {config.shape!r} ===", file=sys.stderr)
        print(f"  group order: {group.order}", file=sys.stderr)
        print(f"  assignments walked: {walk.walked}", file=sys.stderr)
        print(f"  canonical colorings: {len(walk.colorings)}", file=sys.stderr)

    return Enumeration(
        colorings=tuple(walk.colorings),
        walked=walk.walked,
        stabilizers=tuple(walk.stabilizers)
    )


class _Walk:
    """Mutable state of one backtracking walk."""

    def __init__(self, config: Config, source_maps):
        self.shape = config.shape
        self.positions = config.positions
        self.n_colours = config.n_colours
        self.limit = config.colour_limit
        self.source_maps = source_maps
        self.values: List[int] = [0] * config.positions
        self.usage: List[int] = [0] * config.n_colours
        self.colorings: List[Coloring] = []
        self.stabilizers: List[int] = []
        self.walked = 0

    def run(self, position: int) -> None:
        if position == self.positions:
            self.walked += 1
            ties = canonical_ties(self.values, self.source_maps)
            if ties:
                self.colorings.append(Coloring.pack(self.shape, self.values))
                self.stabilizers.append(ties)
            return

        for color in range(self.n_colours):
            if self.usage[color] + 1 > self.limit:
                continue
            self.usage[color] += 1
            self.values[position] = color
            self.run(position + 1)
            self.usage[color] -= 1
