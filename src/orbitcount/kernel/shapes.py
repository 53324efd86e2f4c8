"""
Shapes: the fixed position layouts a coloring is laid over.

  - Ring(n_beads): positions 0..N-1 around a cycle
  - Grid(width, height): cell (x, y) at position y*W + x (row-major)
"""

from dataclasses import dataclass
from typing import Tuple, Union


@dataclass(frozen=True)
class Ring:
    n_beads: int

    kind = "ring"

    @property
    def positions(self) -> int:
        return self.n_beads

    @property
    def is_square(self) -> bool:
        return False

    @property
    def dims(self) -> Tuple[int, int]:
        return (self.n_beads, 1)


@dataclass(frozen=True)
class Grid:
    width: int
    height: int

    kind = "grid"

    @property
    def positions(self) -> int:
        return self.width * self.height

    @property
    def is_square(self) -> bool:
        return self.width == self.height

    @property
    def dims(self) -> Tuple[int, int]:
        return (self.width, self.height)


Shape = Union[Ring, Grid]
