"""
Coloring: fixed-capacity packed colour assignment over a Shape.

Representation:
  - One Python int of `capacity_bits` bits (30 for rings, 75 for grids)
  - 3 bits per slot, slot 0 in the most significant bits
  - Unused trailing slots are always zero
  - Ring: slot i = bead i
  - Grid: slot y*W + x = cell (x, y)

Because slot 0 is most significant and every coloring of a shape has the
same capacity, ordering by packed value is the same as ordering the
per-position colour sequences lexicographically.

Geometric remaps (pull mapping, dest <- src):
  Ring:
    rotate(k):  i      <- (i - k) mod N
    flip:       i      <- N-1-i
  Grid (x', y' = destination):
    R90:        x', y' <- W-1-y', x'        (square only)
    R180:       x', y' <- W-1-x', H-1-y'
    R270:       x', y' <- y', H-1-x'        (square only)
    FX:         x', y' <- W-1-x', y'
    FY:         x', y' <- x', H-1-y'
    FD:         x', y' <- y', x'            (square only)
    FAD:        x', y' <- W-1-y', H-1-x'    (square only)
"""

from typing import Iterable, List, Sequence

from .shapes import Grid, Ring, Shape

BITS_PER_SLOT = 3
SLOT_MASK = (1 << BITS_PER_SLOT) - 1
RING_CAPACITY_BITS = 30
GRID_CAPACITY_BITS = 75


def capacity_bits(shape: Shape) -> int:
    """Packed width reserved for colorings of this shape kind."""
    if isinstance(shape, Ring):
        return RING_CAPACITY_BITS
    if isinstance(shape, Grid):
        return GRID_CAPACITY_BITS
    raise ValueError(f"Unknown shape: {shape!r}")


def fits_capacity(shape: Shape) -> bool:
    """True if every position of the shape has a slot in the packed word."""
    return shape.positions * BITS_PER_SLOT <= capacity_bits(shape)


class Coloring:
    """
    Packed position -> colour map.

    `get`/`set` are the only accessors that touch a single slot; `set` is the
    only mutator. Every remap returns a new Coloring and copies colour values
    verbatim.

    Raises:
        CapacityError: If the shape has more positions than the packed word holds.
    """

    __slots__ = ("shape", "value")

    def __init__(self, shape: Shape, value: int = 0):
        if not fits_capacity(shape):
            raise CapacityError(
                f"{shape!r} needs {shape.positions * BITS_PER_SLOT} bits, "
                f"capacity is {capacity_bits(shape)}"
            )
        if value < 0 or value >> capacity_bits(shape):
            raise ValueError(f"Packed value {value:#x} out of range for {shape!r}")
        self.shape = shape
        self.value = value

    @classmethod
    def from_values(cls, shape: Shape, values: Iterable[int]) -> "Coloring":
        """Pack a flat colour sequence (scan order) into a new Coloring."""
        coloring = cls(shape)
        values = list(values)
        if len(values) != shape.positions:
            raise ValueError(
                f"Expected {shape.positions} values for {shape!r}, got {len(values)}"
            )
        for position, color in enumerate(values):
            coloring.set(position, color)
        return coloring

    @classmethod
    def pack(cls, shape: Shape, values: Sequence[int]) -> "Coloring":
        """
        Pack a full colour sequence with shifts only.

        No per-slot checks: `values` must hold exactly shape.positions colours,
        each already in 0..7 (e.g. read back from another Coloring).
        """
        packed = 0
        for color in values:
            packed = (packed << BITS_PER_SLOT) | color
        coloring = cls(shape)
        coloring.value = packed << (capacity_bits(shape) - BITS_PER_SLOT * len(values))
        return coloring

    @property
    def capacity_bits(self) -> int:
        return capacity_bits(self.shape)

    def _shift(self, position: int) -> int:
        if not 0 <= position < self.shape.positions:
            raise ValueError(
                f"Position {position} out of range for {self.shape!r}"
            )
        return self.capacity_bits - BITS_PER_SLOT * (position + 1)

    def get(self, position: int) -> int:
        return (self.value >> self._shift(position)) & SLOT_MASK

    def set(self, position: int, color: int) -> None:
        if not 0 <= color <= SLOT_MASK:
            raise ValueError(f"Colour {color} does not fit in {BITS_PER_SLOT} bits")
        shift = self._shift(position)
        self.value = (self.value & ~(SLOT_MASK << shift)) | (color << shift)

    def cell(self, x: int, y: int) -> int:
        """Grid addressing: colour of cell (x, y)."""
        W, H = self._grid_dims()
        if not (0 <= x < W and 0 <= y < H):
            raise ValueError(f"Cell ({x},{y}) out of range for {self.shape!r}")
        return self.get(y * W + x)

    def set_cell(self, x: int, y: int, color: int) -> None:
        W, H = self._grid_dims()
        if not (0 <= x < W and 0 <= y < H):
            raise ValueError(f"Cell ({x},{y}) out of range for {self.shape!r}")
        self.set(y * W + x, color)

    def copy(self) -> "Coloring":
        return Coloring(self.shape, self.value)

    def to_values(self) -> List[int]:
        """Flat colour list in scan order."""
        return [self.get(p) for p in range(self.shape.positions)]

    def to_nested(self) -> list:
        """
        Export structure: a ring is a flat list of N colour indices, a grid
        is H rows of W colour indices.
        """
        values = self.to_values()
        if isinstance(self.shape, Ring):
            return values
        W, H = self.shape.dims
        return [values[y * W:(y + 1) * W] for y in range(H)]

    # ------------------------------------------------------------------
    # Remaps
    # ------------------------------------------------------------------

    def permute(self, source_of: Sequence[int]) -> "Coloring":
        """
        Pull remap: position j of the result takes the colour at source_of[j].

        Raises:
            ValueError: If source_of is not a permutation of the positions.
        """
        n = self.shape.positions
        if len(source_of) != n or sorted(source_of) != list(range(n)):
            raise ValueError(f"Not a permutation of {n} positions: {list(source_of)}")
        values = self.to_values()
        return Coloring.from_values(self.shape, [values[s] for s in source_of])

    def rotate(self, k: int) -> "Coloring":
        """Ring rotation: position i receives the colour previously at (i-k) mod N."""
        N = self._ring_size()
        return self.permute([(i - k) % N for i in range(N)])

    def flip(self) -> "Coloring":
        """Ring reflection: index reversal."""
        N = self._ring_size()
        return self.permute([N - 1 - i for i in range(N)])

    def rotate_90(self) -> "Coloring":
        W, H = self._square_dims("rotate_90")
        return self._grid_pull(lambda x, y: (W - 1 - y, x))

    def rotate_180(self) -> "Coloring":
        W, H = self._grid_dims()
        return self._grid_pull(lambda x, y: (W - 1 - x, H - 1 - y))

    def rotate_270(self) -> "Coloring":
        W, H = self._square_dims("rotate_270")
        return self._grid_pull(lambda x, y: (y, H - 1 - x))

    def hflip(self) -> "Coloring":
        W, H = self._grid_dims()
        return self._grid_pull(lambda x, y: (W - 1 - x, y))

    def vflip(self) -> "Coloring":
        W, H = self._grid_dims()
        return self._grid_pull(lambda x, y: (x, H - 1 - y))

    def dflip(self) -> "Coloring":
        """Reflection about the main diagonal (x == y)."""
        self._square_dims("dflip")
        return self._grid_pull(lambda x, y: (y, x))

    def antidflip(self) -> "Coloring":
        """Reflection about the anti-diagonal (x + y == W-1)."""
        W, H = self._square_dims("antidflip")
        return self._grid_pull(lambda x, y: (W - 1 - y, H - 1 - x))

    def _grid_pull(self, source_xy) -> "Coloring":
        W, H = self._grid_dims()
        source_of = []
        for y in range(H):
            for x in range(W):
                sx, sy = source_xy(x, y)
                source_of.append(sy * W + sx)
        return self.permute(source_of)

    def _ring_size(self) -> int:
        if not isinstance(self.shape, Ring):
            raise ValueError(f"Ring remap applied to {self.shape!r}")
        return self.shape.n_beads

    def _grid_dims(self):
        if not isinstance(self.shape, Grid):
            raise ValueError(f"Grid remap applied to {self.shape!r}")
        return self.shape.dims

    def _square_dims(self, op: str):
        W, H = self._grid_dims()
        if W != H:
            raise ValueError(f"{op} requires a square grid, got {W}x{H}")
        return W, H

    # ------------------------------------------------------------------
    # Ordering / hashing by (shape, packed value)
    # ------------------------------------------------------------------

    def __eq__(self, other):
        if not isinstance(other, Coloring):
            return NotImplemented
        return self.shape == other.shape and self.value == other.value

    def __lt__(self, other: "Coloring") -> bool:
        if not isinstance(other, Coloring):
            return NotImplemented
        if self.shape != other.shape:
            raise ValueError(f"Cannot order {self.shape!r} against {other.shape!r}")
        return self.value < other.value

    def __le__(self, other: "Coloring") -> bool:
        return self == other or self < other

    def __hash__(self):
        return hash((self.shape, self.value))

    def __repr__(self):
        return f"Coloring({self.shape!r}, {self.to_nested()})"


class CapacityError(ValueError):
    """Raised when a shape has more positions than the packed coloring can hold."""
    pass
