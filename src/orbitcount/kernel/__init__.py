"""
Kernel: packed colorings, bag-draw counters, symmetry tables, canonical frames.

Components:
  - shapes: Ring / Grid position layouts
  - coloring: fixed-capacity packed Coloring with geometric remaps
  - bag_draw: bounded-multiplicity counters (general, uniform, histogram)
  - symmetry: SymmetryFamily, ElementClass tables, SymmetryGroup
  - frames: group lex-min canonicalization over precomputed source maps
"""

from .shapes import Ring, Grid, Shape
from .coloring import (
    Coloring,
    CapacityError,
    capacity_bits,
    fits_capacity
)
from .bag_draw import (
    count_bounded,
    count_uniform,
    simple_count,
    count_histogram,
    count_weighted,
    histogram
)
from .symmetry import (
    SymmetryFamily,
    GroupElement,
    ElementClass,
    SymmetryGroup,
    element_classes,
    restricted_fixed_count
)
from .frames import (
    canonicalize,
    canonical_frame,
    canonical_ties,
    stabilizer_size
)

__all__ = [
    # Shapes
    "Ring",
    "Grid",
    "Shape",

    # Coloring
    "Coloring",
    "CapacityError",
    "capacity_bits",
    "fits_capacity",

    # Bag draws
    "count_bounded",
    "count_uniform",
    "simple_count",
    "count_histogram",
    "count_weighted",
    "histogram",

    # Symmetry
    "SymmetryFamily",
    "GroupElement",
    "ElementClass",
    "SymmetryGroup",
    "element_classes",
    "restricted_fixed_count",

    # Frames
    "canonicalize",
    "canonical_frame",
    "canonical_ties",
    "stabilizer_size",
]
