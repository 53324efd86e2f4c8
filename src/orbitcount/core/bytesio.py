"""
Byte Serialization (Big-Endian)

Stable byte frames for packed colorings and canonical result sets. These
frames are what gets hashed into the enumerate receipts; the JSON export
for external writers lives in the runner.

Frame layouts (frozen):
  COL1: tag, 1 byte kind (0 ring, 1 grid), 1 byte W, 1 byte H,
        ceil(capacity_bits / 8) bytes of packed value (big-endian)
  SET1: tag, 4 bytes count (uint32, big-endian), then count COL1 frames
"""

import math

_KIND_CODES = {"ring": 0, "grid": 1}


def serialize_coloring(coloring) -> bytes:
    """
    Encode one packed coloring as a COL1 frame.

    Args:
        coloring: A kernel Coloring (anything exposing shape, value, capacity_bits).

    Returns:
        bytes: Deterministic serialization.

    Raises:
        SerializationError: If the shape kind is unknown or the value overflows capacity.
    """
    shape = coloring.shape
    if shape.kind not in _KIND_CODES:
        raise SerializationError(f"Unknown shape kind: '{shape.kind}'")

    W, H = shape.dims
    if W > 255 or H > 255:
        raise SerializationError(f"Dimensions too large: W={W}, H={H}")

    capacity = coloring.capacity_bits
    if coloring.value < 0 or coloring.value >> capacity:
        raise SerializationError(
            f"Packed value {coloring.value:#x} does not fit in {capacity} bits"
        )

    stream = bytearray()
    stream.extend(b"COL1")
    stream.append(_KIND_CODES[shape.kind])
    stream.append(W)
    stream.append(H)
    stream.extend(coloring.value.to_bytes(math.ceil(capacity / 8), byteorder='big'))

    return bytes(stream)


def serialize_result_set(colorings) -> bytes:
    """
    Encode an ordered sequence of colorings as a SET1 frame.

    Order is preserved, so callers pass the already sorted canonical set.
    """
    colorings = list(colorings)
    if len(colorings) > 0xFFFFFFFF:
        raise SerializationError(f"Too many colorings: {len(colorings)}")

    stream = bytearray()
    stream.extend(b"SET1")
    stream.extend(len(colorings).to_bytes(4, byteorder='big'))
    for coloring in colorings:
        stream.extend(serialize_coloring(coloring))

    return bytes(stream)


class SerializationError(Exception):
    """Raised when a coloring cannot be encoded into its byte frame."""
    pass
