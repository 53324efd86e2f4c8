"""
Parameter Registry

Frozen constants for the orbit counter: enumeration threshold, packed
coloring layout, configuration ranges and symmetry family order.

The registry is hashed into every section receipt, so two runs under
different constants can never produce matching receipts.
"""


def param_registry() -> dict:
    """
    Returns a frozen mapping of all global constants used by the engine.

    Keys and values are JSON-serializable primitives or lists.

    Returns:
        dict: Frozen parameter mapping with exact keys and values.

    Raises:
        RegistryError: If any required key is missing (internal consistency check).
    """
    registry = {
        "version": "1.0",

        # Canonical sets above this size are never materialized
        "enumeration_threshold": 10000,

        # Packed coloring layout: 3 bits per slot, slot 0 most significant
        "bits_per_slot": 3,
        "ring_capacity_bits": 30,
        "grid_capacity_bits": 75,
        "slot_order": "msb-first",

        # Configuration ranges (inclusive)
        "colour_range": [2, 8],
        "ring_bead_range": [2, 10],
        "grid_dimension_range": [1, 8],
        "max_state_bits": 64,

        # Symmetry families in frozen order
        "family_order": ["none", "rotate", "rotate+flip"],

        # Scan order used by the enumerator
        "scan_order": "row-major",

        "hash_algo": "BLAKE3",
        "byte_frame_tags": {
            "COLORING": "COL1",
            "RESULT_SET": "SET1"
        }
    }

    required_keys = {
        "version", "enumeration_threshold", "bits_per_slot",
        "ring_capacity_bits", "grid_capacity_bits", "slot_order",
        "colour_range", "ring_bead_range", "grid_dimension_range",
        "max_state_bits", "family_order", "scan_order", "hash_algo",
        "byte_frame_tags"
    }

    actual_keys = set(registry.keys())
    if actual_keys != required_keys:
        missing = required_keys - actual_keys
        extra = actual_keys - required_keys
        raise RegistryError(
            f"param_registry() key mismatch. Missing: {missing}, Extra: {extra}"
        )

    return registry


class RegistryError(Exception):
    """Raised when param_registry() has missing or unexpected keys."""
    pass
