"""
Core foundation: receipts, hashing, serialization, parameter registry.
"""

from .registry import param_registry, RegistryError
from .hashing import blake3_hash
from .bytesio import (
    serialize_coloring,
    serialize_result_set,
    SerializationError
)
from .receipts import (
    Receipts,
    assert_double_run_equal,
    assert_digests_equal,
    stable_json_bytes,
    ReceiptError,
    DeterminismError
)

__all__ = [
    # Registry
    "param_registry",
    "RegistryError",

    # Hashing
    "blake3_hash",

    # Serialization
    "serialize_coloring",
    "serialize_result_set",
    "SerializationError",

    # Receipts
    "Receipts",
    "assert_double_run_equal",
    "assert_digests_equal",
    "stable_json_bytes",
    "ReceiptError",
    "DeterminismError",
]
