"""
Core Verification: registry, hashing, receipts, byte frames.
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from orbitcount.core import (
    param_registry,
    blake3_hash,
    serialize_coloring,
    serialize_result_set,
    stable_json_bytes,
    Receipts,
    assert_double_run_equal,
    assert_digests_equal,
    ReceiptError,
    DeterminismError,
    SerializationError,
)
from orbitcount.kernel import Coloring, Grid, Ring
from orbitcount.kernel import coloring as coloring_module


def test_param_registry_keys_and_values():
    """Registry exposes exactly the frozen keys and matches the kernel constants."""
    reg = param_registry()

    required = {
        "version", "enumeration_threshold", "bits_per_slot",
        "ring_capacity_bits", "grid_capacity_bits", "slot_order",
        "colour_range", "ring_bead_range", "grid_dimension_range",
        "max_state_bits", "family_order", "scan_order", "hash_algo",
        "byte_frame_tags"
    }
    assert set(reg.keys()) == required

    assert reg["enumeration_threshold"] == 10000
    assert reg["bits_per_slot"] == coloring_module.BITS_PER_SLOT
    assert reg["ring_capacity_bits"] == coloring_module.RING_CAPACITY_BITS
    assert reg["grid_capacity_bits"] == coloring_module.GRID_CAPACITY_BITS
    assert reg["family_order"] == ["none", "rotate", "rotate+flip"]


def test_blake3_known_vector():
    assert blake3_hash(b"test") == (
        "4878ca0425c739fa427f7eda20fe845f6b2e46ba5fe2a14df5b1e32f50603215"
    )
    assert blake3_hash(b"abc") == blake3_hash(b"abc")
    assert blake3_hash(b"abc") != blake3_hash(b"abd")


def test_stable_json_is_key_order_independent():
    assert stable_json_bytes({"b": 1, "a": [1, 2]}) == stable_json_bytes({"a": [1, 2], "b": 1})
    assert stable_json_bytes([[0, 1], [1, 0]]) == b"[[0,1],[1,0]]"


def test_receipts_reject_duplicates_and_floats():
    r = Receipts("test")
    r.put("count", 3)

    with pytest.raises(ReceiptError):
        r.put("count", 4)

    with pytest.raises(ReceiptError):
        r.put("ratio", 0.5)

    with pytest.raises(ReceiptError):
        r.put("nested", {"a": [1, 2.0]})

    with pytest.raises(ReceiptError):
        r.put("keys", {1: "x"})


def test_receipts_digest_structure():
    r = Receipts("orbits")
    r.put("result_count", 3)
    r.put("classes", [{"name": "I", "fixed": 4}])

    digest = r.digest()
    assert digest["section"] == "orbits"
    assert digest["version"] == param_registry()["version"]
    assert digest["payload"] == {"result_count": 3, "classes": [{"name": "I", "fixed": 4}]}
    assert len(digest["section_hash"]) == 64
    assert len(digest["param_registry_hash"]) == 64


def test_double_run_equal_passes_for_pure_builder():
    def build():
        r = Receipts("det")
        r.put("value", 42)
        return r

    assert_double_run_equal(build)


def test_double_run_equal_detects_drift():
    calls = []

    def build():
        calls.append(1)
        r = Receipts("drift")
        r.put("run", len(calls))
        return r

    with pytest.raises(DeterminismError) as exc_info:
        assert_double_run_equal(build)

    err = exc_info.value
    assert err.section == "drift"
    assert err.first_differing_key == "run"
    assert err.value_a == 1
    assert err.value_b == 2


def test_serialize_coloring_ring_frame():
    c = Coloring.from_values(Ring(3), [1, 2, 3])
    data = serialize_coloring(c)

    # tag + kind + W + H + ceil(30/8)=4 value bytes
    assert data[:4] == b"COL1"
    assert data[4] == 0
    assert data[5] == 3
    assert data[6] == 1
    assert len(data) == 4 + 3 + 4
    assert int.from_bytes(data[7:], byteorder="big") == c.value


def test_serialize_coloring_grid_frame():
    c = Coloring.from_values(Grid(2, 3), [0, 1, 2, 3, 4, 5])
    data = serialize_coloring(c)

    assert data[:4] == b"COL1"
    assert data[4] == 1
    assert (data[5], data[6]) == (2, 3)
    # ceil(75/8) = 10 value bytes
    assert len(data) == 4 + 3 + 10


def test_serialize_result_set_preserves_order():
    a = Coloring.from_values(Ring(2), [0, 1])
    b = Coloring.from_values(Ring(2), [1, 1])

    ab = serialize_result_set([a, b])
    ba = serialize_result_set([b, a])

    assert ab[:4] == b"SET1"
    assert int.from_bytes(ab[4:8], byteorder="big") == 2
    assert ab != ba
    assert serialize_result_set([]) == b"SET1" + (0).to_bytes(4, byteorder="big")


def test_serialize_coloring_rejects_unknown_shape():
    class Blob:
        kind = "blob"
        dims = (1, 1)

    class FakeColoring:
        shape = Blob()
        value = 0
        capacity_bits = 3

    with pytest.raises(SerializationError):
        serialize_coloring(FakeColoring())


def test_assert_digests_equal_names_differing_key():
    a = Receipts("enumerate")
    a.put("walked", 8)
    a.put("canonical_count", 3)
    b = Receipts("enumerate")
    b.put("walked", 8)
    b.put("canonical_count", 4)

    assert_digests_equal(a.digest(), a.digest())

    with pytest.raises(DeterminismError) as exc_info:
        assert_digests_equal(a.digest(), b.digest())
    err = exc_info.value
    assert err.section == "enumerate"
    assert err.first_differing_key == "canonical_count"
    assert (err.value_a, err.value_b) == (3, 4)
