"""
Section Receipts & Double-Run Checker

Every pipeline stage (config, orbits, enumerate, consistency) records what
it computed into an ordered, section-scoped receipt. A digest binds the
payload to the parameter registry and commits to it with a BLAKE3 hash.

Receipts carry no floats, timestamps or object reprs, so a rerun on the
same configuration yields byte-identical digests.
"""

import json
from typing import Any, Callable

from .registry import param_registry
from .hashing import blake3_hash


class Receipts:
    """
    Ordered key/value log for one pipeline section.

    Allowed payload values: int, bool, str, None and lists, tuples or
    str-keyed dicts of those. Keys are unique within a section.
    """

    def __init__(self, section: str):
        self.section = section
        self.payload = []  # list of (key, value) to preserve insertion order

    def put(self, key: str, value: Any) -> None:
        """
        Append a key/value pair.

        Raises:
            ReceiptError: If key is duplicate or value has a forbidden type.
        """
        if any(k == key for k, _ in self.payload):
            raise ReceiptError(f"Duplicate key in receipts: '{key}'")

        _validate_receipt_value(value, key)

        self.payload.append((key, value))

    def digest(self) -> dict:
        """
        Returns the section digest.

        Format:
          {
            "section": section,
            "version": registry version,
            "param_registry_hash": blake3(stable_json(param_registry())),
            "payload": {key: value, ...},
            "section_hash": blake3(stable_json(all of the above))
          }
        """
        registry = param_registry()
        registry_hash = blake3_hash(stable_json_bytes(registry))

        pre_digest = {
            "section": self.section,
            "version": registry["version"],
            "param_registry_hash": registry_hash,
            "payload": {k: v for k, v in self.payload}
        }

        section_hash = blake3_hash(stable_json_bytes(pre_digest))

        return {
            **pre_digest,
            "section_hash": section_hash
        }


def assert_double_run_equal(build_section_callable: Callable[[], Receipts]) -> None:
    """
    Build a section twice and verify both digests carry the same section_hash.

    Raises:
        DeterminismError: If the hashes differ.

    Example:
        >>> def build():
        ...     r = Receipts("orbits")
        ...     r.put("result_count", 3)
        ...     return r
        >>> assert_double_run_equal(build)  # passes
    """
    assert_digests_equal(
        build_section_callable().digest(),
        build_section_callable().digest()
    )


def assert_digests_equal(digest_a: dict, digest_b: dict) -> None:
    """
    Verify two digests of the same section carry the same section_hash.

    Raises:
        DeterminismError: Naming the first payload key whose values differ.
    """
    hash_a = digest_a["section_hash"]
    hash_b = digest_b["section_hash"]

    if hash_a != hash_b:
        payload_a = digest_a["payload"]
        payload_b = digest_b["payload"]

        differing_key = None
        val_a = val_b = None
        for key in sorted(set(payload_a.keys()) | set(payload_b.keys())):
            val_a = payload_a.get(key, "<MISSING>")
            val_b = payload_b.get(key, "<MISSING>")
            if val_a != val_b:
                differing_key = key
                break

        raise DeterminismError(
            section=digest_a["section"],
            first_differing_key=differing_key,
            value_a=val_a if differing_key else None,
            value_b=val_b if differing_key else None,
            hash_a=hash_a,
            hash_b=hash_b
        )


def stable_json_bytes(obj: Any) -> bytes:
    """
    Serialize to deterministic JSON bytes: sorted keys, compact separators, UTF-8.
    """
    json_str = json.dumps(
        obj,
        sort_keys=True,
        ensure_ascii=False,
        separators=(',', ':')
    )
    return json_str.encode('utf-8')


def _validate_receipt_value(value: Any, key: str) -> None:
    """
    Recursively reject anything that is not int/bool/str/None or a container of them.

    Raises:
        ReceiptError: On floats, non-str dict keys or any other type.
    """
    if value is None or isinstance(value, (bool, int, str)):
        return

    if isinstance(value, float):
        raise ReceiptError(
            f"Floats forbidden in receipts (key: '{key}'). Counts are exact integers."
        )

    if isinstance(value, (list, tuple)):
        for i, item in enumerate(value):
            _validate_receipt_value(item, f"{key}[{i}]")
        return

    if isinstance(value, dict):
        for k, v in value.items():
            if not isinstance(k, str):
                raise ReceiptError(
                    f"Dict keys must be strings in receipts (key: '{key}', dict_key: {k})"
                )
            _validate_receipt_value(v, f"{key}.{k}")
        return

    raise ReceiptError(
        f"Invalid type in receipts: {type(value).__name__} (key: '{key}'). "
        f"Allowed: int, bool, str, None, list, tuple, dict."
    )


class ReceiptError(Exception):
    """Raised on a duplicate receipt key or a value of a forbidden type."""
    pass


class DeterminismError(Exception):
    """Raised when two runs of the same section produce different hashes."""

    def __init__(
        self,
        section: str,
        first_differing_key: str | None,
        value_a: Any,
        value_b: Any,
        hash_a: str,
        hash_b: str
    ):
        self.section = section
        self.first_differing_key = first_differing_key
        self.value_a = value_a
        self.value_b = value_b
        self.hash_a = hash_a
        self.hash_b = hash_b

        msg = (
            f"Double-run hash mismatch in section '{section}'.\n"
            f"  First differing key: '{first_differing_key}'\n"
            f"  Value A: {value_a}\n"
            f"  Value B: {value_b}\n"
            f"  Hash A: {hash_a}\n"
            f"  Hash B: {hash_b}"
        )
        super().__init__(msg)
