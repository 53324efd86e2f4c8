"""
BLAKE3 hashing for receipts and result-set commitments.
"""

import blake3


def blake3_hash(data: bytes) -> str:
    """
    Return the lowercase hex BLAKE3-256 digest of `data`.

    Unkeyed and unseeded: equal bytes always give equal digests, which is
    what the double-run determinism check relies on.

    Example:
        >>> blake3_hash(b"test")
        '4878ca0425c739fa427f7eda20fe845f6b2e46ba5fe2a14df5b1e32f50603215'
    """
    hasher = blake3.blake3()
    hasher.update(data)
    return hasher.hexdigest()
