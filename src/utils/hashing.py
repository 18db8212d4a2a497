"""Field-element hashing used for commitments, identities and tree nodes.

Every persisted value lives in the 255-bit Pallas base field, the native
word of proof circuits built on it. Hashes are SHA-256 digests reduced into
that field, so any hash can be stored back into a slot or a tree leaf.
"""

import hashlib
import secrets
from typing import Iterable

# Pallas base field prime (255 bits)
FIELD_MODULUS = 0x40000000000000000000000000000000224698FC094CF91B992D30ED00000001

FIELD_BYTES = 32


def is_field_element(value: int) -> bool:
    """Return True if value is an integer in [0, FIELD_MODULUS)."""
    return isinstance(value, int) and 0 <= value < FIELD_MODULUS


def hash_fields(values: Iterable[int]) -> int:
    """Hash a sequence of field elements into a single field element.

    Args:
        values: Field elements to hash, in order

    Returns:
        Digest reduced modulo FIELD_MODULUS

    Raises:
        ValueError: If any value is not a field element
    """
    digest = hashlib.sha256()
    for value in values:
        if not is_field_element(value):
            raise ValueError(f"Invalid field element: {value!r}")
        digest.update(value.to_bytes(FIELD_BYTES, "big"))
    return int.from_bytes(digest.digest(), "big") % FIELD_MODULUS


def address_to_fields(address: str) -> tuple[int, int]:
    """Map an external address to two field elements.

    Mirrors the (x, is_odd) pair a public key contributes to a hash.

    Args:
        address: External account address

    Returns:
        Tuple of (address digest, parity flag)
    """
    if not address:
        raise ValueError("address cannot be empty")
    digest = int.from_bytes(hashlib.sha256(address.encode("utf-8")).digest(), "big")
    x = digest % FIELD_MODULUS
    return x, x & 1


def random_salt() -> int:
    """Draw a uniformly random non-zero field element."""
    return secrets.randbelow(FIELD_MODULUS - 1) + 1
