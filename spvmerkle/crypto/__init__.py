"""
Hash primitives for spvmerkle.

This module provides:
- Raw hashing functions (SHA-256, Keccak-256)
- The Hasher interface consumed by the Merkle tree engine
- Concrete hashers (SHA-256, Keccak-256, Poseidon)
- Hex helpers for digests

Design Notes:
-------------
The tree never calls a hash function directly. Every tree instance holds
its own Hasher, so a deployment can pick the algorithm and tests can swap
in a reduced-round Poseidon for speed.

A Hasher exposes two operations:
- hash(data): digest of an arbitrary leaf value
- compress(left, right): parent digest of two 32-byte child digests

SHA-256 is the default. Keccak-256 is offered for EVM-style commitments,
Poseidon for commitments that must be re-checked inside arithmetic circuits.
"""

import hashlib
from typing import Dict, Type

from Crypto.Hash import keccak

from spvmerkle.crypto.base import DIGEST_SIZE, Hasher


# =============================================================================
# Hashing
# =============================================================================


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash.

    Used for: default leaf hashing and node compression.
    """
    return hashlib.sha256(data).digest()


def keccak256(data: bytes) -> bytes:
    """
    Compute Keccak-256 hash (Ethereum-style).

    Used for: trees whose roots are checked by EVM contracts.
    """
    k = keccak.new(digest_bits=256)
    k.update(data)
    return k.digest()


# =============================================================================
# Hashers
# =============================================================================


class Sha256Hasher(Hasher):
    """SHA-256 leaves, SHA-256(left || right) for parents."""

    name = "sha256"

    def hash(self, data: bytes) -> bytes:
        return sha256(data)

    def compress(self, left: bytes, right: bytes) -> bytes:
        return sha256(left + right)


class Keccak256Hasher(Hasher):
    """Keccak-256 leaves, Keccak-256(left || right) for parents."""

    name = "keccak256"

    def hash(self, data: bytes) -> bytes:
        return keccak256(data)

    def compress(self, left: bytes, right: bytes) -> bytes:
        return keccak256(left + right)


# =============================================================================
# Utility Functions
# =============================================================================


def bytes_to_hex(data: bytes) -> str:
    """Convert bytes to hex string with 0x prefix."""
    return "0x" + data.hex()


def hex_to_bytes(hex_str: str) -> bytes:
    """Convert hex string (with or without 0x prefix) to bytes."""
    if hex_str.startswith("0x") or hex_str.startswith("0X"):
        hex_str = hex_str[2:]
    return bytes.fromhex(hex_str)


# =============================================================================
# Poseidon Hash (ZK-friendly)
# =============================================================================

from spvmerkle.crypto.poseidon import (
    PoseidonHasher,
    poseidon_hash,
    poseidon2,
    poseidon_bytes,
    int_to_bytes32,
    bytes32_to_int,
    split_limbs,
    FIELD_PRIME,
    DOMAIN_MERKLE_LEAF,
    DOMAIN_MERKLE_NODE,
)


# =============================================================================
# Registry
# =============================================================================

HASHERS: Dict[str, Type[Hasher]] = {
    Sha256Hasher.name: Sha256Hasher,
    Keccak256Hasher.name: Keccak256Hasher,
    PoseidonHasher.name: PoseidonHasher,
}


def get_hasher(name: str, **kwargs) -> Hasher:
    """
    Instantiate a hasher by registry name.

    Args:
        name: One of HASHERS (case-insensitive)
        **kwargs: Passed to the hasher constructor (e.g. Poseidon rounds)

    Raises:
        ValueError: If the name is not registered
    """
    try:
        hasher_cls = HASHERS[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown hasher {name!r}, expected one of {sorted(HASHERS)}"
        ) from None
    return hasher_cls(**kwargs)


__all__ = [
    "DIGEST_SIZE",
    "sha256",
    "keccak256",
    "Hasher",
    "Sha256Hasher",
    "Keccak256Hasher",
    "PoseidonHasher",
    "HASHERS",
    "get_hasher",
    "bytes_to_hex",
    "hex_to_bytes",
    "poseidon_hash",
    "poseidon2",
    "poseidon_bytes",
    "int_to_bytes32",
    "bytes32_to_int",
    "split_limbs",
    "FIELD_PRIME",
    "DOMAIN_MERKLE_LEAF",
    "DOMAIN_MERKLE_NODE",
]
