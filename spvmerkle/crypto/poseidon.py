"""
Poseidon Hash Function for spvmerkle.

This module provides a ZK-friendly hasher for Merkle trees whose roots must
be recomputed inside arithmetic circuits (low constraint count in SNARKs).

References:
- Poseidon paper: https://eprint.iacr.org/2019/458
- circomlib implementation: https://github.com/iden3/circomlib

Parameters (BN254 / alt_bn128):
- Field: 21888242871839275222246405745257275088548364400416034343698204186575808495617
- t=3 (2 inputs + 1 capacity)
- rounds_f=8 (full rounds)
- rounds_p=57 (partial rounds)
- alpha=5 (S-box exponent)

The round counts are parameters of PoseidonHasher. A reduced-round instance
is still deterministic and is what the test suite uses to keep depth-32
trees fast; it is NOT a secure hash.
"""

import hashlib
from functools import lru_cache
from typing import List, Tuple

from spvmerkle.crypto.base import Hasher

# BN254 scalar field prime
FIELD_PRIME = 21888242871839275222246405745257275088548364400416034343698204186575808495617

# Domain separators
DOMAIN_MERKLE_LEAF = 0x01
DOMAIN_MERKLE_NODE = 0x02

DEFAULT_ROUNDS_F = 8
DEFAULT_ROUNDS_P = 57


# =============================================================================
# Round Constants
# =============================================================================

def _generate_round_constants(t: int, rounds_f: int, rounds_p: int, seed: bytes = b"poseidon") -> List[int]:
    """
    Generate Poseidon round constants using a deterministic PRNG.

    SHAKE256 over a fixed seed, one 32-byte chunk per constant reduced
    modulo the field prime.
    """
    total_rounds = rounds_f + rounds_p

    h = hashlib.shake_256(seed)
    digest = h.digest(total_rounds * t * 32)

    constants = []
    for i in range(total_rounds * t):
        chunk = digest[i * 32:(i + 1) * 32]
        constants.append(int.from_bytes(chunk, byteorder="big") % FIELD_PRIME)

    return constants


def _generate_mds_matrix(t: int) -> List[List[int]]:
    """
    Generate MDS (Maximum Distance Separable) matrix for Poseidon.

    Uses a Cauchy matrix construction which is guaranteed to be MDS.
    """
    x = [(i + 1) % FIELD_PRIME for i in range(t)]
    y = [(t + i + 1) % FIELD_PRIME for i in range(t)]

    matrix = []
    for i in range(t):
        row = []
        for j in range(t):
            # M[i][j] = 1 / (x[i] + y[j]) mod p
            denom = (x[i] + y[j]) % FIELD_PRIME
            row.append(pow(denom, FIELD_PRIME - 2, FIELD_PRIME))
        matrix.append(row)

    return matrix


@lru_cache(maxsize=None)
def _get_constants_t3(rounds_f: int, rounds_p: int) -> Tuple[Tuple[int, ...], Tuple[Tuple[int, ...], ...]]:
    """Get or compute constants for t=3 and the given round counts."""
    constants = _generate_round_constants(t=3, rounds_f=rounds_f, rounds_p=rounds_p)
    matrix = _generate_mds_matrix(t=3)
    return tuple(constants), tuple(tuple(row) for row in matrix)


# =============================================================================
# Poseidon Core Implementation
# =============================================================================

def _sbox(x: int) -> int:
    """Apply S-box: x^5 mod p."""
    return pow(x, 5, FIELD_PRIME)


def _mds_multiply(state: List[int], matrix) -> List[int]:
    """Multiply state by MDS matrix."""
    t = len(state)
    result = []
    for i in range(t):
        acc = 0
        for j in range(t):
            acc = (acc + matrix[i][j] * state[j]) % FIELD_PRIME
        result.append(acc)
    return result


def _add_round_constants(state: List[int], constants, round_idx: int) -> List[int]:
    """Add round constants to state."""
    t = len(state)
    offset = round_idx * t
    return [(state[i] + constants[offset + i]) % FIELD_PRIME for i in range(t)]


def _full_round(state: List[int], constants, matrix, round_idx: int) -> List[int]:
    """Execute a full round (S-box on all elements)."""
    state = _add_round_constants(state, constants, round_idx)
    state = [_sbox(x) for x in state]
    return _mds_multiply(state, matrix)


def _partial_round(state: List[int], constants, matrix, round_idx: int) -> List[int]:
    """Execute a partial round (S-box on first element only)."""
    state = _add_round_constants(state, constants, round_idx)
    state[0] = _sbox(state[0])
    return _mds_multiply(state, matrix)


def poseidon_hash(
    inputs: List[int],
    domain_sep: int = 0,
    rounds_f: int = DEFAULT_ROUNDS_F,
    rounds_p: int = DEFAULT_ROUNDS_P,
) -> int:
    """
    Compute Poseidon hash of inputs.

    Args:
        inputs: List of field elements (integers < FIELD_PRIME)
        domain_sep: Optional domain separator (for different use cases)
        rounds_f: Number of full rounds (must be even)
        rounds_p: Number of partial rounds

    Returns:
        Hash as a field element (integer)

    Raises:
        ValueError: If inputs are out of range or wrong count
    """
    if len(inputs) > 2:
        raise ValueError(f"This implementation supports max 2 inputs, got {len(inputs)}")

    for i, val in enumerate(inputs):
        if not (0 <= val < FIELD_PRIME):
            raise ValueError(f"Input {i} out of field range: {val}")

    padded = list(inputs) + [0] * (2 - len(inputs))

    # State: [capacity, input1, input2], capacity carries the domain separator
    state = [domain_sep % FIELD_PRIME, padded[0], padded[1]]

    constants, matrix = _get_constants_t3(rounds_f, rounds_p)
    half_f = rounds_f // 2

    round_idx = 0

    for _ in range(half_f):
        state = _full_round(state, constants, matrix, round_idx)
        round_idx += 1

    for _ in range(rounds_p):
        state = _partial_round(state, constants, matrix, round_idx)
        round_idx += 1

    for _ in range(half_f):
        state = _full_round(state, constants, matrix, round_idx)
        round_idx += 1

    # Output is the second element (index 1)
    return state[1]


# =============================================================================
# Convenience Functions
# =============================================================================

def poseidon2(a: int, b: int, domain_sep: int = 0, **rounds) -> int:
    """Hash two field elements."""
    return poseidon_hash([a, b], domain_sep, **rounds)


def poseidon_bytes(data: bytes, domain_sep: int = 0, **rounds) -> int:
    """
    Hash arbitrary bytes using Poseidon.

    The byte length is absorbed first, then 31-byte chunks (to fit in the
    field) are hashed iteratively. The length fixes how the last chunk was
    cut, so leading zero bytes are not lost.
    """
    h = poseidon2(domain_sep % FIELD_PRIME, len(data), **rounds)
    for i in range(0, len(data), 31):
        chunk = int.from_bytes(data[i:i + 31], byteorder="big")
        h = poseidon2(h, chunk, **rounds)

    return h


def int_to_bytes32(val: int) -> bytes:
    """Convert field element to 32 bytes."""
    return val.to_bytes(32, byteorder="big")


def split_limbs(data: bytes) -> Tuple[int, int]:
    """Split 32 bytes into two 128-bit limbs (high, low), both in the field."""
    if len(data) != 32:
        raise ValueError(f"Expected 32 bytes, got {len(data)}")
    return int.from_bytes(data[:16], byteorder="big"), int.from_bytes(data[16:], byteorder="big")


def bytes32_to_int(data: bytes) -> int:
    """Convert 32 bytes to field element."""
    if len(data) != 32:
        raise ValueError(f"Expected 32 bytes, got {len(data)}")
    val = int.from_bytes(data, byteorder="big")
    if val >= FIELD_PRIME:
        raise ValueError(f"Value {val} exceeds field prime")
    return val


# =============================================================================
# Hasher
# =============================================================================

class PoseidonHasher(Hasher):
    """
    Poseidon over BN254 as a tree hasher.

    Leaves are hashed with poseidon_bytes under DOMAIN_MERKLE_LEAF. Parents
    absorb each child as two 128-bit limbs, starting under DOMAIN_MERKLE_NODE,
    so every 32-byte string maps to distinct field inputs and no two child
    digests collide by reduction modulo the field prime.
    """

    name = "poseidon"

    def __init__(self, rounds_f: int = DEFAULT_ROUNDS_F, rounds_p: int = DEFAULT_ROUNDS_P):
        if rounds_f < 2 or rounds_f % 2:
            raise ValueError(f"rounds_f must be a positive even number, got {rounds_f}")
        if rounds_p < 0:
            raise ValueError(f"rounds_p must be >= 0, got {rounds_p}")
        self.rounds_f = rounds_f
        self.rounds_p = rounds_p

    @property
    def _rounds(self) -> dict:
        return {"rounds_f": self.rounds_f, "rounds_p": self.rounds_p}

    def hash(self, data: bytes) -> bytes:
        return int_to_bytes32(poseidon_bytes(data, DOMAIN_MERKLE_LEAF, **self._rounds))

    def compress(self, left: bytes, right: bytes) -> bytes:
        left_hi, left_lo = split_limbs(left)
        right_hi, right_lo = split_limbs(right)
        h = poseidon2(left_hi, left_lo, DOMAIN_MERKLE_NODE, **self._rounds)
        h = poseidon2(h, right_hi, **self._rounds)
        h = poseidon2(h, right_lo, **self._rounds)
        return int_to_bytes32(h)

    def __repr__(self) -> str:
        return f"PoseidonHasher(rounds_f={self.rounds_f}, rounds_p={self.rounds_p})"
