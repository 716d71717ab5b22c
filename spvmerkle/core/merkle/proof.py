"""
Standalone SPV proof verification.

A verifier holding only ``(index, proof, trusted_root)`` and the hash
primitive can check inclusion without any tree state:

    proof = [leaf_hash, sibling_0, sibling_1, ..., sibling_{depth-1}]

Folding left to right, the accumulator is combined with each sibling on
the side given by the current index parity, then the index is halved.
verify_proof() returns the recomputed digest and never raises on a
mismatch; the caller compares it to a root it trusts.
"""

from typing import Optional, Sequence

from spvmerkle.crypto import Hasher, Sha256Hasher
from spvmerkle.utils.logger import get_logger
from spvmerkle.utils.validation import validate_integer, validate_proof

logger = get_logger("proof")


def verify_proof(
    index: int,
    proof: Sequence[bytes],
    expected_root: Optional[bytes] = None,
    hasher: Optional[Hasher] = None,
) -> bytes:
    """
    Recompute the root committed to by an SPV proof.

    Args:
        index: Leaf index the proof claims
        proof: [leaf_hash, sibling per level...]
        expected_root: Trusted root; only used to log a mismatch
        hasher: Hash primitive (defaults to SHA-256)

    Returns:
        Recomputed root digest

    Raises:
        ValueError: If the proof is malformed or the index cannot address
            a leaf under len(proof) - 1 levels
    """
    valid, err = validate_proof(proof)
    if not valid:
        raise ValueError(err)
    valid, err = validate_integer(index, "index", 0, (1 << (len(proof) - 1)) - 1)
    if not valid:
        raise ValueError(err)

    hasher = hasher or Sha256Hasher()

    acc = bytes(proof[0])
    position = index
    for sibling in proof[1:]:
        if position % 2 == 0:
            acc = hasher.compress(acc, bytes(sibling))
        else:
            acc = hasher.compress(bytes(sibling), acc)
        position //= 2

    if expected_root is not None and acc != expected_root:
        logger.debug(f"Proof for index {index} does not reach expected root {expected_root.hex()[:16]}...")

    return acc


def is_valid_proof(
    index: int,
    proof: Sequence[bytes],
    root: bytes,
    hasher: Optional[Hasher] = None,
) -> bool:
    """
    Check an SPV proof against a trusted root.

    Malformed proofs are reported as invalid instead of raising.
    """
    try:
        return verify_proof(index, proof, root, hasher) == root
    except ValueError as e:
        logger.debug(f"Rejected malformed proof: {e}")
        return False


__all__ = ["verify_proof", "is_valid_proof"]
