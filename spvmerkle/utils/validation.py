"""
Input Validation for tree and proof inputs.

Every helper returns ``(is_valid, error_message)``; callers decide which
exception to raise. Used to reject:
- Non-bytes leaf values and digests of the wrong size
- Tree depths outside the supported range
- Leaf indices outside the populated region
- Malformed SPV proofs before folding them
"""

from typing import Any, Optional, Tuple

from spvmerkle.crypto import DIGEST_SIZE

# =============================================================================
# Constants
# =============================================================================

MIN_DEPTH = 1
MAX_DEPTH = 32


# =============================================================================
# Validation Functions
# =============================================================================


def validate_bytes(
    data: Any,
    name: str,
    expected_length: Optional[int] = None,
    max_length: Optional[int] = None,
) -> Tuple[bool, str]:
    """
    Validate bytes input.

    Args:
        data: Data to validate
        name: Field name for error messages
        expected_length: Exact expected length
        max_length: Maximum allowed length

    Returns:
        (is_valid, error_message)
    """
    if not isinstance(data, (bytes, bytearray)):
        return False, f"{name} must be bytes, got {type(data).__name__}"

    if expected_length is not None and len(data) != expected_length:
        return False, f"{name} must be {expected_length} bytes, got {len(data)}"

    if max_length is not None and len(data) > max_length:
        return False, f"{name} exceeds max length {max_length}, got {len(data)}"

    return True, ""


def validate_digest(digest: Any, name: str = "digest") -> Tuple[bool, str]:
    """Validate a 32-byte digest."""
    return validate_bytes(digest, name, expected_length=DIGEST_SIZE)


def validate_integer(
    value: Any,
    name: str,
    min_val: int,
    max_val: int,
) -> Tuple[bool, str]:
    """
    Validate integer within bounds (inclusive).

    bool is rejected even though it subclasses int.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        return False, f"{name} must be int, got {type(value).__name__}"

    if value < min_val:
        return False, f"{name} must be >= {min_val}, got {value}"

    if value > max_val:
        return False, f"{name} must be <= {max_val}, got {value}"

    return True, ""


def validate_depth(depth: Any) -> Tuple[bool, str]:
    """Validate a configured tree depth."""
    return validate_integer(depth, "depth", MIN_DEPTH, MAX_DEPTH)


def validate_leaf_index(index: Any, leaf_count: int) -> Tuple[bool, str]:
    """Validate a leaf index against the populated leaf count."""
    if leaf_count == 0:
        return False, f"leaf index {index} out of range: tree has no leaves"
    if isinstance(index, bool) or not isinstance(index, int):
        return False, f"leaf index must be int, got {type(index).__name__}"
    if not 0 <= index < leaf_count:
        return False, f"leaf index {index} out of range for leaf count {leaf_count}"
    return True, ""


def validate_proof(proof: Any) -> Tuple[bool, str]:
    """
    Validate an SPV proof shape: a non-empty list/tuple of digests.

    Args:
        proof: Sequence [leaf_hash, sibling, sibling, ...]

    Returns:
        (is_valid, error_message)
    """
    if not isinstance(proof, (list, tuple)):
        return False, f"proof must be list/tuple, got {type(proof).__name__}"

    if not proof:
        return False, "proof must contain at least the leaf hash"

    if len(proof) > MAX_DEPTH + 1:
        return False, f"proof exceeds max length {MAX_DEPTH + 1}, got {len(proof)}"

    for i, entry in enumerate(proof):
        valid, err = validate_digest(entry, f"proof[{i}]")
        if not valid:
            return False, err

    return True, ""


def validate_hex_string(value: Any, name: str, expected_bytes: Optional[int] = None) -> Tuple[bool, str]:
    """
    Validate a hex string (with or without 0x prefix).

    Args:
        value: Value to validate
        name: Field name
        expected_bytes: Expected byte length when decoded

    Returns:
        (is_valid, error_message)
    """
    if not isinstance(value, str):
        return False, f"{name} must be str, got {type(value).__name__}"

    hex_str = value[2:] if value[:2] in ("0x", "0X") else value

    if len(hex_str) % 2 != 0:
        return False, f"{name} has odd length, invalid hex"

    try:
        bytes.fromhex(hex_str)
    except ValueError:
        return False, f"{name} contains invalid hex characters"

    if expected_bytes is not None:
        actual_bytes = len(hex_str) // 2
        if actual_bytes != expected_bytes:
            return False, f"{name} must be {expected_bytes} bytes, got {actual_bytes}"

    return True, ""


# =============================================================================
# Module Exports
# =============================================================================

__all__ = [
    "validate_bytes",
    "validate_digest",
    "validate_integer",
    "validate_depth",
    "validate_leaf_index",
    "validate_proof",
    "validate_hex_string",
    "MIN_DEPTH",
    "MAX_DEPTH",
]
