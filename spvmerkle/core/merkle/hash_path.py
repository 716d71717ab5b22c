"""
Hash path container.

A HashPath reveals both children at every level on the way from a leaf to
the root, ordered bottom-up: entry 0 is the pair containing the leaf
itself, the last entry is the pair whose parent is the root. Outer-tree
levels appear as ``(top, zero_hash)`` pairs after the inner-tree levels.

Wire layout of to_bytes(): ``left || right`` per level, 64 bytes each,
same order as the pairs.
"""

from typing import Iterator, List, Sequence, Tuple

from spvmerkle.crypto import DIGEST_SIZE, Hasher, bytes_to_hex
from spvmerkle.utils.validation import validate_digest, validate_integer

HashPair = Tuple[bytes, bytes]

PAIR_SIZE = 2 * DIGEST_SIZE


class HashPath:
    """
    Sequence of (left, right) digest pairs from a leaf up to the root.

    Attributes:
        pairs: Tuple of (left, right) digests, bottom level first
    """

    def __init__(self, pairs: Sequence[Sequence[bytes]]):
        checked: List[HashPair] = []
        for level, pair in enumerate(pairs):
            if len(pair) != 2:
                raise ValueError(f"Level {level}: expected a (left, right) pair, got {len(pair)} entries")
            left, right = pair
            for side, digest in (("left", left), ("right", right)):
                valid, err = validate_digest(digest, f"pairs[{level}].{side}")
                if not valid:
                    raise ValueError(err)
            checked.append((bytes(left), bytes(right)))
        self.pairs: Tuple[HashPair, ...] = tuple(checked)

    def __len__(self) -> int:
        return len(self.pairs)

    def __iter__(self) -> Iterator[HashPair]:
        return iter(self.pairs)

    def __getitem__(self, level: int) -> HashPair:
        return self.pairs[level]

    def __eq__(self, other) -> bool:
        if not isinstance(other, HashPath):
            return NotImplemented
        return self.pairs == other.pairs

    def __hash__(self) -> int:
        return hash(self.pairs)

    def __repr__(self) -> str:
        return f"HashPath(levels={len(self.pairs)})"

    def to_bytes(self) -> bytes:
        """Flatten to ``left || right`` per level."""
        return b"".join(left + right for left, right in self.pairs)

    @classmethod
    def from_bytes(cls, data: bytes) -> "HashPath":
        """Inverse of to_bytes()."""
        if len(data) % PAIR_SIZE != 0:
            raise ValueError(f"Hash path bytes must be a multiple of {PAIR_SIZE}, got {len(data)}")
        pairs = []
        for offset in range(0, len(data), PAIR_SIZE):
            pairs.append((
                data[offset:offset + DIGEST_SIZE],
                data[offset + DIGEST_SIZE:offset + PAIR_SIZE],
            ))
        return cls(pairs)

    def to_hex(self) -> List[Tuple[str, str]]:
        """Pairs as 0x-prefixed hex strings."""
        return [(bytes_to_hex(left), bytes_to_hex(right)) for left, right in self.pairs]

    def compute_root(self, index: int, leaf_hash: bytes, hasher: Hasher) -> bytes:
        """
        Recompute the root, checking every intermediate hash.

        At each level the child on the path (left for an even position,
        right for an odd one) must equal the digest carried up from the
        level below.

        Args:
            index: Leaf index the path was generated for
            leaf_hash: Claimed hash of the leaf
            hasher: Hash primitive the tree was built with

        Returns:
            Root digest

        Raises:
            ValueError: If the index does not fit the path or a level does
                not link to the one below
        """
        valid, err = validate_integer(index, "index", 0, (1 << len(self.pairs)) - 1)
        if not valid:
            raise ValueError(err)

        current = leaf_hash
        position = index
        for level, (left, right) in enumerate(self.pairs):
            on_path = left if position % 2 == 0 else right
            if on_path != current:
                raise ValueError(f"Hash path breaks at level {level}")
            current = hasher.compress(left, right)
            position //= 2

        return current


__all__ = ["HashPath", "HashPair", "PAIR_SIZE"]
