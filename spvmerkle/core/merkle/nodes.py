"""
Node types held in the tree's per-level arena.

Level 0 holds LeafNode entries (plus ZeroNode padding when enabled),
every level above holds InternalNode entries whose children live at
``(level - 1, 2 * i)`` and ``(level - 1, 2 * i + 1)``. The outer padding
chain pairs an InternalNode with the ZeroNode of the same height.
"""

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class LeafNode:
    """
    A populated leaf.

    Frozen: replacing a value means building a new LeafNode with hash=None.

    Attributes:
        index: Position in the leaf sequence (0-based, contiguous)
        value: Raw leaf bytes
        hash: hash(value), or None until the next rebuild recomputes it
    """
    index: int
    value: bytes
    hash: Optional[bytes] = None


@dataclass(frozen=True)
class ZeroNode:
    """Digest of an entirely empty subtree of height ``level``."""
    level: int
    hash: bytes


@dataclass(frozen=True, eq=False)
class InternalNode:
    """Parent node; invariant: hash == compress(left.hash, right.hash)."""
    hash: bytes
    left: "Node"
    right: "Node"


Node = Union[LeafNode, ZeroNode, InternalNode]


__all__ = ["LeafNode", "ZeroNode", "InternalNode", "Node"]
