"""
Exceptions raised by the Merkle tree engine.

Each error also derives from the builtin a caller would naturally catch
(ValueError for bad configuration or leaf counts, IndexError for indices).
"""


class MerkleTreeError(Exception):
    """Base class for tree errors."""


class TreeDepthError(MerkleTreeError, ValueError):
    """Configured depth is outside [1, MAX_DEPTH]; the tree is not created."""


class LeafIndexError(MerkleTreeError, IndexError):
    """Leaf index is outside the populated leaf range."""


class LeafCountError(MerkleTreeError, ValueError):
    """Leaf count does not fit the pairwise construction or the tree capacity."""


class TreeNotBuiltError(MerkleTreeError, RuntimeError):
    """Leaves were loaded but the tree has not been constructed yet."""


__all__ = [
    "MerkleTreeError",
    "TreeDepthError",
    "LeafIndexError",
    "LeafCountError",
    "TreeNotBuiltError",
]
