"""
Fixed-depth binary Merkle tree with hash paths and SPV proofs.

Conceptual Background:
---------------------
The tree commits to ``2**depth`` leaf slots with a single root. Only the
first ``n`` slots are populated; the remaining ones are conceptually empty
and are represented by a precomputed table of zero-subtree hashes instead
of being materialised.

Structure:
---------
- Zero table: ``zero[0] = compress(seed, seed)`` for the 32-zero-byte seed,
  ``zero[i] = compress(zero[i-1], zero[i-1])``, for i in [0, depth].
  ``zero[depth]`` is the root of the empty tree.
- Inner tree: the balanced tree over the populated leaves, stored as an
  arena of levels. Level 0 holds the leaves, node ``(level, i)`` has
  children ``(level-1, 2i)`` and ``(level-1, 2i+1)``.
- Outer tree: when ``log2(n) < depth``, a linear chain that lifts the
  inner root to the configured depth: ``top = compress(top, zero[level])``
  for level in [log2(n), depth).

Leaf counts:
-----------
Pairwise construction needs a power-of-two leaf count. By default any
other count is rejected with LeafCountError. With ``pad_leaves=True`` the
populated region is padded with empty leaves (``zero[0]``) up to the next
power of two; indices still only address the populated leaves.

Properties:
----------
- Load + build: O(n)
- Update: O(n) (full rebuild)
- Hash path / proof: O(depth)
"""

from dataclasses import replace
from typing import List, Optional, Sequence, Tuple, Union

from spvmerkle.core.errors import (
    LeafCountError,
    LeafIndexError,
    TreeDepthError,
    TreeNotBuiltError,
)
from spvmerkle.core.merkle.hash_path import HashPath
from spvmerkle.core.merkle.nodes import InternalNode, LeafNode, Node, ZeroNode
from spvmerkle.core.merkle.proof import verify_proof
from spvmerkle.crypto import DIGEST_SIZE, Hasher, Sha256Hasher
from spvmerkle.utils.logger import get_logger
from spvmerkle.utils.validation import (
    MAX_DEPTH,
    validate_bytes,
    validate_depth,
    validate_leaf_index,
)

logger = get_logger("tree")

ZERO_SEED = bytes(DIGEST_SIZE)

LeafValue = Union[bytes, bytearray]


def is_power_of_two(n: int) -> bool:
    return n > 0 and n & (n - 1) == 0


def next_power_of_two(n: int) -> int:
    """Smallest power of two >= n (1 for n <= 1)."""
    return 1 << (n - 1).bit_length() if n > 1 else 1


def compute_zero_hashes(hasher: Hasher, depth: int) -> Tuple[ZeroNode, ...]:
    """
    Build the zero-subtree table for levels 0..depth.

    Starts from 32 zero bytes and self-compresses depth + 1 times.
    """
    zeros = []
    current = ZERO_SEED
    for level in range(depth + 1):
        current = hasher.compress(current, current)
        zeros.append(ZeroNode(level=level, hash=current))
    return tuple(zeros)


# =============================================================================
# Merkle Tree
# =============================================================================


class MerkleTree:
    """
    Fixed-depth Merkle tree over a bulk-loaded leaf sequence.

    Mutations stage the new structure and only commit it once construction
    succeeds, so a failing load or update leaves the previous tree intact.

    Attributes:
        name: Label used in log messages
        depth: Configured depth (capacity is 2**depth leaves)
        hasher: Hash primitive owned by this instance
        pad_leaves: Pad non power-of-two leaf counts with empty leaves
    """

    def __init__(
        self,
        name: str = "",
        depth: int = MAX_DEPTH,
        hasher: Optional[Hasher] = None,
        pad_leaves: bool = False,
    ):
        valid, err = validate_depth(depth)
        if not valid:
            logger.warning(f"Refusing to create tree {name!r}: {err}")
            raise TreeDepthError(err)

        self.name = name
        self.depth = depth
        self.hasher = hasher or Sha256Hasher()
        self.pad_leaves = pad_leaves

        self._zero_hashes = compute_zero_hashes(self.hasher, depth)
        self._leaves: List[LeafNode] = []
        self._inner: List[List[Node]] = []
        self._outer: List[InternalNode] = []
        self._root: bytes = self._zero_hashes[depth].hash
        self._built = True

    @classmethod
    def new(cls, name: str, depth: int = MAX_DEPTH, hasher: Optional[Hasher] = None) -> "MerkleTree":
        """Create an empty tree."""
        return cls(name=name, depth=depth, hasher=hasher)

    @classmethod
    def from_values(
        cls,
        values: Sequence[LeafValue],
        depth: int = MAX_DEPTH,
        name: str = "",
        hasher: Optional[Hasher] = None,
        pad_leaves: bool = False,
    ) -> "MerkleTree":
        """Create a tree, load ``values`` and build it."""
        tree = cls(name=name, depth=depth, hasher=hasher, pad_leaves=pad_leaves)
        tree.load_leaves(values)
        tree.build()
        return tree

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def root(self) -> bytes:
        """Root of the last successful construction (empty-tree root initially)."""
        return self._root

    def get_root(self) -> bytes:
        return self._root

    @property
    def leaf_count(self) -> int:
        return len(self._leaves)

    @property
    def capacity(self) -> int:
        return 1 << self.depth

    @property
    def inner_depth(self) -> int:
        """Height of the inner tree (log2 of the padded leaf count)."""
        if not self._leaves:
            return 0
        return (next_power_of_two(len(self._leaves)) - 1).bit_length()

    @property
    def zero_hashes(self) -> Tuple[bytes, ...]:
        return tuple(z.hash for z in self._zero_hashes)

    @property
    def empty_root(self) -> bytes:
        return self._zero_hashes[self.depth].hash

    @property
    def is_built(self) -> bool:
        """False between load_leaves() and the next build()."""
        return self._built

    def get_leaf(self, index: int) -> LeafNode:
        """Leaf at ``index``; use update_leaf() to change it."""
        self._check_index(index)
        return self._leaves[index]

    def __len__(self) -> int:
        return len(self._leaves)

    def __repr__(self) -> str:
        return (
            f"MerkleTree(name={self.name!r}, depth={self.depth}, "
            f"leaves={len(self._leaves)}, root={self._root.hex()[:16]}...)"
        )

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def load_leaves(self, values: Sequence[LeafValue], count: Optional[int] = None) -> List[LeafNode]:
        """
        Replace the leaf sequence with the first ``count`` values.

        Discards the built structure; call build() afterwards. The root
        keeps its last built value until then.

        Args:
            values: Leaf values (bytes)
            count: Number of values to load (defaults to len(values))

        Returns:
            The new leaf nodes

        Raises:
            LeafCountError: If count is negative, exceeds len(values) or the
                tree capacity, or is not a power of two without pad_leaves
            ValueError: If a value is not bytes
        """
        if count is None:
            count = len(values)
        if count < 0 or count > len(values):
            self._reject_count(f"count {count} outside [0, {len(values)}]")
        self._check_count(count)

        leaves = []
        for i in range(count):
            valid, err = validate_bytes(values[i], f"values[{i}]")
            if not valid:
                logger.warning(f"Tree {self.name!r}: {err}")
                raise ValueError(err)
            value = bytes(values[i])
            leaves.append(LeafNode(index=i, value=value, hash=self.hasher.hash(value)))

        self._leaves = leaves
        self._inner = []
        self._outer = []
        self._built = False
        logger.debug(f"Tree {self.name!r}: loaded {count} leaves")
        return list(leaves)

    def build(self) -> bytes:
        """
        Rebuild the whole tree from the current leaves.

        Returns:
            The new root
        """
        inner, outer, root = self._construct(self._leaves)
        self._inner, self._outer, self._root = inner, outer, root
        self._built = True
        return root

    def update_leaf(self, index: int, value: LeafValue) -> bytes:
        """
        Replace the value at ``index`` and rebuild the whole tree.

        Returns:
            The new root

        Raises:
            LeafIndexError: If index is outside the populated leaves
            ValueError: If value is not bytes
        """
        self._check_index(index)
        valid, err = validate_bytes(value, "value")
        if not valid:
            logger.warning(f"Tree {self.name!r}: {err}")
            raise ValueError(err)

        leaves = list(self._leaves)
        leaves[index] = LeafNode(index=index, value=bytes(value), hash=None)

        inner, outer, root = self._construct(leaves)
        self._leaves = leaves
        self._inner, self._outer, self._root = inner, outer, root
        self._built = True
        logger.debug(f"Tree {self.name!r}: updated leaf {index}")
        return root

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def hash_path(self, index: int) -> HashPath:
        """
        Both children at every level from the leaf up to the root.

        Returns:
            HashPath of ``depth`` (left, right) pairs, bottom level first
        """
        self._check_queryable(index)
        return HashPath(list(self._walk_path(index, both_children=True)))

    def generate_proof(self, index: int) -> List[bytes]:
        """
        Compact SPV proof for the leaf at ``index``.

        Returns:
            [leaf_hash, sibling per level...], ``depth + 1`` digests
        """
        self._check_queryable(index)
        return [self._leaves[index].hash] + list(self._walk_path(index, both_children=False))

    def verify_proof(self, index: int, proof: Sequence[bytes]) -> bool:
        """Check a proof against this tree's current root and hasher."""
        return verify_proof(index, proof, self._root, self.hasher) == self._root

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _construct(self, leaves: List[LeafNode]) -> Tuple[List[List[Node]], List[InternalNode], bytes]:
        """
        Build the inner levels and outer chain for ``leaves``.

        Leaves with an invalidated hash are replaced in ``leaves``, which
        must be a staged list. Nothing on self is modified; the caller
        commits the result.
        """
        if not leaves:
            logger.debug(f"Tree {self.name!r}: no leaves, root is the empty root")
            return [], [], self.empty_root

        compress = self.hasher.compress
        # Leaves are frozen; hashing an invalidated leaf swaps in a new node
        for i, leaf in enumerate(leaves):
            if leaf.hash is None:
                leaves[i] = replace(leaf, hash=self.hasher.hash(leaf.value))

        level0: List[Node] = list(leaves)
        if not is_power_of_two(len(leaves)):
            # load_leaves() only lets this through with pad_leaves enabled
            padding = next_power_of_two(len(leaves)) - len(leaves)
            level0.extend([self._zero_hashes[0]] * padding)

        inner: List[List[Node]] = [level0]
        while len(inner[-1]) > 1:
            below = inner[-1]
            inner.append([
                InternalNode(hash=compress(below[i].hash, below[i + 1].hash), left=below[i], right=below[i + 1])
                for i in range(0, len(below), 2)
            ])

        inner_depth = len(inner) - 1
        top = inner[-1][0]
        outer: List[InternalNode] = []
        for level in range(inner_depth, self.depth):
            zero = self._zero_hashes[level]
            top = InternalNode(hash=compress(top.hash, zero.hash), left=top, right=zero)
            outer.append(top)

        logger.debug(
            f"Tree {self.name!r}: built {len(leaves)} leaves, inner depth {inner_depth}, "
            f"{len(outer)} padding steps, root {top.hash.hex()[:16]}..."
        )
        return inner, outer, top.hash

    def _path_nodes(self, index: int) -> List[InternalNode]:
        """Parents on the path from leaf ``index`` to the root, bottom-up."""
        nodes = [self._inner[level][index >> level] for level in range(1, len(self._inner))]
        nodes.extend(self._outer)
        return nodes

    def _walk_path(self, index: int, both_children: bool):
        """
        Yield one entry per level from the leaf's parent up to the root.

        With both_children, each entry is the (left, right) pair of the
        parent; otherwise it is the child that is not on the path.
        """
        position = index
        for node in self._path_nodes(index):
            if both_children:
                yield (node.left.hash, node.right.hash)
            elif position % 2 == 0:
                yield node.right.hash
            else:
                yield node.left.hash
            position //= 2

    def _check_index(self, index: int) -> None:
        valid, err = validate_leaf_index(index, len(self._leaves))
        if not valid:
            logger.warning(f"Tree {self.name!r}: {err}")
            raise LeafIndexError(err)

    def _check_queryable(self, index: int) -> None:
        self._check_index(index)
        if not self._built:
            raise TreeNotBuiltError(f"Tree {self.name!r} has unbuilt leaves, call build() first")

    def _check_count(self, count: int) -> None:
        if count > self.capacity:
            self._reject_count(f"{count} leaves exceed capacity {self.capacity} of depth {self.depth}")
        if count and not is_power_of_two(count) and not self.pad_leaves:
            self._reject_count(f"leaf count {count} is not a power of two (enable pad_leaves to pad it)")

    def _reject_count(self, message: str) -> None:
        logger.warning(f"Tree {self.name!r}: {message}")
        raise LeafCountError(message)


__all__ = [
    "MerkleTree",
    "ZERO_SEED",
    "compute_zero_hashes",
    "is_power_of_two",
    "next_power_of_two",
]
