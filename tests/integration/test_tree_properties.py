"""
Property tests for the Merkle tree.

Tests verify:
1. Zero padding is equivalent to a fully populated tree of empty leaves
2. Proof round trips for every index at several depths
3. Rebuild idempotence and update-then-revert
4. Single-bit tampering in any proof entry is detected
"""

import random
from typing import List

import pytest

from spvmerkle.core.merkle import MerkleTree, is_valid_proof, verify_proof
from spvmerkle.crypto import Hasher, PoseidonHasher, Sha256Hasher


# =============================================================================
# Helpers
# =============================================================================

def fold_levels(hasher: Hasher, level: List[bytes]) -> bytes:
    """Root of a full, explicitly materialised level 0."""
    while len(level) > 1:
        level = [hasher.compress(level[i], level[i + 1]) for i in range(0, len(level), 2)]
    return level[0]


def make_values(rng: random.Random, count: int) -> List[bytes]:
    return [rng.randbytes(rng.randint(0, 48)) for _ in range(count)]


def flip_bit(digest: bytes, bit: int) -> bytes:
    data = bytearray(digest)
    data[bit // 8] ^= 1 << (bit % 8)
    return bytes(data)


@pytest.fixture
def rng():
    return random.Random(20240601)


# =============================================================================
# Zero padding
# =============================================================================


class TestZeroPadding:
    """Padding with zero hashes matches materialised empty leaves."""

    @pytest.mark.parametrize("depth", [1, 3, 6])
    def test_padded_root_equals_full_tree(self, rng, depth):
        hasher = Sha256Hasher()
        for k in range(depth + 1):
            values = make_values(rng, 2 ** k)
            tree = MerkleTree.from_values(values, depth=depth, hasher=hasher)

            empty_leaf = tree.zero_hashes[0]
            level0 = [hasher.hash(v) for v in values] + [empty_leaf] * (2 ** depth - 2 ** k)
            assert tree.root == fold_levels(hasher, level0), f"k={k}"

    def test_empty_tree_equals_all_empty_leaves(self):
        hasher = Sha256Hasher()
        tree = MerkleTree(depth=4, hasher=hasher)
        assert tree.root == fold_levels(hasher, [tree.zero_hashes[0]] * 16)


# =============================================================================
# Proof round trips
# =============================================================================


class TestProofRoundTrip:
    """verify_proof(i, generate_proof(i), root) == root."""

    @pytest.mark.parametrize("depth,count", [(1, 1), (1, 2), (2, 4), (2, 2), (5, 32), (5, 4), (32, 16)])
    def test_every_index(self, rng, depth, count):
        tree = MerkleTree.from_values(make_values(rng, count), depth=depth)
        for index in range(count):
            proof = tree.generate_proof(index)
            assert verify_proof(index, proof, tree.root) == tree.root

    def test_depth_32_with_poseidon(self, rng):
        hasher = PoseidonHasher(rounds_f=2, rounds_p=1)
        tree = MerkleTree.from_values(make_values(rng, 4), depth=32, hasher=hasher)
        for index in range(4):
            assert verify_proof(index, tree.generate_proof(index), tree.root, hasher) == tree.root

    def test_hash_path_and_proof_agree(self, rng):
        tree = MerkleTree.from_values(make_values(rng, 8), depth=10)
        for index in range(8):
            proof = tree.generate_proof(index)
            path_root = tree.hash_path(index).compute_root(index, proof[0], tree.hasher)
            assert path_root == verify_proof(index, proof) == tree.root

    def test_padded_leaf_counts(self, rng):
        for count in (3, 5, 6, 7, 9):
            tree = MerkleTree.from_values(make_values(rng, count), depth=6, pad_leaves=True)
            for index in range(count):
                assert tree.verify_proof(index, tree.generate_proof(index))


# =============================================================================
# Rebuilds
# =============================================================================


class TestRebuilds:
    """Idempotence and update-then-revert."""

    def test_idempotent(self, rng):
        values = make_values(rng, 16)
        tree = MerkleTree.from_values(values, depth=8)
        root = tree.root

        tree.load_leaves(values)
        assert tree.build() == root

    def test_update_then_revert_everywhere(self, rng):
        values = make_values(rng, 8)
        tree = MerkleTree.from_values(values, depth=5)
        original = tree.root

        for index, value in enumerate(values):
            changed = tree.update_leaf(index, value + b"!")
            assert changed != original
            assert tree.update_leaf(index, value) == original

    def test_old_proof_fails_after_update(self, rng):
        tree = MerkleTree.from_values(make_values(rng, 4), depth=4)
        proof = tree.generate_proof(0)
        tree.update_leaf(3, b"changed")

        assert not is_valid_proof(0, proof, tree.root)
        assert is_valid_proof(0, tree.generate_proof(0), tree.root)


# =============================================================================
# Tampering
# =============================================================================


class TestTampering:
    """Any single-bit change in a proof breaks it."""

    @pytest.mark.parametrize("depth", [1, 2, 5, 12])
    def test_random_bit_flips(self, rng, depth):
        for _ in range(25):
            k = rng.randint(0, min(depth, 5))
            count = 2 ** k
            tree = MerkleTree.from_values(make_values(rng, count), depth=depth)
            index = rng.randrange(count)
            proof = tree.generate_proof(index)

            entry = rng.randrange(len(proof))
            tampered = list(proof)
            tampered[entry] = flip_bit(proof[entry], rng.randrange(256))

            assert verify_proof(index, tampered, tree.root) != tree.root

    def test_every_entry_of_one_proof(self, rng):
        tree = MerkleTree.from_values(make_values(rng, 8), depth=6)
        proof = tree.generate_proof(5)
        for entry in range(len(proof)):
            tampered = list(proof)
            tampered[entry] = flip_bit(proof[entry], 0)
            assert not is_valid_proof(5, tampered, tree.root)
