"""Fixed-depth Merkle tree, hash paths and SPV proofs"""
from spvmerkle.core.merkle.nodes import LeafNode, ZeroNode, InternalNode
from spvmerkle.core.merkle.hash_path import HashPath
from spvmerkle.core.merkle.proof import verify_proof, is_valid_proof
from spvmerkle.core.merkle.tree import (
    MerkleTree,
    ZERO_SEED,
    compute_zero_hashes,
    is_power_of_two,
    next_power_of_two,
)

__all__ = [
    "LeafNode",
    "ZeroNode",
    "InternalNode",
    "HashPath",
    "verify_proof",
    "is_valid_proof",
    "MerkleTree",
    "ZERO_SEED",
    "compute_zero_hashes",
    "is_power_of_two",
    "next_power_of_two",
]
