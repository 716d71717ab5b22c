"""
spvmerkle

A fixed-depth binary Merkle tree with:
- Zero-hash padding up to the configured depth
- Hash paths revealing both children per level
- Compact SPV inclusion proofs with standalone verification
- Pluggable hash primitives (SHA-256, Keccak-256, Poseidon)
"""

__version__ = "0.1.0"
