"""Hasher interface consumed by the Merkle tree engine."""

from abc import ABC, abstractmethod

DIGEST_SIZE = 32


class Hasher(ABC):
    """
    Stateless hash primitive used by the Merkle tree.

    Implementations must be deterministic and return DIGEST_SIZE bytes
    from both operations.
    """

    name: str = ""
    digest_size: int = DIGEST_SIZE

    @abstractmethod
    def hash(self, data: bytes) -> bytes:
        """Digest an arbitrary byte string (leaf values)."""

    @abstractmethod
    def compress(self, left: bytes, right: bytes) -> bytes:
        """Combine two child digests into their parent digest."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
