"""
Tree configuration for spvmerkle.

Defaults can be overridden through environment variables, optionally read
from a ``.env`` file:

    SPVMERKLE_DEPTH=20
    SPVMERKLE_HASHER=keccak256
    SPVMERKLE_PAD_LEAVES=true
    SPVMERKLE_LOG_LEVEL=DEBUG
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from spvmerkle.core.errors import TreeDepthError
from spvmerkle.core.merkle import MerkleTree
from spvmerkle.crypto import HASHERS, Hasher, get_hasher
from spvmerkle.utils.validation import MAX_DEPTH, validate_depth

ENV_PREFIX = "SPVMERKLE_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


@dataclass
class TreeConfig:
    """Construction parameters for trees"""

    depth: int = MAX_DEPTH  # Capacity is 2**depth leaves
    hasher: str = "sha256"  # Registry name, see spvmerkle.crypto.HASHERS
    pad_leaves: bool = False  # Pad non power-of-two leaf counts
    log_level: str = "INFO"

    def __post_init__(self):
        """Validate parameters"""
        valid, err = validate_depth(self.depth)
        if not valid:
            raise TreeDepthError(err)
        self.hasher = self.hasher.lower()
        if self.hasher not in HASHERS:
            raise ValueError(f"Unknown hasher {self.hasher!r}, expected one of {sorted(HASHERS)}")
        self.log_level = self.log_level.upper()
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(f"Unknown log level {self.log_level!r}")

    @property
    def log_level_value(self) -> int:
        return logging.getLevelName(self.log_level)

    def make_hasher(self) -> Hasher:
        return get_hasher(self.hasher)

    def create_tree(self, name: str = "") -> MerkleTree:
        """Create an empty tree with these parameters"""
        return MerkleTree(
            name=name,
            depth=self.depth,
            hasher=self.make_hasher(),
            pad_leaves=self.pad_leaves,
        )


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


def load_config(env_file: Optional[str] = None) -> TreeConfig:
    """
    Load configuration from the environment.

    Args:
        env_file: Optional .env file; variables already set in the
            environment take precedence over it

    Returns:
        TreeConfig instance
    """
    if env_file:
        load_dotenv(env_file, override=False)

    kwargs = {}

    depth = os.environ.get(f"{ENV_PREFIX}DEPTH")
    if depth is not None:
        try:
            kwargs["depth"] = int(depth)
        except ValueError:
            raise TreeDepthError(f"{ENV_PREFIX}DEPTH must be an integer, got {depth!r}") from None

    hasher = os.environ.get(f"{ENV_PREFIX}HASHER")
    if hasher:
        kwargs["hasher"] = hasher

    pad = os.environ.get(f"{ENV_PREFIX}PAD_LEAVES")
    if pad is not None:
        kwargs["pad_leaves"] = _parse_bool(f"{ENV_PREFIX}PAD_LEAVES", pad)

    level = os.environ.get(f"{ENV_PREFIX}LOG_LEVEL")
    if level:
        kwargs["log_level"] = level

    return TreeConfig(**kwargs)
