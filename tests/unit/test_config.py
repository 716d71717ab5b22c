"""
Tests for tree configuration.

Tests cover:
1. TreeConfig defaults and validation
2. Loading from environment variables and .env files
3. Creating trees from a config
"""

import logging
import os

import pytest

from spvmerkle.core.config import TreeConfig, load_config
from spvmerkle.core.errors import TreeDepthError
from spvmerkle.crypto import Keccak256Hasher, Sha256Hasher

ENV_VARS = ["SPVMERKLE_DEPTH", "SPVMERKLE_HASHER", "SPVMERKLE_PAD_LEAVES", "SPVMERKLE_LOG_LEVEL"]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    yield
    # load_dotenv writes straight into os.environ
    for var in ENV_VARS:
        os.environ.pop(var, None)


class TestTreeConfig:
    """Tests for TreeConfig."""

    def test_defaults(self):
        config = TreeConfig()
        assert config.depth == 32
        assert config.hasher == "sha256"
        assert config.pad_leaves is False
        assert config.log_level_value == logging.INFO

    def test_normalises_names(self):
        config = TreeConfig(hasher="KECCAK256", log_level="debug")
        assert config.hasher == "keccak256"
        assert config.log_level == "DEBUG"

    @pytest.mark.parametrize("depth", [0, 33])
    def test_bad_depth(self, depth):
        with pytest.raises(TreeDepthError):
            TreeConfig(depth=depth)

    def test_unknown_hasher(self):
        with pytest.raises(ValueError, match="Unknown hasher"):
            TreeConfig(hasher="md5")

    def test_unknown_log_level(self):
        with pytest.raises(ValueError, match="log level"):
            TreeConfig(log_level="LOUD")

    def test_create_tree(self):
        tree = TreeConfig(depth=4, hasher="keccak256", pad_leaves=True).create_tree("cfg")

        assert tree.name == "cfg"
        assert tree.depth == 4
        assert tree.pad_leaves
        assert isinstance(tree.hasher, Keccak256Hasher)

    def test_each_tree_gets_its_own_hasher(self):
        config = TreeConfig(depth=2)
        assert config.create_tree().hasher is not config.create_tree().hasher


class TestLoadConfig:
    """Tests for environment loading."""

    def test_defaults_without_env(self):
        assert load_config() == TreeConfig()

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("SPVMERKLE_DEPTH", "8")
        monkeypatch.setenv("SPVMERKLE_HASHER", "keccak256")
        monkeypatch.setenv("SPVMERKLE_PAD_LEAVES", "yes")
        monkeypatch.setenv("SPVMERKLE_LOG_LEVEL", "warning")

        config = load_config()

        assert config == TreeConfig(depth=8, hasher="keccak256", pad_leaves=True, log_level="WARNING")

    def test_from_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("SPVMERKLE_DEPTH=5\nSPVMERKLE_PAD_LEAVES=false\n")

        config = load_config(str(env_file))

        assert config.depth == 5
        assert config.pad_leaves is False

    def test_environment_overrides_env_file(self, tmp_path, monkeypatch):
        env_file = tmp_path / ".env"
        env_file.write_text("SPVMERKLE_DEPTH=5\n")
        monkeypatch.setenv("SPVMERKLE_DEPTH", "7")

        assert load_config(str(env_file)).depth == 7

    def test_non_integer_depth(self, monkeypatch):
        monkeypatch.setenv("SPVMERKLE_DEPTH", "deep")
        with pytest.raises(TreeDepthError):
            load_config()

    def test_bad_boolean(self, monkeypatch):
        monkeypatch.setenv("SPVMERKLE_PAD_LEAVES", "maybe")
        with pytest.raises(ValueError, match="boolean"):
            load_config()

    def test_config_tree_is_usable(self, monkeypatch):
        monkeypatch.setenv("SPVMERKLE_DEPTH", "3")
        tree = load_config().create_tree("env")
        tree.load_leaves([b"x", b"y"])
        tree.build()

        assert isinstance(tree.hasher, Sha256Hasher)
        assert len(tree.generate_proof(0)) == 4
