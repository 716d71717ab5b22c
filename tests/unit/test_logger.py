"""
Tests for logging configuration.
"""

import logging

import pytest

from spvmerkle.core.merkle import MerkleTree, verify_proof
from spvmerkle.utils.logger import SPVLogger, get_logger, setup_logging


class TestLogger:
    """Tests for the centralized logger."""

    def test_namespace(self):
        assert get_logger("tree").name == "spvmerkle.tree"

    def test_setup_is_not_stacked(self):
        """Repeated setup re-levels handlers instead of adding new ones."""
        setup_logging(logging.INFO)
        root = logging.getLogger("spvmerkle")
        handlers = list(root.handlers)

        setup_logging(logging.DEBUG)

        assert root.handlers == handlers
        assert root.level == logging.DEBUG
        setup_logging(logging.INFO)

    def test_file_logging(self, tmp_path):
        SPVLogger.reset()
        try:
            setup_logging(logging.INFO, log_dir=str(tmp_path / "logs"), log_to_file=True)
            get_logger("test").info("written to file")
            for handler in logging.getLogger("spvmerkle").handlers:
                handler.flush()

            assert "written to file" in (tmp_path / "logs" / "spvmerkle.log").read_text()
        finally:
            for handler in logging.getLogger("spvmerkle").handlers:
                handler.close()
            SPVLogger.reset()
            setup_logging(logging.INFO)


class TestSubsystemRecords:
    """Records each subsystem emits while a tree is used."""

    def test_build_logs_shape_and_root(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="spvmerkle.tree"):
            tree = MerkleTree.from_values([b"a", b"b"], depth=3)

        built = [r for r in caplog.records if "built" in r.getMessage()]
        assert built
        assert built[-1].name == "spvmerkle.tree"
        assert built[-1].levelno == logging.DEBUG
        assert "2 padding steps" in built[-1].getMessage()
        assert tree.root.hex()[:16] in built[-1].getMessage()

    def test_rejection_logged_before_raise(self, caplog):
        tree = MerkleTree.from_values([b"a", b"b"], depth=3)

        with caplog.at_level(logging.WARNING, logger="spvmerkle.tree"):
            with pytest.raises(IndexError):
                tree.update_leaf(5, b"x")

        assert any(r.levelno == logging.WARNING and "out of range" in r.getMessage() for r in caplog.records)

    def test_proof_mismatch_is_debug(self, caplog):
        tree = MerkleTree.from_values([b"a", b"b"], depth=3)
        proof = tree.generate_proof(0)

        with caplog.at_level(logging.DEBUG, logger="spvmerkle.proof"):
            verify_proof(0, proof, expected_root=b"\x00" * 32)

        assert any(r.name == "spvmerkle.proof" and r.levelno == logging.DEBUG for r in caplog.records)
