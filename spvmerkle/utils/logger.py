"""
Logging for spvmerkle.

What is logged, per subsystem under the ``spvmerkle`` namespace:
- spvmerkle.tree: leaf loads, rebuilds (leaf count, inner depth, padding
  steps, root prefix) and updates at DEBUG; rejected depths, indices and
  leaf counts at WARNING just before the error is raised
- spvmerkle.proof: proofs that miss the expected root or are malformed, DEBUG
- spvmerkle.cli: the effective TreeConfig, DEBUG
- spvmerkle.benchmark: run summaries, DEBUG

Output goes to stderr so CLI results on stdout stay machine-readable. The
level can be changed after the first setup (the CLI does this for
``--debug`` and SPVMERKLE_LOG_LEVEL); file output is opt-in.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import colorlog


class SPVLogger:
    """Centralized logger for spvmerkle components"""

    _initialized = False
    _log_dir: Optional[Path] = None

    @classmethod
    def setup(
        cls,
        level: int = logging.INFO,
        log_dir: Optional[str] = None,
        log_to_file: bool = False,
    ):
        """
        Setup logging configuration.

        Args:
            level: Logging level (DEBUG, INFO, WARNING, ERROR)
            log_dir: Directory for log files. If None, uses ./logs
            log_to_file: Whether to write logs to file
        """
        if cls._initialized:
            # Re-level the existing handlers instead of stacking new ones
            root_logger = logging.getLogger("spvmerkle")
            root_logger.setLevel(level)
            for handler in root_logger.handlers:
                handler.setLevel(level)
            return

        if log_to_file:
            cls._log_dir = Path(log_dir) if log_dir else Path("logs")
            cls._log_dir.mkdir(exist_ok=True, parents=True)

        root_logger = logging.getLogger("spvmerkle")
        root_logger.setLevel(level)
        root_logger.handlers.clear()

        # Console handler with colors
        console_handler = colorlog.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_formatter = colorlog.ColoredFormatter(
            "%(log_color)s%(asctime)s [%(name)s] %(levelname)-8s%(reset)s %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            log_colors={
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "red,bg_white",
            },
        )
        console_handler.setFormatter(console_formatter)
        root_logger.addHandler(console_handler)

        if log_to_file and cls._log_dir:
            file_handler = logging.FileHandler(cls._log_dir / "spvmerkle.log")
            file_handler.setLevel(level)
            file_formatter = logging.Formatter(
                "%(asctime)s [%(name)s] %(levelname)-8s %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
            file_handler.setFormatter(file_formatter)
            root_logger.addHandler(file_handler)

        cls._initialized = True

    @classmethod
    def reset(cls) -> None:
        """Drop installed handlers so setup() can run again."""
        logging.getLogger("spvmerkle").handlers.clear()
        cls._initialized = False
        cls._log_dir = None

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """
        Get a logger for a specific subsystem.

        Args:
            name: Subsystem name (e.g., 'tree', 'proof', 'cli')

        Returns:
            Logger instance
        """
        if not cls._initialized:
            cls.setup()

        return logging.getLogger(f"spvmerkle.{name}")


# Convenience functions
def get_logger(name: str) -> logging.Logger:
    """Get a logger for a specific subsystem"""
    return SPVLogger.get_logger(name)


def setup_logging(
    level: int = logging.INFO,
    log_dir: Optional[str] = None,
    log_to_file: bool = False,
):
    """Setup logging configuration"""
    SPVLogger.setup(level=level, log_dir=log_dir, log_to_file=log_to_file)
