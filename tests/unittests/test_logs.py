"""ABOUTME: Tests for the logs module.
ABOUTME: Verifies logging configuration is read from YAML and applied."""

import logging
from pathlib import Path

import pytest

from sluggable.logs import init_logging


class TestInitLogging:
    """Tests for init_logging function."""

    def test_applies_config(self, tmp_path: Path) -> None:
        """Logger levels from the YAML file are applied."""
        config_path = tmp_path / "logging.yml"
        config_path.write_text("""
version: 1
disable_existing_loggers: false
loggers:
  sluggable.test_logs:
    level: DEBUG
""")

        config = init_logging(config_path)

        assert config["version"] == 1
        assert logging.getLogger("sluggable.test_logs").level == logging.DEBUG

    def test_bundled_config(self, configs_folder: Path) -> None:
        """The logging config shipped in configs/ is valid."""
        config = init_logging(configs_folder / "logging.yml")

        assert "sluggable" in config["loggers"]

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            init_logging(tmp_path / "missing.yml")
