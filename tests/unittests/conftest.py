"""Contains configurations for the test run."""

from pathlib import Path

import pytest


@pytest.fixture(scope="session")
def configs_folder() -> Path:
    """Returns the path to the bundled configs folder."""
    return Path(__file__).parents[2] / "configs"
