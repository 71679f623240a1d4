"""ABOUTME: Settings for the sluggable package.
ABOUTME: Provides slug defaults and paths to configuration files."""

from pathlib import Path

from pydantic import computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

from sluggable import __version__


def _get_project_root() -> Path:
    """Find project root by looking for pyproject.toml."""
    current = Path(__file__).resolve().parent
    while current != current.parent:
        if (current / "pyproject.toml").exists():
            return current
        current = current.parent
    return Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Contains settings for this project."""

    model_config = SettingsConfigDict(env_prefix="SLUGGABLE_")

    VERSION: str = __version__
    """Project version."""

    PROJECT_ROOT: Path = _get_project_root()
    """Root directory of the project."""

    DEFAULT_SEPARATOR: str = "-"
    """Separator between words and before a disambiguating suffix."""

    DEFAULT_DATE_FORMAT: str = "%Y-%m-%d"
    """strftime format applied to date-typed source values."""

    IDENTIFIER_PLACEHOLDER: str = "__id__"
    """Value held by an identifier slug field until its real slug is built."""

    @computed_field  # type: ignore[prop-decorator]
    @property
    def configs_dir(self) -> Path:
        """Directory containing configuration files."""
        return self.PROJECT_ROOT / "configs"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def logging_config_path(self) -> Path:
        """Path to the logging.yml configuration file."""
        return self.configs_dir / "logging.yml"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def sluggable_config_path(self) -> Path:
        """Path to the sluggable.yml slug field configuration file."""
        return self.configs_dir / "sluggable.yml"


settings = Settings()
