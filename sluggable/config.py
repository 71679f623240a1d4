"""ABOUTME: Slug field configuration models and the YAML loader for them.
ABOUTME: Validates options up front so malformed setups fail before any batch runs."""

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from sluggable.errors import InvalidConfiguration
from sluggable.settings import settings
from sluggable.text.normalize import SlugStyle


class SlugFieldConfig(BaseModel):
    """Options for a single slug field of a record type.

    Attributes:
        fields: Source field names, concatenated in this order.
        separator: Inserted between words and before a disambiguating suffix.
        style: Casing applied after urlization.
        updatable: If False, an existing slug is never regenerated on update.
        unique: If True, the slug must not collide within the root record type.
        unique_base: Field whose value partitions uniqueness into groups.
        date_format: strftime format for date-typed source values.
        max_length: Storage length limit, None for unlimited.
        nullable: Whether an empty slug is stored as None.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    fields: list[str]
    separator: str = Field(default_factory=lambda: settings.DEFAULT_SEPARATOR)
    style: SlugStyle = SlugStyle.NONE
    updatable: bool = True
    unique: bool = True
    unique_base: str | None = Field(default=None, validation_alias=AliasChoices("unique_base", "uniqueBase"))
    date_format: str = Field(
        default_factory=lambda: settings.DEFAULT_DATE_FORMAT,
        validation_alias=AliasChoices("date_format", "dateFormat"),
    )
    max_length: int | None = Field(default=None, gt=0, validation_alias=AliasChoices("max_length", "maxLength"))
    nullable: bool = False

    @field_validator("fields")
    @classmethod
    def _require_source_fields(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("at least one source field is required")
        if any(not name for name in value):
            raise ValueError("source field names must not be empty")
        return value


class SluggableConfig(BaseModel):
    """Slug field configuration for a set of record types."""

    types: dict[str, dict[str, SlugFieldConfig]] = Field(default_factory=dict)

    def for_type(self, type_name: str) -> dict[str, SlugFieldConfig]:
        """Return the slug fields configured for a record type.

        Args:
            type_name: Name of the record type as used in the config.

        Returns:
            Mapping of slug field name to its options.

        Raises:
            KeyError: If the type is not configured.
        """
        if type_name not in self.types:
            raise KeyError(f"Record type '{type_name}' not found in configuration")
        return self.types[type_name]


def parse_field_options(options: Mapping[str, Any] | SlugFieldConfig) -> SlugFieldConfig:
    """Validate raw slug options into a SlugFieldConfig.

    Args:
        options: Option mapping (camelCase keys such as uniqueBase are accepted) or an existing config.

    Returns:
        Validated configuration.

    Raises:
        InvalidConfiguration: If the options are malformed.
    """
    if isinstance(options, SlugFieldConfig):
        return options
    try:
        return SlugFieldConfig.model_validate(dict(options))
    except ValidationError as e:
        raise InvalidConfiguration(f"Invalid slug options: {e}") from e


def load_sluggable_config(config_path: Path | None = None) -> SluggableConfig:
    """Load slug field configuration from a YAML file.

    Args:
        config_path: Path to the config file. Defaults to settings.sluggable_config_path.

    Returns:
        Parsed SluggableConfig object.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        InvalidConfiguration: If config file is invalid.
    """
    if config_path is None:
        config_path = settings.sluggable_config_path

    if not config_path.exists():
        raise FileNotFoundError(f"Sluggable config not found: {config_path}")

    with config_path.open(encoding="utf-8") as f:
        raw_config = yaml.safe_load(f) or {}

    try:
        return SluggableConfig.model_validate(raw_config)
    except ValidationError as e:
        raise InvalidConfiguration(f"Invalid sluggable config {config_path}: {e}") from e
