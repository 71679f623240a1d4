"""ABOUTME: Tests for the config module.
ABOUTME: Verifies slug option validation and YAML configuration loading."""

from pathlib import Path

import pytest

from sluggable.config import SlugFieldConfig, SluggableConfig, load_sluggable_config, parse_field_options
from sluggable.errors import InvalidConfiguration
from sluggable.text.normalize import SlugStyle


class TestSlugFieldConfig:
    """Tests for SlugFieldConfig and parse_field_options."""

    def test_defaults(self) -> None:
        """Unspecified options take the documented defaults."""
        config = parse_field_options({"fields": ["title"]})

        assert config.separator == "-"
        assert config.style is SlugStyle.NONE
        assert config.updatable is True
        assert config.unique is True
        assert config.unique_base is None
        assert config.date_format == "%Y-%m-%d"
        assert config.max_length is None
        assert config.nullable is False

    def test_camel_case_aliases(self) -> None:
        """uniqueBase and dateFormat are accepted as option names."""
        config = parse_field_options({"fields": ["title"], "uniqueBase": "category", "dateFormat": "%Y"})

        assert config.unique_base == "category"
        assert config.date_format == "%Y"

    def test_existing_config_passed_through(self) -> None:
        """A SlugFieldConfig is returned unchanged."""
        config = SlugFieldConfig(fields=["title"])

        assert parse_field_options(config) is config

    @pytest.mark.parametrize(
        "options",
        [
            {},
            {"fields": []},
            {"fields": [""]},
            {"fields": ["title"], "style": "shouty"},
            {"fields": ["title"], "unexpected": True},
            {"fields": ["title"], "max_length": 0},
        ],
    )
    def test_invalid_options_rejected(self, options: dict[str, object]) -> None:
        """Malformed options raise InvalidConfiguration."""
        with pytest.raises(InvalidConfiguration):
            parse_field_options(options)

    def test_invalid_configuration_is_value_error(self) -> None:
        """InvalidConfiguration can be caught as ValueError."""
        with pytest.raises(ValueError):
            parse_field_options({"fields": []})


class TestSluggableConfig:
    """Tests for SluggableConfig class."""

    def test_for_type(self) -> None:
        """Configured types return their slug fields."""
        config = SluggableConfig(types={"Article": {"slug": SlugFieldConfig(fields=["title"])}})

        assert list(config.for_type("Article")) == ["slug"]

    def test_for_unknown_type(self) -> None:
        """Unknown type raises KeyError."""
        with pytest.raises(KeyError):
            SluggableConfig().for_type("Missing")


class TestLoadSluggableConfig:
    """Tests for load_sluggable_config function."""

    def test_load_missing_file(self, tmp_path: Path) -> None:
        """Missing config file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_sluggable_config(tmp_path / "nonexistent.yml")

    def test_load_valid_config(self, tmp_path: Path) -> None:
        """Valid YAML config is parsed correctly."""
        config_path = tmp_path / "sluggable.yml"
        config_path.write_text("""
types:
  Article:
    slug:
      fields: [title, subtitle]
      separator: "_"
      style: upper
      updatable: false
""")

        config = load_sluggable_config(config_path)
        slug = config.types["Article"]["slug"]

        assert slug.fields == ["title", "subtitle"]
        assert slug.separator == "_"
        assert slug.style is SlugStyle.UPPER
        assert slug.updatable is False

    def test_load_empty_file(self, tmp_path: Path) -> None:
        """An empty file yields an empty configuration."""
        config_path = tmp_path / "sluggable.yml"
        config_path.write_text("")

        assert load_sluggable_config(config_path).types == {}

    def test_load_invalid_config(self, tmp_path: Path) -> None:
        """Invalid options in the file raise InvalidConfiguration."""
        config_path = tmp_path / "sluggable.yml"
        config_path.write_text("types:\n  Article:\n    slug:\n      fields: []\n")

        with pytest.raises(InvalidConfiguration):
            load_sluggable_config(config_path)

    def test_bundled_config_loads(self, configs_folder: Path) -> None:
        """The example config shipped in configs/ is valid."""
        config = load_sluggable_config(configs_folder / "sluggable.yml")

        assert config.types["Page"]["slug"].unique_base == "section"
        assert config.types["Event"]["slug"].updatable is False
