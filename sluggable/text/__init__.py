"""ABOUTME: Text normalization for slugs.
ABOUTME: Transliteration, urlization and casing styles."""

from sluggable.text.normalize import (
    SlugStyle,
    Transliterator,
    Urlizer,
    apply_style,
    normalize_slug,
    transliterate,
    urlize,
)

__all__ = [
    "SlugStyle",
    "Transliterator",
    "Urlizer",
    "apply_style",
    "normalize_slug",
    "transliterate",
    "urlize",
]
