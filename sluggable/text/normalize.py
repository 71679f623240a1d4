"""ABOUTME: Text normalization utilities for slug generation.
ABOUTME: Provides transliterate, urlize and casing styles as pure, replaceable functions."""

import re
from collections.abc import Callable
from enum import StrEnum

from unidecode import unidecode

Transliterator = Callable[[str, str, object], str]
"""Signature of a transliterator: (text, separator, record) -> ASCII text."""

Urlizer = Callable[[str, str], str]
"""Signature of an urlizer: (text, separator) -> separator-delimited slug."""


class SlugStyle(StrEnum):
    """Casing applied to a slug after urlization."""

    NONE = "none"
    CAMEL = "camel"
    LOWER = "lower"
    UPPER = "upper"


def transliterate(text: str, separator: str = "-", record: object = None) -> str:
    """Map non-ASCII characters to their closest ASCII equivalents.

    Word boundaries are kept as whitespace so urlize can split on them.
    The separator and record are accepted so replacements can depend on them.

    Args:
        text: Input text, any script.
        separator: Slug separator of the field being built.
        record: Record the slug is built for.

    Returns:
        ASCII text.

    Examples:
        >>> transliterate("北京")
        'Bei Jing '
        >>> transliterate("Flabébé")
        'Flabebe'
    """
    return unidecode(text)


def urlize(text: str, separator: str = "-") -> str:
    """Convert text to a lowercase, separator-delimited, URL-safe token sequence.

    Handles:
    - Lowercase conversion
    - Runs of non-alphanumeric characters to a single separator
    - Stripping leading/trailing separators

    Args:
        text: Input text, expected to be ASCII already.
        separator: String placed between words.

    Returns:
        Urlized text.

    Examples:
        >>> urlize("Hello World")
        'hello-world'
        >>> urlize("  C++ vs. Rust!  ", "_")
        'c_vs_rust'
    """
    if not text:
        return ""

    text = text.lower()

    # Replace anything that isn't alphanumeric with the separator
    text = re.sub(r"[^a-z0-9]+", separator, text)

    if separator:
        sep = re.escape(separator)
        # Collapse repeats, then strip leading/trailing separators
        text = re.sub(f"(?:{sep}){{2,}}", separator, text)
        text = re.sub(f"^(?:{sep})+|(?:{sep})+$", "", text)

    return text


def apply_style(text: str, style: SlugStyle | str, separator: str = "-") -> str:
    """Apply a casing style to an urlized slug.

    Args:
        text: Urlized slug.
        style: One of none, camel, lower, upper.
        separator: Separator used in the slug; camel style capitalizes the letter after it.

    Returns:
        Styled slug.

    Examples:
        >>> apply_style("hello-world", "camel")
        'Hello-World'
        >>> apply_style("hello-world", "upper")
        'HELLO-WORLD'
    """
    style = SlugStyle(style)

    if style is SlugStyle.CAMEL:
        pattern = r"^[a-z]"
        if separator:
            pattern += f"|{re.escape(separator)}[a-z]"
        return re.sub(pattern, lambda m: m.group(0).upper(), text, flags=re.IGNORECASE | re.MULTILINE)
    if style is SlugStyle.LOWER:
        return text.lower()
    if style is SlugStyle.UPPER:
        return text.upper()
    return text


def normalize_slug(
    raw: str,
    separator: str = "-",
    style: SlugStyle | str = SlugStyle.NONE,
    max_length: int | None = None,
    transliterator: Transliterator = transliterate,
    urlizer: Urlizer = urlize,
    record: object = None,
) -> str:
    """Run the full normalization chain on a raw slug candidate.

    Transliterates, urlizes, applies the style, then cuts to max_length
    without regard for word boundaries.

    Args:
        raw: Concatenated source text or a manually set slug.
        separator: Slug separator.
        style: Casing style.
        max_length: Hard length limit, None for unlimited.
        transliterator: Replacement for transliterate.
        urlizer: Replacement for urlize.
        record: Record passed through to the transliterator.

    Returns:
        Normalized slug, possibly empty.
    """
    slug = transliterator(raw, separator, record)
    slug = urlizer(slug, separator)
    slug = apply_style(slug, style, separator)

    if max_length is not None and len(slug) > max_length:
        slug = slug[:max_length]

    return slug
