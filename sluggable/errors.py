"""ABOUTME: Exception hierarchy for slug configuration and resolution failures.
ABOUTME: Configuration errors surface at setup time, never mid-batch."""


class SluggableError(Exception):
    """Base class for all errors raised by this package."""


class InvalidConfiguration(SluggableError, ValueError):
    """Slug options are malformed or a replacement callable is not callable."""


class UnknownField(InvalidConfiguration):
    """A configured slug or uniqueness base field does not exist on the record type."""

    def __init__(self, record_type: str, field: str, role: str = "field") -> None:
        self.record_type = record_type
        self.field = field
        super().__init__(f"Unknown {role} '{field}' on record type '{record_type}'")


class MissingSourceField(UnknownField):
    """A configured source field does not exist on the record type."""

    def __init__(self, record_type: str, field: str) -> None:
        super().__init__(record_type, field, role="source field")


class UnresolvableSlug(SluggableError):
    """The length limit leaves no room for a disambiguating suffix."""
