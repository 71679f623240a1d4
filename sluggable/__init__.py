"""ABOUTME: Sluggable derives readable, collision-free slugs from record fields.
ABOUTME: Exposes the listener, registry and the bundled stores."""

__version__ = "0.1.0"
