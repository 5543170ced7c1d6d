"""Rule-based workout generation with blueprint caching and idempotent request tracking."""

__version__ = "0.1.0"
