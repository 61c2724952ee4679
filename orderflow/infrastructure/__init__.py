"""Infrastructure layer implementations."""

from orderflow.infrastructure import storage

__all__ = ["storage"]
