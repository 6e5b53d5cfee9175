"""Service-level exception types."""
from __future__ import annotations


class RemoteStoreError(RuntimeError):
    """Raised when the remote store answers with an error-tagged body."""

    def __init__(self, action: str, message: str):
        super().__init__(f"{action}: {message}")
        self.action = action
        self.message = message


class ValidationError(ValueError):
    """Raised when caller input fails validation."""


class SchemaError(RuntimeError):
    """Raised when a collection schema definition is inconsistent."""


__all__ = ["RemoteStoreError", "ValidationError", "SchemaError"]
