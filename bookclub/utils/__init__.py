"""Utility helpers."""
from .identity import (
    MIRROR_SCOPE_KEY,
    normalize_email,
    get_mirror_scope,
    PermissionError,
)

__all__ = [
    "MIRROR_SCOPE_KEY",
    "normalize_email",
    "get_mirror_scope",
    "PermissionError",
]
