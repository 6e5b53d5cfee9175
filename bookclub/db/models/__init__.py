"""ORM models aggregate exports."""
from .mirror import (  # noqa: F401
	Base,
	MirrorEntry,
)

__all__ = [
	"Base",
	"MirrorEntry",
]
