"""HTTP routes."""
from .api import register_api
from .health import register_health

__all__ = ["register_api", "register_health"]
