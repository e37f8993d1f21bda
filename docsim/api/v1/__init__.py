"""Version 1 API routers."""

from . import analyze, health

__all__ = ["analyze", "health"]
