"""API routes package."""

from . import analyze

__all__ = ["analyze"]
