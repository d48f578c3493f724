"""Model lifecycle management."""

from .registry import LoadReport, ModelRegistry, ModelSet

__all__ = ["LoadReport", "ModelRegistry", "ModelSet"]
