"""
Service layer
"""
from . import feedback, pipeline

__all__ = ["feedback", "pipeline"]
