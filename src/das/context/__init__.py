"""
Context assembly for DAS.

Read-only snapshots of campaign state for presentation layers and
external consumers.
"""

from .builder import ContextBuilder, ContextSnapshot

__all__ = ["ContextBuilder", "ContextSnapshot"]
