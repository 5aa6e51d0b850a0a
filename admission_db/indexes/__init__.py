"""
Index management for the admission store.
"""

from .manager import ensure_schema

__all__ = ["ensure_schema"]
