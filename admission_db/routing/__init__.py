"""
HTTP routing for the admission workflows.
"""

from .api import router

__all__ = ["router"]
