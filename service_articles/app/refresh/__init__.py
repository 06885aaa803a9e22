"""
Refresh package for the Articles Service.
"""

from .coordinator import RefreshCoordinator

__all__ = [
    "RefreshCoordinator",
]
