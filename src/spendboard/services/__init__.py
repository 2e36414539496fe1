"""Service module exports."""

from . import analytics, dashboard, seed

__all__ = [
    "analytics",
    "dashboard",
    "seed",
]
