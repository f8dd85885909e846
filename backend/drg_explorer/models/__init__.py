"""SQLAlchemy models."""

from drg_explorer.models.observation import Observation

__all__ = [
    "Observation",
]
