"""Repository layer for data access.

Repositories encapsulate the SQL issued against the record store and give
the services a small, typed interface.
"""

from drg_explorer.repositories.observation import ObservationRepository

__all__ = ["ObservationRepository"]
