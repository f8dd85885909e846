"""Filter vocabulary resolver.

Supplies the cascading dropdown vocabularies (geography level, then
geography within that level, then DRG) straight from the record store.
Each list is capped so the UI never waits on a full enumeration.
"""

import logging

from drg_explorer.errors import InvalidFilterError
from drg_explorer.repositories import ObservationRepository
from drg_explorer.services.filters import (
    ExactCode,
    clean_param,
    is_storable_code,
    parse_drg_search,
)

logger = logging.getLogger(__name__)

# Default DRG page when no search text is given
DEFAULT_DRG_LIMIT = 50

# Cap for searched DRG lists and geography lists
SEARCH_LIMIT = 200


class FilterVocabularyResolver:
    """Read-only vocabulary queries over the record store."""

    def __init__(self, repository: ObservationRepository):
        self.repository = repository

    async def list_geo_levels(self) -> list[str]:
        """All geography levels, ascending. Unbounded; there are only a handful."""
        return await self.repository.distinct_geo_levels()

    async def list_geographies(self, level: str | None, search: str | None = None) -> list[str]:
        """Geography descriptions within ``level``, ascending, at most 200.

        Raises:
            InvalidFilterError: ``level`` is missing or blank.
        """
        level = clean_param(level)
        if not level:
            raise InvalidFilterError("Missing required query param: level")

        search = clean_param(search) or None
        logger.debug("Listing geographies for level=%r search=%r", level, search)
        return await self.repository.distinct_geographies(level, search, limit=SEARCH_LIMIT)

    async def list_drgs(self, search: str | None = None) -> list[tuple[int, str]]:
        """DRG (code, description) pairs ordered by code.

        Blank search returns the first 50 codes. An all-digit search matches
        the code exactly; any other text matches the description as a
        case-insensitive substring. Searched results are capped at 200.
        """
        drg_filter = parse_drg_search(search)
        if drg_filter is None:
            return await self.repository.distinct_drgs(limit=DEFAULT_DRG_LIMIT)
        if isinstance(drg_filter, ExactCode) and not is_storable_code(drg_filter.code):
            return []

        logger.debug("Listing DRGs for %r", drg_filter)
        return await self.repository.distinct_drgs(drg_filter, limit=SEARCH_LIMIT)
