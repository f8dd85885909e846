"""Record query service: bounded, ranked observation lookups for one geography."""

import logging

from drg_explorer.errors import InvalidFilterError
from drg_explorer.models import Observation
from drg_explorer.repositories import ObservationRepository
from drg_explorer.services.filters import clean_param, is_storable_code, parse_drg_code

logger = logging.getLogger(__name__)

# Hard cap on rows per request; there is no cursor, callers narrow the filter
RECORD_LIMIT = 500


class RecordQueryService:
    """Serves the record table behind the dashboard."""

    def __init__(self, repository: ObservationRepository):
        self.repository = repository

    async def list_records(
        self,
        level: str | None,
        geo: str | None,
        drg_code: str | None = None,
    ) -> list[Observation]:
        """Observations matching a geography and optional DRG.

        Rows come back ordered by average submitted charge, highest first,
        and never more than RECORD_LIMIT of them. Validation happens before
        the store is touched. A numeric code that no stored row can carry
        (fractional, or beyond the 64-bit integer range) yields no rows.

        Args:
            level: Geography level (required, exact match).
            geo: Geography description (required, exact match).
            drg_code: Optional DRG code as received from the client.

        Raises:
            InvalidFilterError: ``level`` or ``geo`` is missing, or
                ``drg_code`` is not numeric.
        """
        level = clean_param(level)
        geo = clean_param(geo)
        if not level or not geo:
            raise InvalidFilterError("Missing query params: level, geo")

        code = parse_drg_code(drg_code)
        if code is not None and not is_storable_code(code):
            # Fractional or out-of-range codes cannot match any stored row
            return []

        logger.debug("Listing records for level=%r geo=%r drg_code=%r", level, geo, code)
        return await self.repository.find_records(level, geo, code, limit=RECORD_LIMIT)
