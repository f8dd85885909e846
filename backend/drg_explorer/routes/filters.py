"""Filter vocabulary API routes.

Feeds the cascading selectors: geography level -> geography -> DRG.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from drg_explorer.database import get_db
from drg_explorer.repositories import ObservationRepository
from drg_explorer.schemas import DrgResponse, GeographyResponse, GeoLevelResponse
from drg_explorer.services.vocabulary import FilterVocabularyResolver

router = APIRouter(tags=["filters"])


def get_vocabulary(db: AsyncSession = Depends(get_db)) -> FilterVocabularyResolver:
    return FilterVocabularyResolver(ObservationRepository(db))


@router.get("/geo-levels", response_model=list[GeoLevelResponse])
async def list_geo_levels(
    vocabulary: FilterVocabularyResolver = Depends(get_vocabulary),
) -> list[GeoLevelResponse]:
    """List every geography level, ascending."""
    levels = await vocabulary.list_geo_levels()
    return [GeoLevelResponse(level=level) for level in levels]


@router.get("/geos", response_model=list[GeographyResponse])
async def list_geographies(
    vocabulary: FilterVocabularyResolver = Depends(get_vocabulary),
    level: str | None = Query(None, description="Geography level (required)"),
    search: str | None = Query(None, description="Case-insensitive substring filter"),
) -> list[GeographyResponse]:
    """List geographies within a level, ascending, at most 200.

    Raises:
        InvalidFilterError: 400 if ``level`` is missing.
    """
    descriptions = await vocabulary.list_geographies(level, search)
    return [GeographyResponse(description=d) for d in descriptions]


@router.get("/drgs", response_model=list[DrgResponse])
async def list_drgs(
    vocabulary: FilterVocabularyResolver = Depends(get_vocabulary),
    search: str | None = Query(
        None, description="DRG code (all digits) or description substring"
    ),
) -> list[DrgResponse]:
    """List DRGs ordered by code.

    Without a search only the first 50 codes are returned; with one, up to 200.
    """
    drgs = await vocabulary.list_drgs(search)
    return [DrgResponse(code=code, description=description) for code, description in drgs]
