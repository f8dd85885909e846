"""Record API routes: the filtered observation table and its summary."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from drg_explorer.database import get_db
from drg_explorer.repositories import ObservationRepository
from drg_explorer.schemas import ObservationResponse, RecordSummary
from drg_explorer.services.records import RecordQueryService
from drg_explorer.services.summary import summarize_records

router = APIRouter(prefix="/records", tags=["records"])


def get_record_service(db: AsyncSession = Depends(get_db)) -> RecordQueryService:
    return RecordQueryService(ObservationRepository(db))


@router.get("", response_model=list[ObservationResponse])
async def list_records(
    records: RecordQueryService = Depends(get_record_service),
    level: str | None = Query(None, description="Geography level (required)"),
    geo: str | None = Query(None, description="Geography description (required)"),
    drg_cd: str | None = Query(None, description="Optional DRG code"),
) -> list[ObservationResponse]:
    """List observations for one geography, highest submitted charge first.

    At most 500 rows are returned; narrow the filter to see others.

    Raises:
        InvalidFilterError: 400 if ``level``/``geo`` is missing or
            ``drg_cd`` is not a number.
    """
    rows = await records.list_records(level, geo, drg_cd)
    return [ObservationResponse.model_validate(row) for row in rows]


@router.get("/summary", response_model=RecordSummary)
async def summarize(
    records: RecordQueryService = Depends(get_record_service),
    level: str | None = Query(None, description="Geography level (required)"),
    geo: str | None = Query(None, description="Geography description (required)"),
    drg_cd: str | None = Query(None, description="Optional DRG code"),
) -> RecordSummary:
    """KPIs and chart series for exactly the rows ``GET /records`` returns."""
    rows = await records.list_records(level, geo, drg_cd)
    return summarize_records(rows)
