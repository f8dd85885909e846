"""Pydantic schemas."""

from drg_explorer.schemas.filters import (
    DrgResponse,
    ErrorResponse,
    GeographyResponse,
    GeoLevelResponse,
    ObservationResponse,
)
from drg_explorer.schemas.summary import (
    ChargePoint,
    GapPoint,
    RecordKpis,
    RecordSummary,
)

__all__ = [
    "ChargePoint",
    "DrgResponse",
    "ErrorResponse",
    "GapPoint",
    "GeoLevelResponse",
    "GeographyResponse",
    "ObservationResponse",
    "RecordKpis",
    "RecordSummary",
]
