"""Pydantic schemas for the filter vocabulary and record endpoints.

Field names on the wire match what the dashboard consumes: vocabulary rows
are ``{level}``, ``{description}`` and ``{code, description}``; record rows
are keyed by the source dataset's column names.
"""

from pydantic import BaseModel, ConfigDict, Field


class GeoLevelResponse(BaseModel):
    """A geography level (e.g. National, State)."""

    level: str


class GeographyResponse(BaseModel):
    """A geography description within a level."""

    description: str


class DrgResponse(BaseModel):
    """A diagnosis-related group."""

    code: int
    description: str


class ObservationResponse(BaseModel):
    """Full observation row, serialized under the source column names."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    geo_level: str = Field(serialization_alias="rndrng_prvdr_geo_lvl")
    geo_code: str | None = Field(default=None, serialization_alias="rndrng_prvdr_geo_cd")
    geo_description: str = Field(serialization_alias="rndrng_prvdr_geo_desc")
    drg_code: int = Field(serialization_alias="drg_cd")
    drg_description: str = Field(serialization_alias="drg_desc")
    total_discharges: int = Field(serialization_alias="tot_dschrgs")
    avg_submitted_charge: float = Field(serialization_alias="avg_submtd_cvrd_chrg")
    avg_total_payment: float = Field(serialization_alias="avg_tot_pymt_amt")
    avg_medicare_payment: float = Field(serialization_alias="avg_mdcr_pymt_amt")


class ErrorResponse(BaseModel):
    """Failure payload returned for every non-2xx response."""

    error: str
