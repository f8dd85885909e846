"""Pydantic schemas for record summaries (KPIs and chart series)."""

from pydantic import BaseModel, Field


class RecordKpis(BaseModel):
    """Headline averages over a record set. Averages are None for an empty set."""

    count: int = 0
    avg_submitted: float | None = None
    avg_total_payment: float | None = None
    avg_medicare_payment: float | None = None
    avg_gap_pct: float | None = Field(
        default=None,
        description="Mean of (1 - total payment / submitted charge) * 100",
    )


class ChargePoint(BaseModel):
    """Whole-dollar charge and payment amounts for one DRG."""

    drg: str
    submitted: int
    total_payment: int
    medicare_payment: int


class GapPoint(BaseModel):
    """Billed-to-paid gap for one DRG, clamped to 0-100%."""

    drg: str
    gap_pct: float = Field(ge=0, le=100)


class RecordSummary(BaseModel):
    """Everything the dashboard charts need for one filter selection."""

    kpis: RecordKpis
    top_charges: list[ChargePoint] = Field(default_factory=list)
    largest_gaps: list[GapPoint] = Field(default_factory=list)
