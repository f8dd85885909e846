"""Record summaries for the dashboard KPIs and charts.

Works on the same bounded record set the record query service returns, so
the headline numbers always describe exactly the rows shown in the table.
"""

import math
from collections.abc import Sequence
from typing import Protocol

from drg_explorer.schemas.summary import ChargePoint, GapPoint, RecordKpis, RecordSummary

# Bars per chart
DEFAULT_TOP_N = 10


class ChargeRecord(Protocol):
    drg_code: int
    avg_submitted_charge: float
    avg_total_payment: float
    avg_medicare_payment: float


def _mean(values: list[float | None]) -> float | None:
    finite = [v for v in values if v is not None and math.isfinite(v)]
    if not finite:
        return None
    return sum(finite) / len(finite)


def _whole_dollars(amount: float) -> int:
    # Half-up rounding; round() would send 0.5 to the even neighbour
    return math.floor(amount + 0.5)


def gap_fraction(record: ChargeRecord) -> float:
    """Share of the submitted charge that was not paid: 1 - total / submitted."""
    return 1 - record.avg_total_payment / record.avg_submitted_charge


def compute_kpis(records: Sequence[ChargeRecord]) -> RecordKpis:
    """Average charges, payments and billed-to-paid gap over ``records``."""
    if not records:
        return RecordKpis(count=0)

    gap_pcts = [
        gap_fraction(r) * 100
        for r in records
        if r.avg_submitted_charge > 0 and math.isfinite(r.avg_total_payment)
    ]
    return RecordKpis(
        count=len(records),
        avg_submitted=_mean([r.avg_submitted_charge for r in records]),
        avg_total_payment=_mean([r.avg_total_payment for r in records]),
        avg_medicare_payment=_mean([r.avg_medicare_payment for r in records]),
        avg_gap_pct=_mean(gap_pcts),
    )


def top_charges(records: Sequence[ChargeRecord], top_n: int = DEFAULT_TOP_N) -> list[ChargePoint]:
    """Highest submitted charges with their payments, for the bar charts."""
    ranked = sorted(records, key=lambda r: r.avg_submitted_charge, reverse=True)
    return [
        ChargePoint(
            drg=str(r.drg_code),
            submitted=_whole_dollars(r.avg_submitted_charge),
            total_payment=_whole_dollars(r.avg_total_payment),
            medicare_payment=_whole_dollars(r.avg_medicare_payment),
        )
        for r in ranked[:top_n]
    ]


def largest_gaps(records: Sequence[ChargeRecord], top_n: int = DEFAULT_TOP_N) -> list[GapPoint]:
    """DRGs with the largest dollar gap between charge and payment.

    Ranked by absolute gap (submitted - total payment) but reported as a
    percentage of the submitted charge, clamped to [0, 100].
    """
    billed = [r for r in records if r.avg_submitted_charge > 0]
    ranked = sorted(
        billed,
        key=lambda r: r.avg_submitted_charge - r.avg_total_payment,
        reverse=True,
    )
    return [
        GapPoint(drg=str(r.drg_code), gap_pct=max(0.0, min(1.0, gap_fraction(r))) * 100)
        for r in ranked[:top_n]
    ]


def summarize_records(
    records: Sequence[ChargeRecord],
    top_n: int = DEFAULT_TOP_N,
) -> RecordSummary:
    """Build the KPI block and both chart series for one record set."""
    return RecordSummary(
        kpis=compute_kpis(records),
        top_charges=top_charges(records, top_n),
        largest_gaps=largest_gaps(records, top_n),
    )
