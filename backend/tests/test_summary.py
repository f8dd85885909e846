"""Tests for record summaries (KPIs and chart series)."""

from types import SimpleNamespace

import pytest

from drg_explorer.services.summary import (
    _mean,
    compute_kpis,
    gap_fraction,
    largest_gaps,
    summarize_records,
    top_charges,
)


def record(code: int, submitted: float, total: float, medicare: float = 0.0) -> SimpleNamespace:
    return SimpleNamespace(
        drg_code=code,
        avg_submitted_charge=submitted,
        avg_total_payment=total,
        avg_medicare_payment=medicare,
    )


class TestComputeKpis:
    def test_averages(self):
        kpis = compute_kpis([record(1, 100, 40, 30), record(2, 200, 150, 100)])

        assert kpis.count == 2
        assert kpis.avg_submitted == 150
        assert kpis.avg_total_payment == 95
        assert kpis.avg_medicare_payment == 65
        assert kpis.avg_gap_pct == pytest.approx(42.5)

    def test_empty_set_has_no_averages(self):
        kpis = compute_kpis([])

        assert kpis.count == 0
        assert kpis.avg_submitted is None
        assert kpis.avg_gap_pct is None

    def test_zero_charge_excluded_from_gap(self):
        kpis = compute_kpis([record(1, 0, 10), record(2, 100, 50)])

        assert kpis.count == 2
        assert kpis.avg_gap_pct == pytest.approx(50)


class TestMean:
    def test_skips_missing_and_non_finite_values(self):
        assert _mean([10.0, None, float("nan"), 20.0]) == 15.0

    def test_nothing_to_average(self):
        assert _mean([None]) is None


class TestTopCharges:
    def test_ranked_by_submitted_charge(self):
        points = top_charges([record(1, 100, 40), record(2, 300, 50), record(3, 200, 60)])
        assert [p.drg for p in points] == ["2", "3", "1"]

    def test_limited_to_top_n(self):
        records = [record(code, 1000 + code, 10) for code in range(15)]

        points = top_charges(records)

        assert len(points) == 10
        assert points[0].drg == "14"

    def test_whole_dollars_round_half_up(self):
        (point,) = top_charges([record(470, 100.5, 2.5, 0.49)])

        assert point.submitted == 101
        assert point.total_payment == 3
        assert point.medicare_payment == 0


class TestLargestGaps:
    def test_ranked_by_dollar_gap_reported_as_percent(self):
        # Gap of $60 (60%) outranks a gap of $50 (25%)
        points = largest_gaps([record(2, 200, 150), record(1, 100, 40)])

        assert [p.drg for p in points] == ["1", "2"]
        assert points[0].gap_pct == pytest.approx(60)
        assert points[1].gap_pct == pytest.approx(25)

    def test_overpayment_clamped_to_zero(self):
        (point,) = largest_gaps([record(1, 100, 150)])
        assert point.gap_pct == 0

    def test_zero_charge_skipped(self):
        assert largest_gaps([record(1, 0, 10)]) == []

    def test_gap_fraction(self):
        assert gap_fraction(record(1, 200, 50)) == pytest.approx(0.75)


class TestSummarizeRecords:
    def test_builds_all_sections(self):
        summary = summarize_records([record(1, 100, 40, 30)])

        assert summary.kpis.count == 1
        assert len(summary.top_charges) == 1
        assert len(summary.largest_gaps) == 1

    def test_empty(self):
        summary = summarize_records([])

        assert summary.kpis.count == 0
        assert summary.top_charges == []
        assert summary.largest_gaps == []
