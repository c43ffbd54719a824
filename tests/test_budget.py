"""Tests for budget evaluation and the budget report."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from conftest import make_transaction
from ledger_engine.config import GENERAL_CATEGORY, MAINTENANCE_CATEGORY, LedgerSettings
from ledger_engine.models.reports import BudgetStatus
from ledger_engine.queries import budget_report, evaluate


STATIONERY = "قرطاسية"
WATER = "مياه"


class TestEvaluate:
    """Tests for evaluate()."""

    @pytest.mark.parametrize(
        "spent, expected",
        [
            (799, BudgetStatus.SAFE),
            (800, BudgetStatus.APPROACHING),
            (1000, BudgetStatus.APPROACHING),
            (1001, BudgetStatus.EXCEEDED),
        ],
    )
    def test_threshold_boundaries(self, spent, expected):
        """Test the 80% and 100% boundaries for a limit of 1000."""
        assert evaluate("x", spent, 1000).status is expected

    def test_ratio_is_exact(self):
        """Test that the usage ratio is a Decimal, not a float."""
        result = evaluate("x", 800, 1000)
        assert result.usage_ratio == Decimal("0.8")
        assert result.remaining == 200

    def test_no_limit_is_safe(self):
        """Test that zero limit means no budget and no ratio."""
        result = evaluate("x", 0, 0)
        assert result.status is BudgetStatus.SAFE
        assert result.usage_ratio is None
        assert result.remaining == 0

    def test_spend_without_limit_is_exceeded(self):
        """Test that any spend against a zero limit leaves negative remaining."""
        result = evaluate("x", 5, 0)
        assert result.status is BudgetStatus.EXCEEDED
        assert result.usage_ratio is None
        assert result.remaining == -5

    def test_custom_threshold(self):
        """Test that the threshold is configurable."""
        assert evaluate("x", 500, 1000, threshold=Decimal("0.5")).status is BudgetStatus.APPROACHING
        assert evaluate("x", 499, 1000, threshold=Decimal("0.5")).status is BudgetStatus.SAFE


class TestBudgetReport:
    """Tests for budget_report()."""

    def _entries(self):
        return [
            make_transaction("a", 400, timestamp=datetime(2024, 1, 10), category=STATIONERY),
            make_transaction("a", 450, timestamp=datetime(2024, 2, 10), category=STATIONERY),
            make_transaction("a", 100, timestamp=datetime(2024, 2, 11), category=WATER),
            make_transaction("a", 5000, timestamp=datetime(2024, 2, 12), category=MAINTENANCE_CATEGORY),
            make_transaction("a", 77, timestamp=datetime(2024, 2, 13)),
        ]

    def _report(self, settings=None):
        limits = {STATIONERY: 1000, WATER: 500, MAINTENANCE_CATEGORY: 2000}
        return budget_report(
            self._entries(), limits, date(2024, 2, 1), date(2024, 2, 29), settings=settings
        )

    def test_line_per_configured_category(self, settings):
        """Test that every budget category gets a line, in configured order."""
        report = self._report(settings)
        categories = [l.category for l in report.lines] + [l.category for l in report.excluded_lines]
        assert sorted(categories) == sorted(settings.reportable_categories)
        assert [l.index for l in report.lines] == list(range(1, len(report.lines) + 1))

    def test_statuses(self, settings):
        """Test per-line status from all-time spend."""
        lines = {l.category: l for l in self._report(settings).lines}
        assert lines[STATIONERY].total_spent == 850
        assert lines[STATIONERY].spent_in_period == 450
        assert lines[STATIONERY].status is BudgetStatus.APPROACHING
        assert lines[WATER].status is BudgetStatus.SAFE
        assert lines[WATER].remaining == 400

    def test_maintenance_kept_out_of_grand_total(self, settings):
        """Test that maintenance is evaluated but not rolled up."""
        report = self._report(settings)

        assert MAINTENANCE_CATEGORY not in [l.category for l in report.lines]
        (maintenance,) = report.excluded_lines
        assert maintenance.category == MAINTENANCE_CATEGORY
        assert maintenance.status is BudgetStatus.EXCEEDED
        assert maintenance.index == len(settings.reportable_categories)

        assert report.totals.total_spent == 950
        assert report.totals.spent_in_period == 550
        assert report.totals.approved == 1500
        assert report.totals.remaining == 550
        assert not report.totals.is_exceeded

    def test_general_category_never_reported(self, settings):
        """Test that uncategorized spend has no budget line."""
        report = self._report(settings)
        reported = [l.category for l in report.lines + report.excluded_lines]
        assert GENERAL_CATEGORY not in reported

    def test_general_category_dropped_even_if_configured(self):
        """Test that listing the sentinel as a budget category has no effect."""
        settings = LedgerSettings(budget_categories=[GENERAL_CATEGORY, STATIONERY])
        report = self._report(settings)
        assert [l.category for l in report.lines] == [STATIONERY]
        assert report.excluded_lines == ()

    def test_period_bounds(self, settings):
        """Test that the window end covers the whole last day."""
        report = self._report(settings)
        assert report.period_start == datetime(2024, 2, 1)
        assert report.period_end == datetime(2024, 2, 29, 23, 59, 59, 999000)

    def test_grand_total_exceeded(self):
        """Test the roll-up flag when remaining goes negative."""
        settings = LedgerSettings(budget_categories=[STATIONERY, WATER])
        report = budget_report(
            self._entries(), {STATIONERY: 100}, date(2024, 1, 1), date(2024, 12, 31),
            settings=settings,
        )
        assert report.totals.remaining == -850
        assert report.totals.is_exceeded
