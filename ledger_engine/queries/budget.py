"""
Budget Evaluation

Compares a category's spend against its approved limit and classifies it:

- EXCEEDED     remaining < 0
- APPROACHING  a limit is set and spend/limit >= threshold (0.8)
- SAFE         otherwise, including every category without a limit

A limit of zero means "no budget configured". The usage ratio is then
not computed at all.

The report iterates the configured budget categories only. The general
category is never budget-compared, and roll-up-excluded categories
(maintenance) are evaluated on their own line but kept out of the grand
total.
"""

from decimal import Decimal
from typing import Iterable, Mapping, Optional

from ledger_engine.config import LedgerSettings
from ledger_engine.ledger.periods import DateLike, period_bounds
from ledger_engine.models.ledger import Transaction
from ledger_engine.models.reports import (
    BudgetEvaluation,
    BudgetReport,
    BudgetReportLine,
    BudgetStatus,
    BudgetTotals,
)
from ledger_engine.queries.aggregator import aggregate


DEFAULT_THRESHOLD = Decimal("0.8")


def evaluate(
    category: str,
    total_spent: int,
    approved_limit: int,
    threshold: Decimal = DEFAULT_THRESHOLD,
) -> BudgetEvaluation:
    """Classify one category's spend against its limit."""
    remaining = approved_limit - total_spent

    usage_ratio: Optional[Decimal] = None
    if approved_limit > 0:
        usage_ratio = Decimal(total_spent) / Decimal(approved_limit)

    if remaining < 0:
        status = BudgetStatus.EXCEEDED
    elif usage_ratio is not None and usage_ratio >= threshold:
        status = BudgetStatus.APPROACHING
    else:
        status = BudgetStatus.SAFE

    return BudgetEvaluation(
        category=category,
        total_spent=total_spent,
        approved_limit=approved_limit,
        remaining=remaining,
        status=status,
        usage_ratio=usage_ratio,
    )


def roll_up(lines: Iterable[BudgetReportLine]) -> BudgetTotals:
    """Sum the money columns of the given lines."""
    spent_in_period = 0
    total_spent = 0
    approved = 0
    remaining = 0
    for line in lines:
        spent_in_period += line.spent_in_period
        total_spent += line.total_spent
        approved += line.approved_limit
        remaining += line.remaining
    return BudgetTotals(
        spent_in_period=spent_in_period,
        total_spent=total_spent,
        approved=approved,
        remaining=remaining,
    )


def budget_report(
    transactions: Iterable[Transaction],
    budget_limits: Mapping[str, int],
    start: DateLike,
    end: DateLike,
    settings: Optional[LedgerSettings] = None,
) -> BudgetReport:
    """
    Build the budget report for [start, end].

    Line numbers follow the configured category order, excluded
    categories included, so a category keeps its number wherever it is
    shown.
    """
    settings = settings or LedgerSettings()
    entries = list(transactions)
    period_start, period_end = period_bounds(start, end)

    lines = []
    excluded_lines = []
    for index, category in enumerate(settings.reportable_categories, start=1):
        spent = aggregate(
            entries,
            category,
            period_start,
            period_end,
            general_category=settings.general_category,
        )
        evaluation = evaluate(
            category,
            spent.total_spent,
            budget_limits.get(category, 0),
            threshold=settings.approaching_threshold,
        )
        line = BudgetReportLine(
            index=index,
            category=category,
            spent_in_period=spent.spent_in_period,
            total_spent=spent.total_spent,
            approved_limit=evaluation.approved_limit,
            remaining=evaluation.remaining,
            status=evaluation.status,
        )
        if category in settings.rollup_excluded_categories:
            excluded_lines.append(line)
        else:
            lines.append(line)

    return BudgetReport(
        period_start=period_start,
        period_end=period_end,
        lines=tuple(lines),
        excluded_lines=tuple(excluded_lines),
        totals=roll_up(lines),
    )
