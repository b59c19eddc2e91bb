"""
Tests: Rollup Aggregator.

Covers:
  1. planned totals from the budget snapshot
  2. actual totals from live tasks
  3. transaction totals (Income / Expense only)
  4. date span
  5. capability projection and response formatting
"""

from datetime import datetime, timedelta
from decimal import Decimal

from billing.core.records import (
    ActivityLog,
    ActivityTask,
    BudgetSnapshot,
    Capabilities,
    ExpenseEntry,
    ExpenseTask,
    LedgerEntry,
    ProjectTree,
    TransactionKind,
)
from billing.services.redaction import MONETARY_ROLLUP_FIELDS
from billing.services.rollup import aggregate_project, date_span, format_rollup, rollup_project

FINANCIAL = Capabilities(financial=True)
NO_FINANCIAL = Capabilities(project=True, personal=True)


def _project(budget_tasks=(), tasks=(), transactions=(), budget_date=None) -> ProjectTree:
    return ProjectTree(
        uuid="p-1",
        name="Website",
        budget=BudgetSnapshot(date=budget_date, tasks=tuple(budget_tasks)),
        tasks=tuple(tasks),
        transactions=tuple(transactions),
    )


# ── 1. planned ───────────────────────────────────────────────────────────────


def test_budget_with_single_activity_formats_to_four_hundred() -> None:
    """4h at R$ 100,00 planned, nothing live, no ledger."""
    task = ActivityTask(
        begin_date=datetime(2024, 1, 1, 8, 0),
        end_date=datetime(2024, 1, 1, 12, 0),
        hourly_rate=Decimal("100.00"),
    )
    result = format_rollup(rollup_project(_project(budget_tasks=[task]), FINANCIAL))

    assert result["prev_cost"] == "R$ 400,00"
    assert result["prev_total"] == "R$ 400,00"
    assert result["total"] == "R$ 0,00"
    assert result["cost"] == "R$ 0,00"
    assert result["financial"] is True


def test_prev_total_is_prev_cost_plus_prev_revenue() -> None:
    tasks = [
        ExpenseTask(begin_date=datetime(2024, 1, 1), end_date=datetime(2024, 1, 2),
                    cost=Decimal("300"), revenue=Decimal("120")),
        ActivityTask(begin_date=datetime(2024, 1, 1, 9), end_date=datetime(2024, 1, 1, 11),
                     hourly_rate=Decimal("50"), revenue=Decimal("10")),
    ]
    totals = aggregate_project(_project(budget_tasks=tasks))
    assert totals.prev_cost == Decimal("400")
    assert totals.prev_revenue == Decimal("140")
    assert totals.prev_total == Decimal("540")


# ── 2. actual ────────────────────────────────────────────────────────────────


def test_actual_totals_come_from_live_task_children() -> None:
    live = [
        ExpenseTask(
            begin_date=datetime(2024, 2, 1), end_date=datetime(2024, 2, 3),
            cost=Decimal("999"), revenue=Decimal("200"),
            expenses=(ExpenseEntry(cost=Decimal("75"), date=datetime(2024, 2, 2)),),
        ),
        ActivityTask(
            begin_date=datetime(2024, 2, 1, 8), end_date=datetime(2024, 2, 1, 10),
            hourly_rate=Decimal("80"), revenue=Decimal("5"),
            activities=(ActivityLog(datetime(2024, 2, 1, 8), datetime(2024, 2, 1, 9), Decimal("60")),),
        ),
    ]
    totals = aggregate_project(_project(tasks=live))
    assert totals.cost == Decimal("135")
    assert totals.revenue == Decimal("210")
    assert totals.total == Decimal("345")
    assert totals.prev_cost == 0


def test_budget_tasks_do_not_count_as_actual() -> None:
    planned = ExpenseTask(begin_date=datetime(2024, 1, 1), end_date=datetime(2024, 1, 1),
                          cost=Decimal("50"),
                          expenses=(ExpenseEntry(cost=Decimal("50")),))
    totals = aggregate_project(_project(budget_tasks=[planned]))
    assert totals.cost == 0
    assert totals.total == 0


# ── 3. transactions ──────────────────────────────────────────────────────────


def test_only_income_and_expense_transactions_are_summed() -> None:
    ledger = [
        LedgerEntry(TransactionKind.INCOME, Decimal("1000")),
        LedgerEntry(TransactionKind.INCOME, Decimal("250.50")),
        LedgerEntry(TransactionKind.EXPENSE, Decimal("300")),
        LedgerEntry(TransactionKind.TRANSFER, Decimal("5000")),
        LedgerEntry(TransactionKind.REFUND, Decimal("70")),
        LedgerEntry(TransactionKind.LOAN, None),
    ]
    totals = aggregate_project(_project(transactions=ledger))
    assert totals.current_income == Decimal("1250.50")
    assert totals.current_expense == Decimal("300")
    assert totals.current_revenue == Decimal("950.50")


def test_empty_project_aggregates_to_zero_without_dates() -> None:
    totals = aggregate_project(_project())
    for name in MONETARY_ROLLUP_FIELDS:
        assert getattr(totals, name) == 0
    assert totals.begin_date is None
    assert totals.end_date is None


# ── 4. date span ─────────────────────────────────────────────────────────────


def test_date_span_ends_on_latest_transaction() -> None:
    task = ExpenseTask(begin_date=datetime(2024, 1, 10), end_date=datetime(2024, 3, 1), cost=Decimal("1"))
    ledger = [LedgerEntry(TransactionKind.INCOME, Decimal("10"), date=datetime(2024, 3, 15))]
    begin, end = date_span(_project(tasks=[task], transactions=ledger))
    assert begin == datetime(2024, 1, 10)
    assert end == datetime(2024, 3, 15)


def test_date_span_includes_budget_date_and_child_dates() -> None:
    live = ActivityTask(
        begin_date=datetime(2024, 5, 1), end_date=datetime(2024, 5, 2),
        activities=(ActivityLog(datetime(2024, 5, 1), datetime(2024, 6, 30, 18)),),
    )
    planned = ExpenseTask(
        begin_date=datetime(2024, 5, 1), end_date=datetime(2024, 5, 1),
        expenses=(ExpenseEntry(cost=Decimal("1"), date=None),),
    )
    begin, end = date_span(_project(budget_tasks=[planned], tasks=[live],
                                    budget_date=datetime(2024, 4, 20)))
    assert begin == datetime(2024, 4, 20)
    assert end == datetime(2024, 6, 30, 18)


# ── 5. projection & formatting ───────────────────────────────────────────────


def test_rollup_without_financial_has_no_monetary_keys() -> None:
    ledger = [LedgerEntry(TransactionKind.INCOME, Decimal("10"), date=datetime(2024, 3, 15))]
    result = rollup_project(_project(transactions=ledger), NO_FINANCIAL)
    for name in MONETARY_ROLLUP_FIELDS:
        assert name not in result
    assert result["financial"] is False
    assert result["end_date"] == datetime(2024, 3, 15)
    assert result["name"] == "Website"


def test_format_rollup_uses_display_dates_and_null_for_missing() -> None:
    task = ExpenseTask(begin_date=datetime(2024, 1, 10, 9, 5), end_date=datetime(2024, 3, 1, 17, 30),
                       cost=Decimal("1234.5"))
    formatted = format_rollup(rollup_project(_project(budget_tasks=[task]), FINANCIAL))
    assert formatted["begin_date"] == "10/01/24 09:05"
    assert formatted["end_date"] == "01/03/24 17:30"
    assert formatted["prev_cost"] == "R$ 1.234,50"

    empty = format_rollup(rollup_project(_project(), FINANCIAL))
    assert empty["begin_date"] is None
    assert empty["end_date"] is None


def test_negative_balance_is_formatted_with_leading_sign() -> None:
    ledger = [LedgerEntry(TransactionKind.EXPENSE, Decimal("12.3"))]
    formatted = format_rollup(rollup_project(_project(transactions=ledger), FINANCIAL))
    assert formatted["current_revenue"] == "-R$ 12,30"
