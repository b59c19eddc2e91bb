"""
Field Redactor - capability-driven projection of response payloads.

Redaction removes keys; it never zeroes them. A viewer without ``financial``
must not be able to tell a zero total from a hidden one.
"""

from billing.core.records import Capabilities

MONETARY_ROLLUP_FIELDS = (
    "prev_total",
    "prev_cost",
    "prev_revenue",
    "total",
    "cost",
    "revenue",
    "current_expense",
    "current_income",
    "current_revenue",
)

PERSONAL_USER_FIELDS = ("cpf", "name", "phone")
FINANCIAL_USER_FIELDS = ("hourly_rate",)
FINANCIAL_TRANSACTION_FIELDS = ("amount",)
FINANCIAL_TASK_FIELDS = (
    "hourly_rate", "cost", "revenue", "prev_cost", "prev_revenue", "prev_hourly_rate",
)
FINANCIAL_ENTRY_FIELDS = ("hourly_rate", "cost")


def _without(payload: dict, names) -> dict:
    return {k: v for k, v in payload.items() if k not in names}


def redact_rollup(base: dict, totals, capabilities: Capabilities) -> dict:
    """Merge ``totals`` into ``base`` according to ``capabilities``.

    ``totals`` is a ``ProjectTotals``; dates are always shown.
    """
    result = dict(base)
    if capabilities.financial:
        result.update(totals.monetary())
    result["begin_date"] = totals.begin_date
    result["end_date"] = totals.end_date
    result["financial"] = capabilities.financial
    return result


def redact_user(user: dict, capabilities: Capabilities) -> dict:
    hidden = ()
    if not capabilities.personal:
        hidden += PERSONAL_USER_FIELDS
    if not capabilities.financial:
        hidden += FINANCIAL_USER_FIELDS
    return _without(user, hidden)


def redact_transaction(entry: dict, capabilities: Capabilities) -> dict:
    if capabilities.financial:
        return dict(entry)
    return _without(entry, FINANCIAL_TRANSACTION_FIELDS)


def redact_task(task: dict, capabilities: Capabilities) -> dict:
    if capabilities.financial:
        return dict(task)
    return _without(task, FINANCIAL_TASK_FIELDS)


def redact_entry(entry: dict, capabilities: Capabilities) -> dict:
    """Logged work and expense entries: rate and cost need ``financial``."""
    if capabilities.financial:
        return dict(entry)
    return _without(entry, FINANCIAL_ENTRY_FIELDS)
