"""
Project Billing Backend
Blueprint registry and shared request helpers.
"""

from flask import request

from billing.core.exceptions import ValidationError
from billing.utils.currency import parse_brl
from billing.utils.helpers import parse_datetime


def json_body():
    """The request body when it is a JSON object, else None (answer 400)."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else None


def csv_arg(name: str) -> list[str]:
    """Comma-separated query param as a list; empty when absent."""
    raw = request.args.get(name, "")
    return [part.strip() for part in raw.split(",") if part.strip()]


def kinds_arg(name: str, kind_enum) -> list:
    """Known enum members named in a comma-separated query param.

    Unknown names are dropped, not rejected, so a stale client filter narrows
    nothing instead of failing the listing.
    """
    values = {k.value: k for k in kind_enum}
    return [values[v] for v in csv_arg(name) if v in values]


def datetime_arg(name: str):
    try:
        return parse_datetime(request.args.get(name))
    except ValueError as exc:
        raise ValidationError(str(exc), details={name: "invalid date"}) from None


def money_arg(name: str):
    raw = request.args.get(name)
    if not raw:
        return None
    return parse_brl(raw, field=name)
