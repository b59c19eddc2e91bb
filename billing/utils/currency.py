"""Brazilian real (BRL) money helpers.

Amounts travel through the system as ``Decimal`` major units. They are turned
into the display string only when a response is built, and parsed back from
it when a request comes in:

    format_brl(Decimal("1234.5"))  -> "R$ 1.234,50"
    parse_brl("R$ 1.234,50")       -> Decimal("1234.50")
"""

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from billing.core.exceptions import ValidationError

ZERO = Decimal("0")
CENTS = Decimal("0.01")
CURRENCY_SYMBOL = "R$"

# "R$ 1.234,56", "1234,5", "R$1,00", "-R$ 10,00"
_BRL_RE = re.compile(
    r"^(?P<sign>-)?\s*(?:R\$)?\s*(?P<int>\d{1,3}(?:\.\d{3})+|\d+)(?:,(?P<frac>\d{1,2}))?$"
)


def to_decimal(value) -> Decimal:
    """Coerce a stored/inbound number to Decimal; None becomes zero.

    Floats go through ``str`` so that 0.1 stays 0.1.
    """
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    try:
        return Decimal(value)
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise ValidationError(f"Invalid numeric value {value!r}") from exc


def quantize(value) -> Decimal:
    """Round to cents, half away from zero."""
    return to_decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def format_brl(value) -> str:
    amount = quantize(value)
    sign = "-" if amount < 0 else ""
    integer, cents = f"{abs(amount):.2f}".split(".")
    grouped = f"{int(integer):,}".replace(",", ".")
    return f"{sign}{CURRENCY_SYMBOL} {grouped},{cents}"


def parse_brl(text, *, field: str = "amount") -> Decimal:
    """Parse a BRL display string. Empty input means zero.

    Raises:
        ValidationError: when the text is not a BRL amount.
    """
    if text is None:
        return ZERO
    if isinstance(text, (int, float, Decimal)):
        return quantize(text)
    raw = str(text).replace("\xa0", " ").strip()
    if not raw:
        return ZERO
    match = _BRL_RE.match(raw)
    if not match:
        raise ValidationError(
            f"Invalid currency value for {field}",
            details={field: "Use the format R$ 1.234,56"},
        )
    integer = match.group("int").replace(".", "")
    cents = (match.group("frac") or "0").ljust(2, "0")
    amount = Decimal(f"{integer}.{cents}")
    return -amount if match.group("sign") else amount
