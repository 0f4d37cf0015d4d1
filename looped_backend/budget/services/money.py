# budget/services/money.py

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from budget.services.exceptions import InvalidAmountError

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value) -> Decimal:
    """Normalize any numeric input into a 2dp Decimal (ROUND_HALF_UP)."""
    if value is None or value == "":
        return ZERO

    if isinstance(value, bool):
        raise InvalidAmountError(f"Invalid money value: {value!r}")

    if isinstance(value, Decimal):
        amt = value
    else:
        try:
            amt = Decimal(str(value))
        except (InvalidOperation, ValueError, TypeError) as exc:
            raise InvalidAmountError(f"Invalid money value: {value!r}") from exc

    if not amt.is_finite():
        raise InvalidAmountError(f"Invalid money value: {value!r}")

    return amt.quantize(TWOPLACES, rounding=ROUND_HALF_UP)
