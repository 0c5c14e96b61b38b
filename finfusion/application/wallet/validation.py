"""
Input validation shared by the wallet executors and use cases.

Every check raises ValidationError before any network call is made.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from finfusion.domain.wallet.errors import ValidationError

MPIN_LENGTH = 6
MIN_PASSWORD_LENGTH = 8
MONEY_PLACES = 2


def require_mpin(mpin: Optional[str]) -> str:
    """Return the MPIN if it is exactly six ASCII digits."""
    if (
        not isinstance(mpin, str)
        or len(mpin) != MPIN_LENGTH
        or not mpin.isascii()
        or not mpin.isdigit()
    ):
        raise ValidationError("MPIN must be 6 digits", field="mpin")
    return mpin


def require_text(value: Optional[str], field: str, label: str) -> str:
    """Return ``value`` stripped, rejecting empty or missing input."""
    if value is None or not str(value).strip():
        raise ValidationError(f"Please enter {label}.", field=field)
    return str(value).strip()


def parse_positive_decimal(
    value: Any, field: str, label: str, places: Optional[int] = None
) -> Decimal:
    """Parse user input into a positive, finite Decimal.

    With ``places``, the result is normalized to that many decimal places
    (``"1e2"`` becomes ``100.00``) and finer input is rejected.
    """
    if value is None or isinstance(value, bool):
        raise ValidationError(f"Please enter {label}.", field=field)
    text = str(value).strip()
    if not text:
        raise ValidationError(f"Please enter {label}.", field=field)
    try:
        amount = Decimal(text)
    except InvalidOperation as exc:
        raise ValidationError(f"{label.capitalize()} must be a number.", field=field) from exc
    if not amount.is_finite() or amount <= 0:
        raise ValidationError(f"{label.capitalize()} must be greater than zero.", field=field)
    if places is None:
        return amount
    try:
        normalized = amount.quantize(Decimal(1).scaleb(-places))
    except InvalidOperation as exc:
        raise ValidationError(f"{label.capitalize()} is out of range.", field=field) from exc
    if normalized != amount:
        raise ValidationError(
            f"{label.capitalize()} can have at most {places} decimal places.", field=field
        )
    return normalized


def parse_positive_int(value: Any, field: str, label: str) -> int:
    """Parse user input into a positive integer. Fractions are rejected."""
    if isinstance(value, bool):
        raise ValidationError(f"{label.capitalize()} must be a whole number.", field=field)
    if isinstance(value, int):
        number = value
    else:
        text = str(value).strip() if value is not None else ""
        if not (text.isascii() and text.isdigit()):
            raise ValidationError(
                f"{label.capitalize()} must be a whole number.", field=field
            )
        number = int(text)
    if number <= 0:
        raise ValidationError(f"{label.capitalize()} must be greater than zero.", field=field)
    return number
