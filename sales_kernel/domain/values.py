"""
Values -- amount parsing and formatting.

Responsibility:
    Report amount fields (``sellingRate``, ``netRate``, ``installmentPaid``)
    are persisted as the strings the user typed.  This module is the one
    place they become ``Decimal`` and the one place a ``Decimal`` becomes a
    two-place display string.

Invariants enforced:
    - Decimal-only arithmetic; floats never enter a computation.
    - All amounts leaving the kernel are quantized to 2 places, ROUND_HALF_UP.

Failure modes:
    - ``parse_amount`` never raises; anything it cannot read is zero.
    - ``parse_strict_amount`` raises ``ValueError`` for blank or malformed
      input, exponent notation, and amounts too large to carry two places
      (used by validation, which turns it into a typed error).
"""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

AMOUNT_PLACES = Decimal("0.01")
ZERO = Decimal("0.00")

# Leading numeric prefix, the way a browser's parseFloat reads "300 USD" as 300.
_LEADING_NUMBER = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")

# Plain decimal notation only: optional sign, digits, at most one point.
_PLAIN_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)")

# Stored amounts are summed and quantized under the default 28-digit
# context; 15 integer digits leaves room for both.
MAX_INTEGER_DIGITS = 15


def quantize_amount(value: Decimal) -> Decimal:
    """Round to two places, half up."""
    return value.quantize(AMOUNT_PLACES, rounding=ROUND_HALF_UP)


def leading_amount(value: Any) -> Decimal | None:
    """
    The number a value starts with, or None when it does not start with one.

    Accepts Decimal, int, float (via ``str``) or text.  Text is read up to
    the end of its leading number, so ``"1000 USD"`` is 1000.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, (int, float)):
        value = str(value)
    match = _LEADING_NUMBER.match(str(value))
    if match is None:
        return None
    try:
        parsed = Decimal(match.group(1))
    except InvalidOperation:
        return None
    return parsed if parsed.is_finite() else None


def parse_amount(value: Any) -> Decimal:
    """Lenient amount parse: the leading number, or zero when there is none."""
    parsed = leading_amount(value)
    return Decimal(0) if parsed is None else parsed


def parse_strict_amount(value: Any) -> Decimal:
    """
    Strict amount parse for validation.

    Raises:
        ValueError: blank, not entirely a plain decimal number, or more
            than ``MAX_INTEGER_DIGITS`` digits before the point.
    """
    if value is None:
        raise ValueError("amount is missing")
    text = str(value).strip()
    if not text:
        raise ValueError("amount is blank")
    if not _PLAIN_NUMBER.fullmatch(text):
        raise ValueError(f"not a number: {text!r}")
    parsed = Decimal(text)
    if parsed.adjusted() >= MAX_INTEGER_DIGITS:
        raise ValueError(f"amount too large: {text!r}")
    return parsed


def format_amount(value: Decimal) -> str:
    """Two-place string form, e.g. ``Decimal("700") -> "700.00"``."""
    return f"{quantize_amount(value):.2f}"
