"""Price parsing and formatting in integer minor units (øre)."""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

_PRICE_NOISE_RE = re.compile(r"[^0-9,.]")
_LEADING_NUMBER_RE = re.compile(r"\d+(?:\.\d*)?|\.\d+")


def parse_price_to_cents(value: Any) -> int | None:
    """Parse a decorated major-unit price such as ``"4 490,-"`` into cents.

    Everything except digits, commas and periods is dropped, the first comma
    becomes a decimal point and the leading decimal number is used. Plain
    digit strings are always read as major units; ``None`` is returned when
    nothing numeric remains.
    """

    if value is None:
        return None
    normalized = _PRICE_NOISE_RE.sub("", str(value)).replace(",", ".", 1)
    match = _LEADING_NUMBER_RE.match(normalized)
    if match is None:
        return None
    try:
        amount = Decimal(match.group(0))
    except InvalidOperation:
        return None
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_money(cents: int | None, currency: str = "kr") -> str:
    """Render cents the way nb-NO prints kroner: ``449000`` -> ``"4 490,00 kr"``."""

    amount = Decimal(cents or 0) / 100
    sign = "-" if amount < 0 else ""
    whole, _, fraction = f"{abs(amount):,.2f}".partition(".")
    return f"{sign}{whole.replace(',', ' ')},{fraction} {currency}"


__all__ = ["format_money", "parse_price_to_cents"]
