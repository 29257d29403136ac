from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal("0.01")


def D(x) -> Decimal:
    """``Decimal`` from any number or numeric string; ``None`` counts as zero.

    Unparseable input raises ``decimal.InvalidOperation``.
    """
    return Decimal(str(x if x is not None else 0))


def money2(x) -> Decimal:
    return D(x).quantize(CENT, rounding=ROUND_HALF_UP)


def fmt_money(x) -> str:
    """Fixed-point string with two places, e.g. ``"250.50"``."""
    return str(money2(x))


def line_amount(quantity, rate, discount) -> Decimal:
    return money2(D(quantity) * D(rate) - D(discount))
