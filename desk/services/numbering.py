"""
Sequential bill numbers.

Numbers look like ``B000001``.  The next number is derived from the
highest numeric suffix already issued; when the existing numbers cannot
be read the number falls back to the last six digits of the current
epoch milliseconds, which is not guaranteed to be unique or increasing.
"""
from __future__ import annotations

import logging
import re
import time

from django.db import DatabaseError

from desk.models import Bill

logger = logging.getLogger(__name__)

PREFIX = "B"
PADDING = 6
FIRST_NUMBER = f"{PREFIX}{1:0{PADDING}d}"

_SUFFIX_RE = re.compile(r"B(\d+)")


def parse_suffix(bill_number: str) -> int:
    m = _SUFFIX_RE.search(bill_number or "")
    return int(m.group(1)) if m else 0


def format_number(n: int) -> str:
    return f"{PREFIX}{n:0{PADDING}d}"


def timestamp_number(now_ms: int | None = None) -> str:
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{PREFIX}{str(now_ms)[-PADDING:]}"


def _existing_bill_numbers() -> list[str]:
    return list(Bill.objects.values_list("bill_number", flat=True))


def next_bill_number() -> str:
    try:
        numbers = _existing_bill_numbers()
    except DatabaseError:
        logger.warning("could not load bill numbers, using timestamp fallback", exc_info=True)
        return timestamp_number()
    if not numbers:
        return FIRST_NUMBER
    return format_number(max(parse_suffix(n) for n in numbers) + 1)
