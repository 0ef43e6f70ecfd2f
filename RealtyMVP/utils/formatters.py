# RealtyMVP/utils/formatters.py
"""Display formatting shared by templates, cards and the JSON API."""
from __future__ import annotations

import math
from datetime import date, datetime, timedelta
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional

_ONE_DECIMAL = Decimal("0.1")
_WHOLE = Decimal("1")


def _plain_number(n) -> str:
    if isinstance(n, float) and n.is_integer():
        return str(int(n))
    return str(n)


def format_price(n) -> Optional[str]:
    """Compact price: $1.3M, $450K, $950. Falsy or non-finite input gives None."""
    if not n:
        return None
    try:
        value = Decimal(str(n))
    except (InvalidOperation, ValueError):
        return None
    if not value.is_finite():
        return None

    if value >= 1_000_000:
        millions = (value / 1_000_000).quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP)
        return f"${millions}M"
    if value >= 1_000:
        thousands = (value / 1_000).quantize(_WHOLE, rounding=ROUND_HALF_UP)
        return f"${thousands}K"
    return f"${_plain_number(n)}"


def format_budget(budget_min, budget_max) -> Optional[str]:
    min_str = format_price(budget_min)
    max_str = format_price(budget_max)
    if min_str and max_str:
        return f"{min_str} - {max_str}"
    if min_str:
        return f"From {min_str}"
    if max_str:
        return f"Up to {max_str}"
    return None


def format_currency(amount) -> str:
    """Whole-dollar USD with thousands separators."""
    try:
        value = float(amount)
    except (ValueError, TypeError):
        return "$0"
    if not math.isfinite(value):
        return "$0"
    return "${:,.0f}".format(value)


def format_date(value, with_time=False) -> str:
    """'Oct 19, 2026' (optionally followed by '3:05 PM')."""
    if not value:
        return ""
    text = f"{value:%b} {value.day}, {value.year}"
    if with_time and isinstance(value, datetime):
        hour = value.hour % 12 or 12
        text += f" {hour}:{value:%M %p}"
    return text


def reminder_date_label(due, now=None) -> str:
    if not due:
        return ""
    now = now or datetime.now()
    due_day = due.date() if isinstance(due, datetime) else due
    if due_day == now.date():
        return "Today"
    if due_day == now.date() + timedelta(days=1):
        return "Tomorrow"
    return format_date(due)


def time_ago(value, now=None) -> str:
    """Relative time with suffix: '3 hours ago', 'in 2 days'."""
    if not value:
        return ""
    now = now or datetime.now()
    if not isinstance(value, datetime):
        value = datetime.combine(value, datetime.min.time())

    seconds = int((now - value).total_seconds())
    future = seconds < 0
    seconds = abs(seconds)

    if seconds < 60:
        return "just now"
    for unit, size in (("day", 86400), ("hour", 3600), ("minute", 60)):
        if seconds >= size:
            count = seconds // size
            label = f"{count} {unit}{'s' if count != 1 else ''}"
            return f"in {label}" if future else f"{label} ago"
    return "just now"


def isoformat_or_none(value) -> Optional[str]:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return None
