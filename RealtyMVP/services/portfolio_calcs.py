# RealtyMVP/services/portfolio_calcs.py
"""Derived view numbers for the agency pages.

Everything here works on collections that were already loaded (model
instances or plain dicts from the JSON API) and never touches the database.
Missing optional fields count as "no match" rather than raising.
"""
from __future__ import annotations

import math
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

PROPERTY_SEARCH_FIELDS = ("title", "address", "city")
CLIENT_SEARCH_FIELDS = ("name", "email", "phone")

DEFAULT_MAP_CENTER = (40.7128, -74.0060)


# ---------------------------------------------------------
# Record access / coercion
# ---------------------------------------------------------
def field_value(record, name: str, default=None):
    if record is None:
        return default
    if isinstance(record, dict):
        return record.get(name, default)
    return getattr(record, name, default)


def safe_float(x, default=0.0):
    try:
        if x is None:
            return default
        if isinstance(x, (int, float)):
            return float(x) if math.isfinite(x) else default
        s = str(x).replace("$", "").replace(",", "").strip()
        value = float(s) if s else default
        return value if value is None or math.isfinite(value) else default
    except (TypeError, ValueError):
        return default


def to_datetime(value) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone().replace(tzinfo=None)
        return value
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time())
    try:
        return to_datetime(datetime.fromisoformat(str(value).strip().replace("Z", "+00:00")))
    except ValueError:
        return None


def to_date(value) -> Optional[date]:
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    dt = to_datetime(value)
    return dt.date() if dt else None


def _is_date_only(value) -> bool:
    if isinstance(value, datetime):
        return False
    if isinstance(value, date):
        return True
    return isinstance(value, str) and len(value.strip()) == 10


def _amount(record) -> float:
    return safe_float(field_value(record, "commission_amount"), 0.0)


# ---------------------------------------------------------
# Search + categorical filters
# ---------------------------------------------------------
def matches_filters(record, search: str = "", search_fields: Sequence[str] = (), filters: Optional[Dict[str, Any]] = None) -> bool:
    """True iff the search text is found in one of ``search_fields`` (case-insensitive)
    and every categorical filter is "all" or equals the record's field exactly.
    """
    needle = (search or "").lower()
    if needle:
        found = False
        for name in search_fields:
            value = field_value(record, name)
            if value is not None and needle in str(value).lower():
                found = True
                break
        if not found:
            return False

    for name, wanted in (filters or {}).items():
        if wanted in (None, "", "all"):
            continue
        if field_value(record, name) != wanted:
            return False
    return True


def filter_records(records: Iterable, search: str = "", search_fields: Sequence[str] = (), **filters) -> List:
    return [r for r in records if matches_filters(r, search, search_fields, filters)]


def filter_properties(properties: Iterable, search="", property_type="all", status="all", listing_type="all") -> List:
    return filter_records(
        properties, search, PROPERTY_SEARCH_FIELDS,
        property_type=property_type, status=status, listing_type=listing_type,
    )


def filter_clients(clients: Iterable, search="", client_type="all", status="all") -> List:
    return filter_records(clients, search, CLIENT_SEARCH_FIELDS, client_type=client_type, status=status)


# ---------------------------------------------------------
# Commissions
# ---------------------------------------------------------
def compute_commission_amount(deal_value, commission_rate) -> Optional[float]:
    """deal_value x rate / 100, or None when either input is missing/zero."""
    value = safe_float(deal_value, 0.0)
    rate = safe_float(commission_rate, 0.0)
    if not value or not rate:
        return None
    return round(value * (rate / 100.0), 2)


def in_month(value, now: datetime) -> bool:
    d = to_date(value)
    return bool(d) and d.year == now.year and d.month == now.month


def in_year(value, now: datetime) -> bool:
    d = to_date(value)
    return bool(d) and d.year == now.year


def commission_totals(commissions: Iterable, now: Optional[datetime] = None) -> Dict[str, Any]:
    now = now or datetime.now()
    commissions = list(commissions)
    paid = [c for c in commissions if field_value(c, "status") == "paid"]
    pending = [c for c in commissions if field_value(c, "status") == "pending"]
    monthly = [c for c in commissions if in_month(field_value(c, "closing_date"), now)]

    return {
        "total": sum(_amount(c) for c in commissions),
        "paid": sum(_amount(c) for c in paid),
        "pending": sum(_amount(c) for c in pending),
        "monthly": sum(_amount(c) for c in monthly),
        "deal_count": len(commissions),
        "paid_count": len(paid),
        "pending_count": len(pending),
    }


def filter_commissions(commissions: Iterable, status: str = "all", period: str = "all", now: Optional[datetime] = None) -> List:
    now = now or datetime.now()
    result = []
    for c in commissions:
        if status not in (None, "", "all") and field_value(c, "status") != status:
            continue
        closing = field_value(c, "closing_date")
        if period == "month" and not in_month(closing, now):
            continue
        if period == "year" and not in_year(closing, now):
            continue
        result.append(c)
    return result


def commission_defaults_from_property(prop) -> Dict[str, Any]:
    """Deal fields pre-filled from the selected listing."""
    if prop is None:
        return {}
    defaults = {
        "deal_type": "rental" if field_value(prop, "listing_type") == "rent" else "sale",
    }
    if field_value(prop, "price"):
        defaults["deal_value"] = field_value(prop, "price")
    if field_value(prop, "commission_rate"):
        defaults["commission_rate"] = field_value(prop, "commission_rate")
    if field_value(prop, "owner_client_id"):
        defaults["client_id"] = field_value(prop, "owner_client_id")
    return defaults


# ---------------------------------------------------------
# Reminders
# ---------------------------------------------------------
def bucket_reminders(reminders: Iterable, now: Optional[datetime] = None) -> Dict[str, List]:
    """Split pending reminders into overdue / today / upcoming.

    A reminder due on today's calendar day is "today" even if its time has
    passed; the three buckets never overlap.
    """
    now = now or datetime.now()
    buckets: Dict[str, List] = {"overdue": [], "today": [], "upcoming": []}

    for r in reminders:
        if field_value(r, "status") != "pending":
            continue
        due = to_datetime(field_value(r, "due_date"))
        if due is None:
            continue
        if due.date() == now.date():
            buckets["today"].append(r)
        elif due < now:
            buckets["overdue"].append(r)
        else:
            buckets["upcoming"].append(r)
    return buckets


def filter_reminders(reminders: Iterable, status: str = "pending") -> List:
    if status in (None, "", "all"):
        return list(reminders)
    return [r for r in reminders if field_value(r, "status") == status]


def reminder_stats(reminders: Iterable, now: Optional[datetime] = None) -> Dict[str, int]:
    now = now or datetime.now()
    reminders = list(reminders)
    buckets = bucket_reminders(reminders, now)
    week_end = now + timedelta(days=7)

    this_week = 0
    for r in reminders:
        if field_value(r, "status") != "pending":
            continue
        due = to_datetime(field_value(r, "due_date"))
        if due is not None and now <= due <= week_end:
            this_week += 1

    return {
        "pending": len(filter_reminders(reminders, "pending")),
        "overdue": len(buckets["overdue"]),
        "today": len(buckets["today"]),
        "this_week": this_week,
    }


def actionable_reminders(reminders: Iterable, now: Optional[datetime] = None, limit: int = 5) -> List:
    """Pending reminders due today or later, soonest first."""
    buckets = bucket_reminders(reminders, now)
    items = buckets["today"] + buckets["upcoming"]
    items.sort(key=lambda r: to_datetime(field_value(r, "due_date")))
    return items[:limit]


# ---------------------------------------------------------
# Properties
# ---------------------------------------------------------
def contract_alerts(properties: Iterable, now: Optional[datetime] = None, days: int = 30) -> List:
    """Listings whose agency contract ends within [now, now + days]."""
    now = now or datetime.now()
    horizon = now + timedelta(days=days)
    alerts = []
    for p in properties:
        raw = field_value(p, "contract_end_date")
        if not raw:
            continue
        if _is_date_only(raw):
            end = to_date(raw)
            if end and now.date() <= end <= horizon.date():
                alerts.append(p)
        else:
            end = to_datetime(raw)
            if end and now <= end <= horizon:
                alerts.append(p)
    return alerts


def located_properties(properties: Iterable) -> List:
    return [p for p in properties if field_value(p, "latitude") and field_value(p, "longitude")]


def map_markers(properties: Iterable, status: str = "all", listing_type: str = "all") -> List:
    return filter_records(located_properties(properties), status=status, listing_type=listing_type)


def map_center(properties: Sequence, default: Tuple[float, float] = DEFAULT_MAP_CENTER) -> Tuple[float, float]:
    """Midpoint of the bounding box of the given properties."""
    located = located_properties(properties)
    if not located:
        return tuple(default)
    lats = [safe_float(field_value(p, "latitude")) for p in located]
    lngs = [safe_float(field_value(p, "longitude")) for p in located]
    return ((min(lats) + max(lats)) / 2, (min(lngs) + max(lngs)) / 2)


# ---------------------------------------------------------
# Dashboard
# ---------------------------------------------------------
def dashboard_stats(properties, clients, commissions, reminders, now: Optional[datetime] = None, alert_days: int = 30) -> Dict[str, Any]:
    now = now or datetime.now()
    properties = list(properties)
    clients = list(clients)
    reminders = list(reminders)
    stats = reminder_stats(reminders, now)

    return {
        "active_listings": len([p for p in properties if field_value(p, "status") == "available"]),
        "total_properties": len(properties),
        "active_clients": len([c for c in clients if field_value(c, "status") == "active"]),
        "total_clients": len(clients),
        "monthly_revenue": commission_totals(commissions, now)["monthly"],
        "pending_reminders": stats["pending"],
        "overdue_reminders": stats["overdue"],
        "contract_alerts": contract_alerts(properties, now, alert_days),
    }


# ---------------------------------------------------------
# Reference resolution
# ---------------------------------------------------------
def index_by_id(records: Iterable) -> Dict[Any, Any]:
    return {field_value(r, "id"): r for r in records}


def resolve(index: Dict[Any, Any], ref_id):
    """Look up a referenced record; dangling or empty ids give None."""
    if ref_id in (None, ""):
        return None
    return index.get(ref_id)
