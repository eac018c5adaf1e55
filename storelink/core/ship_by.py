from datetime import date, timedelta

from storelink.core.constants import ROLLING_WINDOWS, SHIP_BY_BUCKETS
from storelink.core.dates import normalize_date

CLOSED_STATUSES = ("SHIPPED", "CANCELLED")


def _today(today=None):
    return normalize_date(today) if today is not None else date.today()


def ship_by_bucket(ship_by, status, today=None):
    """DELAYED, TODAY, TOMORROW or None for a ship-by deadline.

    Dates are compared as local calendar days. Orders without a ship-by
    date never fall in a bucket.
    """
    ship_date = normalize_date(ship_by)
    if ship_date is None:
        return None
    today = _today(today)
    if ship_date < today:
        if status in CLOSED_STATUSES:
            return None
        return "DELAYED"
    if ship_date == today:
        return "TODAY"
    if ship_date == today + timedelta(days=1):
        return "TOMORROW"
    return None


def ship_by_urgency(ship_by, today=None):
    ship_date = normalize_date(ship_by)
    if ship_date is None:
        return "NONE"
    days_left = (ship_date - _today(today)).days
    if days_left < 0:
        return "OVERDUE"
    if days_left <= 1:
        return "URGENT"
    return "SCHEDULED"


def order_age_days(order_date, today=None):
    placed = normalize_date(order_date)
    if placed is None:
        return None
    return (_today(today) - placed).days


def matches_time_range(order, time_range, today=None):
    if not time_range or time_range == "ALL":
        return True
    if time_range in SHIP_BY_BUCKETS:
        return ship_by_bucket(order.ship_by, order.status, today) == time_range
    window = ROLLING_WINDOWS.get(time_range)
    if window is None:
        raise ValueError("Unknown time range: {}".format(time_range))
    age = order_age_days(order.date, today)
    return age is not None and 0 <= age <= window
