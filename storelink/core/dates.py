from datetime import date, datetime, timezone


def normalize_date(value):
    if value is None:
        return None
    if isinstance(value, datetime):
        return local_date(value)
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        value_text = value.strip()
        if not value_text:
            return None
        try:
            if len(value_text) == 10:
                return date.fromisoformat(value_text)
            return local_date(datetime.fromisoformat(value_text.replace("Z", "+00:00")))
        except ValueError:
            return None
    return None


def local_date(value: datetime) -> date:
    """Calendar date of ``value`` in the server's local timezone.

    Naive datetimes are already local wall time. Stored timestamps come back
    aware (see ``UTCDateTime``).
    """
    if value.tzinfo is None:
        return value.date()
    return value.astimezone().date()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
