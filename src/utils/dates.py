"""
Calendar helpers: age in days from birth and measurement dates.

Dates are compared as UTC calendar days; time of day is ignored.
"""
from datetime import date, datetime, timezone
from typing import Optional, Union

DateLike = Union[str, date, datetime]


def parse_date(value: DateLike) -> date:
    """UTC calendar day of a date, datetime or ISO-8601 string."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    if "T" in text or " " in text:
        return parse_date(datetime.fromisoformat(text))
    return date.fromisoformat(text)


def today_utc() -> date:
    return datetime.now(timezone.utc).date()


def calculate_age_in_days(birth_date: DateLike, measurement_date: DateLike) -> int:
    return (parse_date(measurement_date) - parse_date(birth_date)).days


def is_valid_measurement_date(measurement_date: DateLike, birth_date: DateLike,
                              today: Optional[DateLike] = None) -> bool:
    """A measurement can't predate the birth or lie in the future."""
    measured = parse_date(measurement_date)
    today = parse_date(today) if today is not None else today_utc()
    return parse_date(birth_date) <= measured <= today
