"""Calendar day keys derived from local wall-clock time."""

from collections.abc import Callable
from datetime import date, datetime, tzinfo

from calorie_tracker.errors import ValidationError

DATE_KEY_FORMAT = "%Y-%m-%d"

Clock = Callable[[], datetime]


def local_clock(tz: tzinfo | None = None) -> Clock:
    """Return a clock producing aware datetimes in ``tz`` or the system zone."""

    def now() -> datetime:
        if tz is None:
            return datetime.now().astimezone()
        return datetime.now(tz=tz)

    return now


def date_key(value: date | datetime) -> str:
    """Format a date (or the wall-clock day of a datetime) as ``YYYY-MM-DD``."""
    if isinstance(value, datetime):
        value = value.date()
    return value.strftime(DATE_KEY_FORMAT)


def parse_date_key(key: str) -> date:
    """Parse a ``YYYY-MM-DD`` key, rejecting anything else."""
    try:
        parsed = datetime.strptime(key, DATE_KEY_FORMAT).date()
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Invalid date key: {key!r}") from exc
    if date_key(parsed) != key:
        raise ValidationError(f"Invalid date key: {key!r}")
    return parsed
