"""
Local <-> UTC conversion.

Every wall-clock to instant conversion in the app goes through here. Never
offset hours by hand: DST transitions are resolved by zoneinfo (fold=0, so a
nonexistent spring-forward time lands after the gap and an ambiguous
fall-back time takes the first, daylight, occurrence). A shift window is
the exception: see shift_window_utc.
"""

from datetime import date, datetime, time, timedelta, timezone
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from app.core.exceptions import ValidationError

from .local_time import DateLike, TimeLike, parse_date, parse_hhmm


@lru_cache(maxsize=64)
def get_zone(name: str) -> ZoneInfo:
    """Look up an IANA zone, raising ValidationError for unknown names."""
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValidationError(f"Unknown timezone: {name!r}")


def is_valid_timezone(name: str) -> bool:
    try:
        get_zone(name)
    except ValidationError:
        return False
    return True


def _to_utc(local: datetime) -> datetime:
    # Round-trip through UTC normalises gap times onto a real instant
    return local.astimezone(timezone.utc)


def convert_local_to_utc(day: DateLike, at: TimeLike, tz_name: str, fold: int = 0) -> datetime:
    """Interpret date + HH:mm as wall-clock time in tz_name; return the UTC instant."""
    zone = get_zone(tz_name)
    local = datetime.combine(parse_date(day), parse_hhmm(at), tzinfo=zone).replace(fold=fold)
    return _to_utc(local)


def convert_utc_to_local(instant: datetime, tz_name: str) -> tuple[date, time]:
    """Inverse of convert_local_to_utc: (local date, local time to the minute)."""
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    local = instant.astimezone(get_zone(tz_name))
    return local.date(), local.time().replace(second=0, microsecond=0, tzinfo=None)


def shift_window_utc(
    day: DateLike,
    start: TimeLike,
    end: TimeLike,
    tz_name: str,
) -> tuple[datetime, datetime]:
    """
    UTC start/end for a shift that begins on `day`.

    When the end time-of-day is <= the start time-of-day the end is taken on
    the following calendar date (overnight, or a full 24h when equal).

    A start inside a spring-forward gap can resolve past a same-day end
    (02:30-03:15 on the changeover night). The start is then resolved with
    fold=1, which lands it before the gap, so the window keeps its wall-clock
    length and end_utc stays after start_utc.
    """
    d = parse_date(day)
    start_t = parse_hhmm(start)
    end_t = parse_hhmm(end)

    end_day = d + timedelta(days=1) if end_t <= start_t else d

    start_utc = convert_local_to_utc(d, start_t, tz_name)
    end_utc = convert_local_to_utc(end_day, end_t, tz_name)
    if end_utc <= start_utc:
        start_utc = convert_local_to_utc(d, start_t, tz_name, fold=1)
    return start_utc, end_utc
