from datetime import date, datetime, timezone


def utcnow() -> datetime:
    """Timezone-aware UTC timestamp; datetime columns reject naive values."""
    return datetime.now(tz=timezone.utc)


def today() -> date:
    """Local calendar date; due dates are compared against this."""
    return date.today()
