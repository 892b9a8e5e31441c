"""Time utilities (EAT)."""

from datetime import date, datetime
from zoneinfo import ZoneInfo

EAT = ZoneInfo("Africa/Nairobi")


def now_eat_naive() -> datetime:
    """
    Current time in EAT, returned as naive datetime for record timestamps.
    """
    return datetime.now(EAT).replace(tzinfo=None)


def today_eat() -> date:
    """Current calendar date in Kenya."""
    return now_eat_naive().date()

