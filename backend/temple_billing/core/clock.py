"""
Temple Billing - Business clock
Current date/time in the temple's timezone
"""

from datetime import date, datetime
from zoneinfo import ZoneInfo

from temple_billing.core.config import settings


def now() -> datetime:
    """Current local time as a naive datetime (stored as-is in the database)"""
    return datetime.now(ZoneInfo(settings.TIMEZONE)).replace(tzinfo=None)


def today() -> date:
    return now().date()
