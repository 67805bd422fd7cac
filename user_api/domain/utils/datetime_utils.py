"""Timezone-aware clock used for the audit timestamps of stored users."""

import datetime
from zoneinfo import ZoneInfo

UTC = ZoneInfo("UTC")


def now_utc() -> datetime.datetime:
    """Current time as an aware UTC datetime."""
    return datetime.datetime.now(UTC)
