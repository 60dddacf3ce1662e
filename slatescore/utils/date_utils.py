# slatescore/utils/date_utils.py
from datetime import datetime, timedelta, timezone
from typing import List, Optional
from zoneinfo import ZoneInfo

from slatescore.config.settings import settings

DATE_FORMAT = "%Y%m%d"


def get_today_string(offset: int = 0, now: Optional[datetime] = None) -> str:
    """Date in YYYYMMDD (the providers' date key) in the configured timezone."""
    now = now or datetime.now(timezone.utc)
    local = now.astimezone(ZoneInfo(settings.timezone)) + timedelta(days=offset)
    return local.strftime(DATE_FORMAT)


def dates_to_update(size: int, now: Optional[datetime] = None) -> List[str]:
    """The `size` consecutive dates starting today."""
    return [get_today_string(offset, now) for offset in range(size)]


def parse_provider_datetime(value: Optional[str]) -> Optional[datetime]:
    """Parses ESPN-style ISO timestamps ("2025-01-15T00:30Z") to aware UTC datetimes."""
    if not value:
        return None
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
