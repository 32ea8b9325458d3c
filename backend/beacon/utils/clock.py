"""서버 기준 시간대(settings.TIMEZONE) 변환 헬퍼입니다.

저장되는 체크인 시각은 서버 시간대 기준 naive datetime 이며,
달력 일자 비교는 모두 이 시간대에서 이뤄진다.
"""

from datetime import date, datetime, time, timedelta, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo

from beacon.config import settings


def server_tz() -> Optional[tzinfo]:
    name = (settings.TIMEZONE or "").strip()
    return ZoneInfo(name) if name else None


def to_server_naive(value: datetime) -> datetime:
    """Convert an aware datetime into naive server-local time. Naive input is assumed local already."""
    if value.tzinfo is None:
        return value
    return value.astimezone(server_tz()).replace(tzinfo=None)


def now_local() -> datetime:
    return datetime.now(server_tz()).replace(tzinfo=None)


def today_local() -> date:
    return now_local().date()


def day_bounds(day: date) -> tuple[datetime, datetime]:
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)
