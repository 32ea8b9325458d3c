"""Checkin Service 도메인 서비스 레이어입니다. 체크인 중복 제거/upsert 정책과 조회 집계를 캡슐화합니다."""

import logging
import math
from collections import Counter, defaultdict
from datetime import date, datetime
from enum import Enum
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from beacon.config import settings
from beacon.exceptions import StorageError
from beacon.models.checkin import Checkin
from beacon.models.user import UserProfile
from beacon.services.message_normalizer import UNKNOWN_USER_ID
from beacon.services.status_classifier import CheckinStatus
from beacon.utils.clock import day_bounds, today_local
from beacon.utils.upsert import build_upsert

logger = logging.getLogger(__name__)

UNKNOWN_LABEL = "Unknown"
BUCKET_MINUTES = 15
GROUP_BY_COLUMNS = {
    "city": UserProfile.city,
    "job_title": UserProfile.job_title,
}


class CheckinOutcome(str, Enum):
    RECORDED = "recorded"
    SUPPRESSED = "suppressed"


def _has_known_user(user_id: Optional[str]) -> bool:
    return bool(user_id) and user_id != UNKNOWN_USER_ID


def get_user_checkin_on(db: Session, user_id: str, day: date) -> Optional[Checkin]:
    start, end = day_bounds(day)
    return (
        db.query(Checkin)
        .filter(
            Checkin.user_id == user_id,
            Checkin.timestamp >= start,
            Checkin.timestamp < end,
        )
        .first()
    )


def record_checkin(
    db: Session,
    *,
    user_id: str,
    user_name: str,
    user_email: Optional[str],
    status: CheckinStatus,
    message_id: str,
    timestamp: datetime,
) -> CheckinOutcome:
    """Write one check-in.

    A known user who already has a row on the calendar day of ``timestamp``
    is suppressed without touching that row. Everything else goes through an
    atomic upsert keyed by ``message_id`` that replaces all fields of a
    colliding row.
    """
    try:
        if _has_known_user(user_id):
            existing = get_user_checkin_on(db, user_id, timestamp.date())
            if existing is not None:
                logger.info(
                    "[checkin] suppressed %s for user=%s on %s (existing message=%s)",
                    message_id, user_id, timestamp.date(), existing.message_id,
                )
                return CheckinOutcome.SUPPRESSED

        values = {
            "user_id": user_id,
            "user_name": user_name,
            "user_email": user_email,
            "status": CheckinStatus(status).value,
            "message_id": message_id,
            "timestamp": timestamp,
        }
        table = Checkin.__table__
        db.execute(build_upsert(db, table, values, table.c.message_id))
        db.commit()
    except StorageError:
        db.rollback()
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        raise StorageError(f"Failed to record checkin {message_id}: {exc}") from exc

    logger.info("[checkin] recorded %s: %s (%s) is %s", message_id, user_name, user_email, values["status"])
    return CheckinOutcome.RECORDED


def _today_rows(db: Session, day: date):
    start, end = day_bounds(day)
    return db.query(Checkin).filter(Checkin.timestamp >= start, Checkin.timestamp < end)


def get_today_report(db: Session, today: Optional[date] = None) -> list[Checkin]:
    day = today or today_local()
    try:
        return _today_rows(db, day).order_by(Checkin.timestamp.desc(), Checkin.id.desc()).all()
    except SQLAlchemyError as exc:
        raise StorageError(f"Failed to load today's report: {exc}") from exc


def bucket_label(value: datetime, minutes: int = BUCKET_MINUTES) -> str:
    return f"{value.hour:02d}:{value.minute // minutes * minutes:02d}"


def _percentage(part: int, total: int) -> int:
    if total <= 0:
        return 0
    # Math.round 과 같이 0.5는 올림 처리한다.
    return int(math.floor(100 * part / total + 0.5))


def get_dashboard_stats(db: Session, today: Optional[date] = None, group_by: Optional[str] = None) -> dict:
    day = today or today_local()
    group_by = group_by or settings.DASHBOARD_GROUP_BY
    if group_by not in GROUP_BY_COLUMNS:
        raise ValueError(f"unsupported group_by '{group_by}'")
    group_column = GROUP_BY_COLUMNS[group_by]
    start, end = day_bounds(day)

    try:
        wfh_count = (
            db.query(func.count(func.distinct(Checkin.user_id)))
            .filter(
                Checkin.status == CheckinStatus.WFH.value,
                Checkin.timestamp >= start,
                Checkin.timestamp < end,
            )
            .scalar()
        ) or 0
        total_users = db.query(func.count(UserProfile.id)).scalar() or 0

        wfh_rows = (
            db.query(Checkin.user_id, group_column.label("group_value"))
            .outerjoin(UserProfile, func.lower(Checkin.user_email) == UserProfile.email)
            .filter(
                Checkin.status == CheckinStatus.WFH.value,
                Checkin.timestamp >= start,
                Checkin.timestamp < end,
            )
            .all()
        )
        timestamps = [row.timestamp for row in db.query(Checkin.timestamp).filter(
            Checkin.timestamp >= start,
            Checkin.timestamp < end,
        ).all()]
    except SQLAlchemyError as exc:
        raise StorageError(f"Failed to compute dashboard stats: {exc}") from exc

    users_by_label: dict[str, set] = defaultdict(set)
    for row in wfh_rows:
        label = (row.group_value or "").strip() or UNKNOWN_LABEL
        users_by_label[label].add(row.user_id)
    breakdown = sorted(
        ({"label": label, "count": len(users)} for label, users in users_by_label.items()),
        key=lambda item: (-item["count"], item["label"]),
    )

    bucket_counts = Counter(bucket_label(value) for value in timestamps if value is not None)
    time_buckets = [{"time": label, "count": bucket_counts[label]} for label in sorted(bucket_counts)]

    return {
        "date": day.isoformat(),
        "wfh_count": int(wfh_count),
        "total_users": int(total_users),
        "wfh_percentage": _percentage(int(wfh_count), int(total_users)),
        "group_by": group_by,
        "breakdown": breakdown,
        "time_buckets": time_buckets,
    }
