"""사용자 프로필 일괄 import/초기화 서비스입니다. 이메일을 upsert 키로 사용합니다."""

import logging
import re
from typing import Any, Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from beacon.exceptions import StorageError
from beacon.models.user import UserProfile
from beacon.utils.upsert import build_upsert

logger = logging.getLogger(__name__)

# 논리 필드별 허용 키 (대소문자/공백/밑줄/하이픈 무시 후 비교)
FIELD_ALIASES = {
    "name": ("name", "Name", "Full Name", "displayName", "Employee Name"),
    "email": ("email", "Email", "Email Address", "mail", "Work Email"),
    "city": ("city", "City", "Location", "Office City"),
    "job_title": ("jobTitle", "Job Title", "title", "Designation"),
    "company_name": ("companyName", "Company Name", "company", "Organization"),
}

_KEY_NOISE = re.compile(r"[\s_\-]+")


def _normalize_key(key: Any) -> str:
    return _KEY_NOISE.sub("", str(key)).lower()


_ALIAS_LOOKUP = {
    field: tuple(dict.fromkeys(_normalize_key(alias) for alias in aliases))
    for field, aliases in FIELD_ALIASES.items()
}


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def resolve_profile_fields(record: dict) -> dict:
    normalized = {_normalize_key(key): value for key, value in record.items()}
    resolved = {}
    for field, aliases in _ALIAS_LOOKUP.items():
        resolved[field] = next(
            (_clean(normalized[alias]) for alias in aliases if _clean(normalized.get(alias))),
            None,
        )
    if resolved["email"]:
        resolved["email"] = resolved["email"].lower()
    return resolved


def import_users(db: Session, records: Iterable[Any]) -> int:
    imported = 0
    table = UserProfile.__table__
    try:
        for index, record in enumerate(records):
            if not isinstance(record, dict):
                logger.warning("[users] skipped row %d: not an object", index)
                continue
            fields = resolve_profile_fields(record)
            if not fields["email"]:
                logger.warning("[users] skipped row %d without email: %s", index, record)
                continue
            db.execute(build_upsert(db, table, fields, table.c.email))
            imported += 1
        db.commit()
    except StorageError:
        db.rollback()
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        raise StorageError(f"Failed to import users: {exc}") from exc
    logger.info("[users] imported %d profiles", imported)
    return imported


def clear_users(db: Session) -> int:
    try:
        removed = db.query(UserProfile).delete(synchronize_session=False)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise StorageError(f"Failed to clear users: {exc}") from exc
    logger.info("[users] cleared %d profiles", removed)
    return removed
