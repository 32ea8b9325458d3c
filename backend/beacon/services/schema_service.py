"""스키마 생성/보강 서비스. 시작 시점, /init-db, scripts/init_db.py 에서 호출됩니다."""

import logging

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

import beacon.models  # noqa: F401 - 모델 import로 metadata 등록
from beacon.database import Base
from beacon.exceptions import StorageError
from beacon.utils.schema_sync import sync_missing_schema_objects

logger = logging.getLogger(__name__)


def init_db(engine: Engine) -> list[str]:
    """Create missing tables, then add missing columns/indexes. Safe to run repeatedly."""
    try:
        Base.metadata.create_all(bind=engine)
        added = sync_missing_schema_objects(engine, Base.metadata)
    except SQLAlchemyError as exc:
        logger.exception("[schema] initialization failed")
        raise StorageError(str(exc)) from exc
    logger.info("[schema] tables checked/created (%d objects added)", len(added))
    return added
