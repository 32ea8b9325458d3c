"""DB 방언별 원자적 upsert(INSERT ... ON CONFLICT) 구문 생성기입니다."""

from __future__ import annotations

from typing import Any

from sqlalchemy import Column, Table
from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlalchemy.orm import Session

from beacon.exceptions import StorageError


def build_upsert(db: Session, table: Table, values: dict[str, Any], conflict_column: Column):
    """Insert ``values`` into ``table``; on a ``conflict_column`` collision replace every other given field."""
    dialect = db.get_bind().dialect.name
    update_keys = [key for key in values if key != conflict_column.key]

    if dialect == "mysql":
        stmt = mysql.insert(table).values(**values)
        return stmt.on_duplicate_key_update(
            {key: stmt.inserted[key] for key in update_keys}
        )

    if dialect == "postgresql":
        stmt = postgresql.insert(table).values(**values)
    elif dialect == "sqlite":
        stmt = sqlite.insert(table).values(**values)
    else:
        raise StorageError(f"upsert is not supported for dialect '{dialect}'")

    return stmt.on_conflict_do_update(
        index_elements=[conflict_column],
        set_={key: stmt.excluded[key] for key in update_keys},
    )
