"""런타임 스키마 보강 유틸리티. 기존 테이블에 누락된 컬럼/인덱스만 추가합니다."""

from __future__ import annotations

import logging

from sqlalchemy import inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.schema import CreateColumn, CreateIndex, MetaData

logger = logging.getLogger(__name__)


def sync_missing_schema_objects(engine: Engine, metadata: MetaData) -> list[str]:
    """Add columns/indexes present in ``metadata`` but missing from existing tables.

    Additive only: nothing is altered or dropped. Returns ``table.object`` names that were added.
    """
    inspector = inspect(engine)
    existing_tables = set(inspector.get_table_names())
    preparer = engine.dialect.identifier_preparer
    added: list[str] = []

    with engine.begin() as conn:
        for table in metadata.sorted_tables:
            if table.name not in existing_tables:
                continue

            existing_columns = {
                str(row.get("name")).lower()
                for row in inspector.get_columns(table.name)
                if row.get("name")
            }
            table_sql = preparer.format_table(table)

            for column in table.columns:
                if column.name.lower() in existing_columns:
                    continue
                # UNIQUE/PK 컬럼은 ADD COLUMN 으로 추가할 수 없으므로 create_all 에 맡긴다.
                if column.primary_key or column.unique:
                    logger.warning("[schema] cannot add constrained column %s.%s", table.name, column.name)
                    continue
                column_sql = str(CreateColumn(column).compile(dialect=engine.dialect)).strip()
                conn.execute(text(f"ALTER TABLE {table_sql} ADD COLUMN {column_sql}"))
                added.append(f"{table.name}.{column.name}")

            existing_index_names = {
                str(row.get("name"))
                for row in inspector.get_indexes(table.name)
                if row.get("name")
            }
            for index in table.indexes:
                if not index.name or index.name in existing_index_names:
                    continue
                conn.execute(CreateIndex(index))
                added.append(f"{table.name}.{index.name}")

    for name in added:
        logger.info("[schema] added %s", name)
    return added
