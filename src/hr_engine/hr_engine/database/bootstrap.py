from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterator, Union

from .connection import DatabaseConnection, DBConfig

log = logging.getLogger(__name__)

# The target database comes from DB_CONFIG, not from the file.
_DB_STATEMENT = re.compile(r"^\s*(CREATE\s+DATABASE|USE)\b", re.IGNORECASE)


def iter_schema_statements(sql: str) -> Iterator[str]:
    """Split schema.sql into statements.

    Comment lines and database selection statements are dropped. The schema
    holds only DDL, so a plain split on ';' is enough.
    """

    body = "\n".join(ln for ln in sql.splitlines() if not ln.strip().startswith("--"))
    for chunk in body.split(";"):
        stmt = chunk.strip()
        if stmt and not _DB_STATEMENT.match(stmt):
            yield stmt


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = DatabaseConnection(target).connect(with_database=False)
    try:
        conn.cursor().execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: Union[str, Path]) -> int:
    """Create the database if needed and run every statement of the schema file.

    All statements are ``CREATE ... IF NOT EXISTS``, so re-running is harmless.
    Returns the number of statements executed.
    """

    ensure_database_exists(db_config)
    schema_path = Path(schema_path)
    statements = list(iter_schema_statements(schema_path.read_text(encoding="utf-8")))

    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        for stmt in statements:
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()
    log.info("applied %d statements from %s", len(statements), schema_path.name)
    return len(statements)


def list_tables(db_config: dict) -> list[str]:
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
