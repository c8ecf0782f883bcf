from __future__ import annotations

import json
import logging
import re
from typing import Any, Mapping, Optional, Sequence

import mysql.connector

from ..core.constants import APP_SETTINGS
from ..core.exceptions import StaleRecordError, StoreError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_value
from .repository import Record, RecordStore

log = logging.getLogger(__name__)

_IDENT = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# Columns holding nested structures, stored as JSON text.
JSON_COLUMNS: dict[str, frozenset[str]] = {
    APP_SETTINGS: frozenset({"daily_settings"}),
}


def _ident(name: str) -> str:
    if not _IDENT.match(name):
        raise StoreError(f"Invalid identifier: {name!r}")
    return f"`{name}`"


class MySQLRecordStore(RecordStore):
    """Record store over one MySQL table per collection (primary key ``id``)."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _encode(self, collection: str, values: Mapping[str, Any]) -> dict[str, Any]:
        json_cols = JSON_COLUMNS.get(collection, frozenset())
        return {k: (json.dumps(v) if k in json_cols and v is not None else v) for k, v in values.items()}

    def _decode(self, collection: str, row: Mapping[str, Any]) -> Record:
        json_cols = JSON_COLUMNS.get(collection, frozenset())
        out: Record = {}
        for k, v in row.items():
            if k in json_cols and isinstance(v, (str, bytes, bytearray)):
                out[k] = json.loads(v)
            else:
                out[k] = normalize_mysql_value(v)
        return out

    @staticmethod
    def _where(values: Mapping[str, Any]) -> tuple[str, list[Any]]:
        clauses: list[str] = []
        params: list[Any] = []
        for k, v in values.items():
            if v is None:
                clauses.append(f"{_ident(k)} IS NULL")
            else:
                clauses.append(f"{_ident(k)}=%s")
                params.append(v)
        return " AND ".join(clauses), params

    def find(self, collection: str, filters: Optional[Mapping[str, Any]] = None) -> Sequence[Record]:
        where, params = self._where(self._encode(collection, filters or {}))
        sql = f"SELECT * FROM {_ident(collection)}"
        if where:
            sql += f" WHERE {where}"
        sql += " ORDER BY id ASC"
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(sql, tuple(params))
                return [self._decode(collection, r) for r in fetchall(cur)]
        except mysql.connector.Error as e:
            log.error("find on %s failed: %s", collection, e)
            raise StoreError(f"Could not read {collection}: {e}") from e

    def find_one(self, collection: str, record_id: int) -> Optional[Record]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(f"SELECT * FROM {_ident(collection)} WHERE id=%s", (int(record_id),))
                r = fetchone(cur)
                return self._decode(collection, r) if r else None
        except mysql.connector.Error as e:
            log.error("find_one on %s #%s failed: %s", collection, record_id, e)
            raise StoreError(f"Could not read {collection} #{record_id}: {e}") from e

    def insert(self, collection: str, record: Mapping[str, Any]) -> Record:
        values = self._encode(collection, {k: v for k, v in record.items() if k != "id"})
        cols = ", ".join(_ident(k) for k in values)
        marks = ", ".join(["%s"] * len(values))
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"INSERT INTO {_ident(collection)} ({cols}) VALUES ({marks})",
                    tuple(values.values()),
                )
                record_id = int(cur.lastrowid)
                cur.execute(f"SELECT * FROM {_ident(collection)} WHERE id=%s", (record_id,))
                return self._decode(collection, fetchone(cur) or {})
        except mysql.connector.Error as e:
            log.error("insert into %s failed: %s", collection, e)
            raise StoreError(f"Could not save {collection}: {e}") from e

    def update(
        self,
        collection: str,
        record_id: int,
        changes: Mapping[str, Any],
        *,
        expected: Optional[Mapping[str, Any]] = None,
    ) -> Record:
        values = self._encode(collection, {k: v for k, v in changes.items() if k != "id"})
        sets = ", ".join(f"{_ident(k)}=%s" for k in values)
        where, where_params = self._where({"id": int(record_id), **self._encode(collection, expected or {})})
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                if values:
                    cur.execute(
                        f"UPDATE {_ident(collection)} SET {sets} WHERE {where}",
                        tuple(values.values()) + tuple(where_params),
                    )
                    matched = cur.rowcount
                else:
                    cur.execute(f"SELECT id FROM {_ident(collection)} WHERE {where}", tuple(where_params))
                    matched = len(fetchall(cur))

                cur.execute(f"SELECT * FROM {_ident(collection)} WHERE id=%s", (int(record_id),))
                row = fetchone(cur)
        except mysql.connector.Error as e:
            log.error("update of %s #%s failed: %s", collection, record_id, e)
            raise StoreError(f"Could not update {collection} #{record_id}: {e}") from e

        if row is None:
            raise StoreError(f"{collection} #{record_id} not found")
        if matched == 0:
            raise StaleRecordError(f"{collection} #{record_id} was modified concurrently")
        return self._decode(collection, row)

    def delete(self, collection: str, record_id: int, *, expected: Optional[Mapping[str, Any]] = None) -> None:
        where, where_params = self._where({"id": int(record_id), **self._encode(collection, expected or {})})
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(f"DELETE FROM {_ident(collection)} WHERE {where}", tuple(where_params))
                deleted = cur.rowcount
                exists = False
                if deleted == 0:
                    cur.execute(f"SELECT id FROM {_ident(collection)} WHERE id=%s", (int(record_id),))
                    exists = bool(fetchall(cur))
        except mysql.connector.Error as e:
            log.error("delete of %s #%s failed: %s", collection, record_id, e)
            raise StoreError(f"Could not delete {collection} #{record_id}: {e}") from e

        if deleted == 0:
            if exists:
                raise StaleRecordError(f"{collection} #{record_id} was modified concurrently")
            raise StoreError(f"{collection} #{record_id} not found")
