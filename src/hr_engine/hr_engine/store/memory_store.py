from __future__ import annotations

import copy
from typing import Any, Mapping, Optional, Sequence

from ..core.exceptions import StaleRecordError, StoreError
from .repository import Record, RecordStore


class InMemoryRecordStore(RecordStore):
    """Dict-backed store used by tests and the ``memory`` backend.

    Records are copied on the way in and out so callers never share state
    with the store.
    """

    def __init__(self):
        self._collections: dict[str, dict[int, Record]] = {}
        self._next_id: dict[str, int] = {}

    def _table(self, collection: str) -> dict[int, Record]:
        return self._collections.setdefault(collection, {})

    @staticmethod
    def _check_expected(collection: str, record_id: int, current: Record, expected: Optional[Mapping[str, Any]]) -> None:
        for k, v in (expected or {}).items():
            if current.get(k) != v:
                raise StaleRecordError(f"{collection} #{record_id} was modified concurrently")

    def find(self, collection: str, filters: Optional[Mapping[str, Any]] = None) -> Sequence[Record]:
        filters = filters or {}
        rows = [
            r
            for _, r in sorted(self._table(collection).items())
            if all(r.get(k) == v for k, v in filters.items())
        ]
        return copy.deepcopy(rows)

    def find_one(self, collection: str, record_id: int) -> Optional[Record]:
        r = self._table(collection).get(int(record_id))
        return copy.deepcopy(r) if r else None

    def insert(self, collection: str, record: Mapping[str, Any]) -> Record:
        record_id = self._next_id.get(collection, 0) + 1
        self._next_id[collection] = record_id
        stored = copy.deepcopy(dict(record))
        stored["id"] = record_id
        self._table(collection)[record_id] = stored
        return copy.deepcopy(stored)

    def update(
        self,
        collection: str,
        record_id: int,
        changes: Mapping[str, Any],
        *,
        expected: Optional[Mapping[str, Any]] = None,
    ) -> Record:
        table = self._table(collection)
        current = table.get(int(record_id))
        if current is None:
            raise StoreError(f"{collection} #{record_id} not found")

        self._check_expected(collection, record_id, current, expected)

        current.update(copy.deepcopy(dict(changes)))
        current["id"] = int(record_id)
        return copy.deepcopy(current)

    def delete(self, collection: str, record_id: int, *, expected: Optional[Mapping[str, Any]] = None) -> None:
        table = self._table(collection)
        current = table.get(int(record_id))
        if current is None:
            raise StoreError(f"{collection} #{record_id} not found")
        self._check_expected(collection, record_id, current, expected)
        del table[int(record_id)]
