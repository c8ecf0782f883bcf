from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

Record = dict[str, Any]


class RecordStore(Protocol):
    """Generic record store the engine persists through.

    Every operation may raise ``StoreError``. Records are plain dicts keyed
    by column name; ``id`` is assigned by the store on insert.
    """

    def find(self, collection: str, filters: Optional[Mapping[str, Any]] = None) -> Sequence[Record]:
        """Records whose fields equal every value in ``filters``, ordered by id."""

        raise NotImplementedError

    def find_one(self, collection: str, record_id: int) -> Optional[Record]:
        raise NotImplementedError

    def insert(self, collection: str, record: Mapping[str, Any]) -> Record:
        raise NotImplementedError

    def update(
        self,
        collection: str,
        record_id: int,
        changes: Mapping[str, Any],
        *,
        expected: Optional[Mapping[str, Any]] = None,
    ) -> Record:
        """Apply ``changes`` and return the stored record.

        When ``expected`` is given the write only happens if the stored
        record still holds those values; otherwise ``StaleRecordError``.
        """

        raise NotImplementedError

    def delete(self, collection: str, record_id: int, *, expected: Optional[Mapping[str, Any]] = None) -> None:
        """Remove the record; ``expected`` works as for ``update``."""

        raise NotImplementedError
