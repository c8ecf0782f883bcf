from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from ..common.datetime_utils import format_iso_date, parse_iso_date
from ..common.validators import require_id, require_non_empty
from ..core.constants import HOLIDAYS
from ..core.exceptions import NotFoundError, ValidationError
from ..store.repository import RecordStore
from .model import Holiday

log = logging.getLogger(__name__)


class HolidayService:
    def __init__(self, store: RecordStore):
        self._store = store

    def get(self, holiday_id: int) -> Holiday:
        r = self._store.find_one(HOLIDAYS, int(holiday_id))
        if not r:
            raise NotFoundError(f"Holiday #{holiday_id} does not exist")
        return Holiday.from_record(r)

    def list_for_tenant(self, tenant_id: int) -> Sequence[Holiday]:
        """Tenant's holidays, earliest first."""
        rows = self._store.find(HOLIDAYS, {"tenant_id": int(tenant_id)})
        return sorted((Holiday.from_record(r) for r in rows), key=lambda h: h.holiday_date)

    @staticmethod
    def _record(values: Mapping[str, Any]) -> dict:
        if not values.get("date"):
            raise ValidationError("Date is required")
        return {
            "tenant_id": require_id(values.get("tenant_id"), "Tenant"),
            "name": require_non_empty(values.get("name"), "Holiday name"),
            "date": format_iso_date(parse_iso_date(values["date"])),
        }

    def create(self, values: Mapping[str, Any]) -> Holiday:
        holiday = Holiday.from_record(self._store.insert(HOLIDAYS, self._record(values)))
        log.info("holiday #%s %s on %s for tenant #%s", holiday.holiday_id, holiday.name, holiday.holiday_date, holiday.tenant_id)
        return holiday

    def update(self, holiday_id: int, values: Mapping[str, Any]) -> Holiday:
        current = self.get(holiday_id)
        merged = {**current.to_dict(), **dict(values)}
        return Holiday.from_record(self._store.update(HOLIDAYS, current.holiday_id, self._record(merged)))

    def delete(self, holiday_id: int) -> None:
        current = self.get(holiday_id)
        self._store.delete(HOLIDAYS, current.holiday_id)
