from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from ..common.validators import require_id
from ..core.constants import APP_SETTINGS
from ..core.enums import Weekday
from ..core.exceptions import StoreError, ValidationError
from ..store.repository import RecordStore
from .model import DaySetting, WorkSchedule, default_schedule

log = logging.getLogger(__name__)


class SettingsService:
    """Per-tenant AppSettings holding the weekly WorkSchedule."""

    def __init__(self, store: RecordStore):
        self._store = store

    def _find(self, tenant_id: int) -> Optional[dict]:
        rows = self._store.find(APP_SETTINGS, {"tenant_id": int(tenant_id)})
        if len(rows) > 1:
            raise StoreError(f"Tenant #{tenant_id} has {len(rows)} settings records")
        return rows[0] if rows else None

    def get_schedule(self, tenant_id: int) -> Optional[WorkSchedule]:
        """Stored schedule, or None when the tenant never saved one."""
        r = self._find(tenant_id)
        if not r:
            return None
        return WorkSchedule.from_list(r.get("daily_settings") or [])

    def get_schedule_or_default(self, tenant_id: int) -> WorkSchedule:
        return self.get_schedule(tenant_id) or default_schedule()

    def save_schedule(self, tenant_id: int, daily_settings: Sequence[Mapping[str, Any]]) -> WorkSchedule:
        tenant_id = require_id(tenant_id, "Tenant")

        submitted: dict[Weekday, DaySetting] = {}
        for item in daily_settings or []:
            day = item.get("day") or item.get("weekday")
            if day not in {w.value for w in Weekday}:
                raise ValidationError(f"Unknown weekday: {day!r}")
            try:
                ds = DaySetting.from_dict(item)
            except (TypeError, ValueError):
                raise ValidationError(f"{day}: invalid numeric setting")
            if ds.weekday in submitted:
                raise ValidationError(f"{ds.weekday.value} is configured twice")
            self._validate(ds)
            submitted[ds.weekday] = ds

        # Days not submitted keep their current (or default) setting.
        base = self.get_schedule_or_default(tenant_id)
        defaults = default_schedule()
        merged = WorkSchedule.from_list(
            [submitted.get(w) or base.for_weekday(w) or defaults.for_weekday(w) for w in Weekday]
        )

        payload = {"tenant_id": tenant_id, "daily_settings": merged.to_list()}
        existing = self._find(tenant_id)
        if existing:
            self._store.update(APP_SETTINGS, existing["id"], {"daily_settings": payload["daily_settings"]})
        else:
            self._store.insert(APP_SETTINGS, payload)
        log.info("saved work schedule for tenant #%s", tenant_id)
        return merged

    @staticmethod
    def _validate(ds: DaySetting) -> None:
        name = ds.weekday.value
        if ds.break_duration_minutes is not None and ds.break_duration_minutes < 0:
            raise ValidationError(f"{name}: break duration cannot be negative")
        if ds.overtime_threshold_hours is not None and ds.overtime_threshold_hours < 0:
            raise ValidationError(f"{name}: overtime threshold cannot be negative")
        if ds.overtime_rate_multiplier is not None and ds.overtime_rate_multiplier < 1:
            raise ValidationError(f"{name}: overtime rate multiplier must be at least 1")
        if ds.is_work_day and ds.start_time and ds.end_time and ds.end_time <= ds.start_time:
            raise ValidationError(f"{name}: end time must be after start time")
