from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .authorizations.controller import register as register_authorizations
from .common.http import register_error_handlers
from .container import build_container
from .database.bootstrap import apply_schema, list_tables
from .employees.controller import register as register_employees
from .holidays.controller import register as register_holidays
from .leave.controller import register as register_leave
from .overtime.controller import register as register_overtime
from .payroll.controller import register as register_payroll
from .reports.controller import register as register_reports
from .settings.controller import register as register_settings

log = logging.getLogger(__name__)


def create_app(settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    store_backend = getattr(settings, "STORE_BACKEND", "memory")
    db_config = getattr(settings, "DB_CONFIG", None)
    if store_backend == "mysql":
        log.info(
            "settings=%s store=mysql db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            log.info("schema ready (tables=%d)", len(list_tables(db_config)))
    else:
        log.info("settings=%s store=%s", settings_module, store_backend)

    container = build_container(
        store_backend=store_backend,
        db_config=db_config,
        allow_negative_overtime_balance=bool(getattr(settings, "ALLOW_NEGATIVE_OVERTIME_BALANCE", False)),
    )
    app.extensions["hr_engine"] = container

    register_error_handlers(app)
    register_employees(app, container)
    register_settings(app, container)
    register_attendance(app, container)
    register_authorizations(app, container)
    register_payroll(app, container)
    register_leave(app, container)
    register_overtime(app, container)
    register_reports(app, container)
    register_holidays(app, container)

    return app
