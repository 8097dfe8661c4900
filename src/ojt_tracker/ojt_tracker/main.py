from __future__ import annotations

import atexit
import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import build_container
from .database.bootstrap import apply_schema, list_tables
from .reports.controller import register as register_reports
from .requests.controller import register as register_requests
from .students.controller import register as register_students
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app() -> Flask:
    load_dotenv(override=False)
    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)

    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app = Flask(__name__, template_folder="../../../templates")
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TIMEZONE"] = getattr(settings, "TIMEZONE", None)

    db_config = dict(getattr(settings, "DB_CONFIG"))
    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=SCHEMA_PATH)
        logger.info("schema ready (tables=%s)", len(list_tables(db_config)))

    container = build_container(
        db_config=db_config,
        timezone=app.config["TIMEZONE"],
        late_grace_minutes=int(getattr(settings, "LATE_GRACE_MINUTES", 5)),
    )
    atexit.register(container.conn.shutdown)

    register_users(app, container)
    register_students(app, container)
    register_attendance(app, container)
    register_requests(app, container)
    register_reports(app, container)

    return app
