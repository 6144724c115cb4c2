from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.http import json_ok, register_error_handlers
from .common.validators import require_choice
from .container import Container, build_container
from .core.constants import DEFAULT_TIME_DRIFT_THRESHOLD_SECONDS
from .core.enums import LockingMode
from .database.bootstrap import apply_schema, apply_seed_sql, list_tables
from .employees.controller import register as register_employees
from .ledger.controller import register as register_ledger
from .notifications.controller import register as register_notifications
from .requests.controller import register as register_requests
from .submissions.controller import register as register_submissions

logger = logging.getLogger(__name__)

ROOT = Path(__file__).resolve().parents[3]


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"), db_config.get("host"), db_config.get("port", 3306), db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=ROOT / "database" / "schema.sql")
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=ROOT / "database" / "seed.sql")
            logger.info("demo seed ready")

        container = build_container(
            db_config=db_config,
            locking_mode=require_choice(
                getattr(settings, "MUTABAAH_LOCKING_MODE", LockingMode.WEEKLY.value), LockingMode, "MUTABAAH_LOCKING_MODE"
            ),
            time_offset_seconds=float(getattr(settings, "TIME_OFFSET_SECONDS", 0)),
            drift_threshold_seconds=float(
                getattr(settings, "TIME_DRIFT_THRESHOLD_SECONDS", DEFAULT_TIME_DRIFT_THRESHOLD_SECONDS)
            ),
            sync_time_with_db=bool(getattr(settings, "TIME_SYNC_WITH_DB", False)),
        )

    app.extensions["mutabaah"] = container
    register_error_handlers(app)

    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        check = container.clock.validate()
        return json_ok({"clockValid": check.is_valid, "driftSeconds": check.drift_seconds})

    register_employees(app, container)
    register_ledger(app, container)
    register_submissions(app, container)
    register_requests(app, container)
    register_notifications(app, container)

    return app
