from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .container import build_container
from .core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from .database.bootstrap import apply_schema, apply_seed_sql, list_tables
from .stamp_records.controller import register as register_stamp_records

logger = logging.getLogger(__name__)

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def configure_logging(level: str, fmt: str) -> None:
    logging.basicConfig(level=getattr(logging, str(level).upper(), logging.INFO), format=fmt)


def create_app(settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    configure_logging(
        getattr(settings, "LOG_LEVEL", "INFO"),
        getattr(settings, "LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
    )

    db_config = getattr(settings, "DB_CONFIG")
    store_backend = str(getattr(settings, "STORE_BACKEND", "mysql"))
    logger.info("settings=%s store=%s", settings_module, store_backend)

    if store_backend == "mysql":
        # Helpful startup info when the tables are missing on a fresh database.
        logger.debug(
            "db=%s@%s:%s/%s",
            db_config.get("user"), db_config.get("host"), db_config.get("port", 3306), db_config.get("database"),
        )
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
            logger.info("demo seed ready")

    container = build_container(
        db_config=db_config,
        store_backend=store_backend,
        default_page_size=int(getattr(settings, "DEFAULT_PAGE_SIZE", DEFAULT_PAGE_SIZE)),
        max_page_size=int(getattr(settings, "MAX_PAGE_SIZE", MAX_PAGE_SIZE)),
    )
    app.extensions["time_tracking"] = container

    register_stamp_records(app, container)

    return app
