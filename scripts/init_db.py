from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv

from geo_attendance.config import get_settings_module
from geo_attendance.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from geo_attendance.database.connection import DBConfig, DatabaseConnection
from geo_attendance.database.bootstrap import apply_schema, list_tables
from geo_attendance.database.seed import seed_demo_data
from geo_attendance.excuses.mysql_excuse_repository import MySQLExcuseRepository
from geo_attendance.main import configure_logging
from geo_attendance.sessions.mysql_session_repository import MySQLSessionRepository

logger = logging.getLogger("geo_attendance.scripts.init_db")


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config)
    tables = list_tables(db_config)
    logger.info(
        "Applied schema.sql -> %s@%s:%s/%s (tables=%d)",
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
        len(tables),
    )

    if getattr(settings, "SEED_DEMO_DATA", False):
        conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))
        seeded = seed_demo_data(
            MySQLSessionRepository(conn),
            MySQLAttendanceRepository(conn),
            MySQLExcuseRepository(conn),
        )
        if seeded:
            logger.info("Demo data loaded")
        else:
            logger.info("Demo data already present")


if __name__ == "__main__":
    main()
