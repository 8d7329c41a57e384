from __future__ import annotations

import logging

from crm.core.config import DATABASE_URL, IS_PROD

logger = logging.getLogger(__name__)
STARTUP_PREFIX = "[STARTUP]"


def validate_database_environment(database_url: str = DATABASE_URL, is_prod: bool = IS_PROD) -> None:
    if is_prod and database_url.startswith("sqlite"):
        logger.critical("%s SQLite is forbidden in production", STARTUP_PREFIX)
        raise RuntimeError("SQLite is forbidden in production environment")
    logger.info("%s database environment ok driver=%s", STARTUP_PREFIX, database_url.split(":", 1)[0])
