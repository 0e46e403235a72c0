#!/usr/bin/env python3
"""Database bootstrap: wait for the database, then run Alembic migrations.

Always `alembic upgrade head` on startup. If migrations fail, exit non-zero
rather than start against an unknown schema.
"""

import os
import sys
import time
import logging

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger("run_migrations")


def get_alembic_config():
    """Load Alembic config for programmatic migrations."""
    from alembic.config import Config

    here = os.path.dirname(os.path.abspath(__file__))
    cfg = Config(os.path.join(here, "alembic.ini"))
    # script_location in alembic.ini is relative; pin it to this directory.
    cfg.set_main_option("script_location", os.path.join(here, "alembic"))
    return cfg


def alembic_upgrade_head() -> None:
    """Apply all pending migrations."""
    from alembic import command

    command.upgrade(get_alembic_config(), "head")


def wait_for_database(max_retries: int = 30, delay_s: float = 1.0) -> bool:
    from core.database import check_db_connection

    for attempt in range(1, max_retries + 1):
        if check_db_connection():
            return True
        logger.warning(f"Database is unavailable - sleeping (attempt {attempt}/{max_retries})")
        time.sleep(delay_s)
    return False


def main():
    from core.logging import setup_logging

    setup_logging()
    logger.info("Waiting for database to be ready...")
    if not wait_for_database():
        logger.error("Database is not ready after maximum retries")
        sys.exit(1)

    try:
        alembic_upgrade_head()
    except Exception as e:
        logger.error(f"Alembic upgrade failed: {e}", exc_info=True)
        sys.exit(1)
    logger.info("Migrations completed successfully")


if __name__ == '__main__':
    main()
