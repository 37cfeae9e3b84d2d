
import logging

import psycopg2
from psycopg2 import sql
from psycopg2.extensions import ISOLATION_LEVEL_AUTOCOMMIT
from sqlalchemy.engine import Engine

from app.core.config import settings
from app.db.base import Base

logger = logging.getLogger(__name__)


def create_database():
    """Create the PostgreSQL database if it doesn't exist."""
    try:
        # Connect to default 'postgres' database to check/create target DB
        con = psycopg2.connect(
            user=settings.POSTGRES_USER,
            password=settings.POSTGRES_PASSWORD,
            host=settings.POSTGRES_SERVER,
            port=settings.POSTGRES_PORT,
            dbname="postgres"
        )
    except psycopg2.Error as e:
        # The target DB may still be reachable directly (managed hosting, restricted roles)
        logger.error("Could not reach the postgres maintenance database: %s", e)
        return

    con.set_isolation_level(ISOLATION_LEVEL_AUTOCOMMIT)
    try:
        with con.cursor() as cur:
            cur.execute(
                "SELECT 1 FROM pg_catalog.pg_database WHERE datname = %s",
                (settings.POSTGRES_DB,),
            )
            if cur.fetchone():
                logger.info("Database %s already exists.", settings.POSTGRES_DB)
                return
            logger.info("Database %s does not exist. Creating...", settings.POSTGRES_DB)
            cur.execute(sql.SQL("CREATE DATABASE {}").format(sql.Identifier(settings.POSTGRES_DB)))
            logger.info("Database %s created successfully.", settings.POSTGRES_DB)
    finally:
        con.close()


def init_db(engine: Engine) -> None:
    """Bootstrap the database and create tables for every model."""
    if settings.is_postgres:
        create_database()
    Base.metadata.create_all(bind=engine)


if __name__ == "__main__":
    from app.db.session import engine

    logging.basicConfig(level=settings.LOG_LEVEL)
    init_db(engine)
