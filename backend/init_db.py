# init_db.py
import logging

from sqlalchemy import inspect

from database.config import engine, Base

# Import ALL models so SQLAlchemy knows about them
import models  # noqa: F401

logger = logging.getLogger(__name__)


def create_tables():
    """Create all database tables and return their names"""
    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=engine)

    table_names = inspect(engine).get_table_names()
    logger.info("[OK] Tables in database: %s", table_names)
    return table_names


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    create_tables()
