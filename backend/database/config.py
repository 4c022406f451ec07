import os

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

# -------------------------------------------------------------------
# Database configuration.
#
# Override from the environment:
#   DATABASE_URL=sqlite:///health_records.db
#   SQL_ECHO=true
# -------------------------------------------------------------------
DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///health_records.db")
SQL_ECHO = os.environ.get("SQL_ECHO", "false").lower() == "true"


def _engine_options(url):
    if not url.startswith("sqlite"):
        return {}
    options = {"connect_args": {"check_same_thread": False}}
    # In-memory databases live on a single connection
    if url in ("sqlite://", "sqlite:///:memory:"):
        options["poolclass"] = StaticPool
    return options


engine = create_engine(DATABASE_URL, echo=SQL_ECHO, **_engine_options(DATABASE_URL))
SessionLocal = sessionmaker(bind=engine, autoflush=False)
Base = declarative_base()
