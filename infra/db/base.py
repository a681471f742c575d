# infra/db/base.py
from __future__ import annotations
import logging
import os

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from infra.path import default_db_path

logger = logging.getLogger(__name__)

DB_URL_ENV = "CPM_SCHEDULER_DB_URL"

Base = declarative_base()


def database_url() -> str:
    """CPM_SCHEDULER_DB_URL if set, else a SQLite file in the user data dir."""
    override = (os.getenv(DB_URL_ENV) or "").strip()
    if override:
        return override
    return f"sqlite:///{default_db_path().as_posix()}"


def create_db_engine(db_url: str | None = None) -> Engine:
    url = db_url or database_url()
    logger.info("Using database at: %s", url)
    return create_engine(url, echo=False, future=True)


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


def init_db(engine: Engine) -> None:
    # registers the ORM classes on Base.metadata
    import infra.db.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
