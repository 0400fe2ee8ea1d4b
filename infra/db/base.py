# infra/db/base.py
from __future__ import annotations
import logging

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from infra.config import database_url

logger = logging.getLogger(__name__)

Base = declarative_base()


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record):
    # dependency rows rely on ON DELETE CASCADE
    if type(dbapi_connection).__module__.startswith("sqlite3"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def make_engine(db_url: str | None = None) -> Engine:
    url = db_url or database_url()
    logger.info("Using database at: %s", url)
    connect_args = {}
    if url.startswith("sqlite"):
        # background jobs check connections out of the pool on other threads
        connect_args["check_same_thread"] = False
    return create_engine(url, echo=False, future=True, connect_args=connect_args)


def make_session_factory(db_url: str | None = None) -> sessionmaker:
    return sessionmaker(bind=make_engine(db_url), autoflush=False, autocommit=False)
