"""SQLModel database engine and session management."""

import logging

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine, Session

from journal.config import settings

logger = logging.getLogger(__name__)


def enable_sqlite_savepoints(target: Engine) -> None:
    """Let pysqlite honour SAVEPOINT by taking over BEGIN from the driver.

    The ledger wraps each balance delta in a nested transaction; without this
    the sqlite3 module commits implicitly and the savepoint is lost.
    """

    @event.listens_for(target, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(target, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


def build_engine(url: str, **kwargs) -> Engine:
    """Create an engine for ``url``; SQLite gets thread and savepoint fixes."""
    connect_args = kwargs.pop("connect_args", {})
    is_sqlite = url.startswith("sqlite")
    if is_sqlite:
        connect_args["check_same_thread"] = False
    new_engine = create_engine(url, echo=False, connect_args=connect_args, **kwargs)
    if is_sqlite:
        enable_sqlite_savepoints(new_engine)
    return new_engine


engine = build_engine(settings.database_url)


def create_db_and_tables():
    """Create all tables. Called on startup."""
    import journal.models  # noqa: F401  (registers tables on the metadata)

    SQLModel.metadata.create_all(engine)
    logger.info("Database schema ready")


def get_session() -> Session:
    """Dependency that yields a database session."""
    with Session(engine) as session:
        yield session
