"""
Database engine, session management, and base model.

Every model inherits from Base. The engine and session factory
are built explicitly by the application at startup (see
growth_ledger.main) and every request gets a session from get_db().
"""

from datetime import datetime, timezone

from fastapi import Request
from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import sessionmaker, DeclarativeBase, Session


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, the way it is stored."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def isoformat_utc(value: datetime) -> str:
    """
    Render a stored timestamp as ISO-8601 UTC with a Z suffix.

    Stored datetimes are naive and always UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def create_db_engine(database_url: str) -> Engine:
    """
    Create the engine for the ledger store.

    pool_pre_ping=True tests connections before using them,
    which handles a restarted database or a stale connection.

    SQLite only enforces foreign keys (and therefore the
    ON DELETE CASCADE from ledger entries to users) when the
    pragma is switched on for each connection.
    """
    connect_args = {}
    is_sqlite = database_url.startswith("sqlite")
    if is_sqlite:
        connect_args["check_same_thread"] = False

    engine = create_engine(
        database_url,
        pool_pre_ping=True,
        connect_args=connect_args,
    )

    if is_sqlite:
        @event.listens_for(engine, "connect")
        def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """
    Build the session factory bound to an engine.

    autoflush=False means SQLAlchemy won't send SQL to the
    database until we explicitly flush or commit. The ledger
    relies on that: the insert of a new entry is only sent at
    commit, where a uniqueness violation is caught.
    """
    return sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
    )


class Base(DeclarativeBase):
    pass


# --- Dependency for FastAPI ---
def get_db(request: Request):
    """
    Provide a database session for a single request.

    The session comes from the factory the application opened
    at startup. The try/finally pattern ensures the session is
    always closed, even if the endpoint raises.
    """
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
