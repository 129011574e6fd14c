import json
from datetime import date, datetime, time, timedelta

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base

from .config import settings


def _json_default(value):
    # Record values may hold spreadsheet dates; store them as ISO text.
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    # Durations ([h]:mm:ss cells) as h:mm:ss text
    if isinstance(value, timedelta):
        return str(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def dumps_record(data) -> str:
    return json.dumps(data, default=_json_default)


def make_engine(database_url: str, **kwargs) -> Engine:
    """
    Build an engine for the given URL. Record mappings go through
    dumps_record, and SQLite connections get foreign keys switched on so
    deleting a dataset cascades to its rows.
    """
    is_sqlite = database_url.startswith("sqlite")
    new_engine = create_engine(
        database_url,
        connect_args={"check_same_thread": False} if is_sqlite else {},
        json_serializer=dumps_record,
        **kwargs,
    )

    if is_sqlite:
        @event.listens_for(new_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return new_engine


# Create database engine
engine = make_engine(settings.DATABASE_URL)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for SQLAlchemy models
Base = declarative_base()


# FastAPI dependency to get DB session
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
