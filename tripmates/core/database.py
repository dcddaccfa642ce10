from collections.abc import Generator
from typing import Any

from sqlalchemy import Engine, create_engine, event, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, MappedAsDataclass, Session, sessionmaker

from tripmates.core.config import get_settings

settings = get_settings()

CONNECTION_URL = settings.database_url


class Base(MappedAsDataclass, DeclarativeBase):
    pass


def enable_sqlite_foreign_keys(target: Engine) -> None:
    """SQLite ships with foreign keys off; turn them on for every new connection."""

    @event.listens_for(target, "connect")
    def _set_pragma(dbapi_connection, _connection_record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def build_engine(url: str) -> Engine:
    connection_url = make_url(url)
    engine_kwargs: dict[str, Any] = {"pool_pre_ping": True}
    connect_args: dict[str, Any] = {}

    is_sqlite = connection_url.drivername.startswith("sqlite")
    if is_sqlite:
        # Relax SQLite's default thread check so the same connection can be reused across requests.
        connect_args["check_same_thread"] = False
    else:
        engine_kwargs.update(
            {
                "pool_size": 5,
                "max_overflow": 10,
                "pool_recycle": 1800,
                "pool_timeout": 30,
            }
        )
        connect_args["connect_timeout"] = 5

    if connect_args:
        engine_kwargs["connect_args"] = connect_args

    built = create_engine(url, **engine_kwargs)
    if is_sqlite:
        enable_sqlite_foreign_keys(built)
    return built


engine = build_engine(CONNECTION_URL)

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


def get_db() -> Generator[Session]:
    session = SessionLocal()
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def create_schema(bind: Engine = engine) -> None:
    # Register every mapped table before emitting DDL.
    import tripmates.models  # noqa: F401

    Base.metadata.create_all(bind=bind)


def ping_database() -> bool:
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError:
        return False
