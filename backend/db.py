# db.py
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

from errors import ConfigurationError


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create the SQLModel engine for DATABASE_URL.

    In-memory SQLite URLs share one connection so every session sees the
    same database (used by the tests).
    """
    if not database_url:
        raise ConfigurationError("DATABASE_URL is not set in the environment (.env)")

    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in database_url or database_url in ("sqlite://", "sqlite:///"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, echo=echo, **kwargs)

    return create_engine(database_url, echo=echo, pool_pre_ping=True)


def init_db(engine: Engine) -> None:
    """
    Called on app startup to create tables if they don't exist.
    """
    # Import models here so SQLModel knows about them
    import models  # noqa: F401

    SQLModel.metadata.create_all(engine)
