"""
Engine and session construction.

The engine is built once by the hosting process (see app.main lifespan) and
kept on app.state; request handlers receive sessions through get_db().
"""
from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker


def build_engine(database_url: str, **kwargs) -> Engine:
    """Create an engine; SQLite URLs get the thread-safety flag FastAPI needs."""
    if not database_url:
        raise ValueError("DATABASE_URL is not set")

    if database_url.startswith("sqlite"):
        connect_args = kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        return create_engine(database_url, connect_args=connect_args, **kwargs)

    kwargs.setdefault("pool_pre_ping", True)
    return create_engine(database_url, **kwargs)


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db(request: Request) -> Iterator[Session]:
    """Database session dependency."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
