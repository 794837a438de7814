# src/mietpreis/db.py
from __future__ import annotations
from pathlib import Path
from typing import Iterator, Optional
from contextlib import contextmanager
from sqlmodel import SQLModel, create_engine, Session
from sqlalchemy import event
from sqlalchemy.engine import Engine

from . import config

_engine: Optional[Engine] = None


def make_engine(url: Optional[str] = None) -> Engine:
    """Engine erstellen; SQLite thread-tolerant (check_same_thread=False) und mit Foreign Keys."""
    url = url or config.DATABASE_URL
    engine_kwargs = {"echo": False}
    if url.startswith("sqlite"):
        if url == f"sqlite:///{Path(config.DB_PATH)}":
            Path(config.DB_PATH).parent.mkdir(parents=True, exist_ok=True)
        engine_kwargs["connect_args"] = {"check_same_thread": False}

    engine = create_engine(url, **engine_kwargs)

    if url.startswith("sqlite"):
        @event.listens_for(engine, "connect")
        def _set_sqlite_pragmas(dbapi_connection, connection_record):
            cur = dbapi_connection.cursor()
            cur.execute("PRAGMA foreign_keys=ON")
            cur.close()

    return engine


def get_engine() -> Engine:
    # erst beim ersten Zugriff anlegen (kein data/-Ordner beim bloßen Import)
    global _engine
    if _engine is None:
        _engine = make_engine()
    return _engine


def init_db(engine: Optional[Engine] = None) -> None:
    from . import models  # noqa: F401  Tabellen registrieren
    SQLModel.metadata.create_all(engine or get_engine())


@contextmanager
def get_session(engine: Optional[Engine] = None) -> Iterator[Session]:
    with Session(engine or get_engine()) as session:
        yield session
