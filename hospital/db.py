from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from . import config


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite non applica le foreign key se non richiesto per connessione
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(url: str, echo: bool = False) -> Engine:
    """
    Crea l'engine SQLAlchemy.
    - SQLite: check_same_thread disattivato, foreign key attive
    - SQLite in memoria: StaticPool, così tutte le sessioni vedono lo stesso DB
    """
    kwargs: dict = {}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in url or url.rstrip("/") in ("sqlite:", "sqlite+pysqlite:"):
            kwargs["poolclass"] = StaticPool

    eng = create_engine(url, echo=echo, future=True, **kwargs)
    if eng.dialect.name == "sqlite":
        event.listen(eng, "connect", _enable_sqlite_foreign_keys)
    return eng


def create_session_factory(bind: Engine) -> sessionmaker[Session]:
    return sessionmaker(
        bind=bind,
        autoflush=False,
        autocommit=False,
        future=True,
        expire_on_commit=False,
    )


engine = create_db_engine(config.DATABASE_URL, echo=config.SQL_ECHO)

SessionLocal = create_session_factory(engine)


class Base(DeclarativeBase):
    """Base ORM per tutti i modelli."""
    pass


@contextmanager
def db_session(factory: sessionmaker[Session] | None = None) -> Iterator[Session]:
    """
    Context manager per gestire correttamente la sessione (unità di lavoro):
    - commit se tutto ok
    - rollback su eccezioni
    - close sempre
    """
    session: Session = (factory or SessionLocal)()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
