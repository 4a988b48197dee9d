# database/database.py
from typing import Iterator, Optional

from fastapi import Request
from loguru import logger
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from database.models import Base


class Database:
    """Storage handle: owns the engine and hands out sessions.

    Built explicitly from a URL, connected at startup and disconnected at
    shutdown. Repository functions never create their own sessions.
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.echo = echo
        self.engine: Optional[Engine] = None
        self._sessionmaker: Optional[sessionmaker] = None

    @property
    def connected(self) -> bool:
        return self.engine is not None

    def connect(self) -> None:
        if self.connected:
            return
        kwargs = {"echo": self.echo}
        if self.url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
            if ":memory:" in self.url or self.url in ("sqlite://", "sqlite:///"):
                kwargs["poolclass"] = StaticPool
        self.engine = create_engine(self.url, **kwargs)
        if self.url.startswith("sqlite"):
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)
        Base.metadata.create_all(bind=self.engine)
        self._sessionmaker = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)
        logger.info(f"Database connected ({self.engine.url.render_as_string(hide_password=True)})")

    def disconnect(self) -> None:
        if not self.connected:
            return
        self.engine.dispose()
        self.engine = None
        self._sessionmaker = None
        logger.info("Database disconnected")

    def session(self) -> Session:
        if self._sessionmaker is None:
            raise RuntimeError("Database is not connected")
        return self._sessionmaker()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_db(request: Request) -> Iterator[Session]:
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()
