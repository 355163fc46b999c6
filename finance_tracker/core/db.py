"""DB connection and table definitions for the Personal Finance Tracker."""

import datetime as dt
import threading
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import Date, DateTime, Float, Integer, String, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker

from finance_tracker.core.settings import Settings
from finance_tracker.core.utils import get_logger

logger = get_logger("finance-tracker.db")


class Base(DeclarativeBase):
    """Declarative base for the tracker's tables."""


class TransactionRecord(Base):
    """A persisted transaction row."""

    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    description: Mapped[str] = mapped_column(String, nullable=False)
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    category: Mapped[str] = mapped_column(String, nullable=False, default="General")
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    type: Mapped[str] = mapped_column(String(16), nullable=False)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[dt.datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class Database:
    """Lazily-initialized database handle owned by the running application.

    The engine is created (and the schema ensured) on first use, then reused by
    every request until ``dispose`` is called at shutdown.
    """

    def __init__(self, settings: Settings) -> None:
        """Remember the settings; no connection is opened yet."""
        self.settings = settings
        self._engine: Engine | None = None
        self._sessionmaker: sessionmaker[Session] | None = None
        self._lock = threading.Lock()

    @property
    def engine(self) -> Engine:
        """Return the shared engine, creating it and the schema on first access."""
        if self._engine is None:
            with self._lock:
                if self._engine is None:
                    self._connect()
        return self._engine

    def _connect(self) -> None:
        url = self.settings.database_url
        connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
        engine = create_engine(
            url,
            echo=self.settings.database_echo,
            pool_pre_ping=True,
            connect_args=connect_args,
        )
        Base.metadata.create_all(engine)
        self._sessionmaker = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
        self._engine = engine
        logger.info(f"Connected to transaction store: {engine.url.render_as_string(hide_password=True)}")

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Provide a transactional scope around a series of operations."""
        _ = self.engine
        session = self._sessionmaker()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def dispose(self) -> None:
        """Release every pooled connection."""
        with self._lock:
            if self._engine is not None:
                self._engine.dispose()
                logger.info("Disposed transaction store connections")
            self._engine = None
            self._sessionmaker = None
