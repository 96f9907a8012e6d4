from datetime import datetime, timezone
from functools import lru_cache
from typing import Iterator, Optional

from fastapi import Depends
from sqlalchemy import Boolean, DateTime, Integer, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker

from .config import Settings, get_settings


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class TimestampMixin:
    """Columns shared by every collection: identity, active flag, timestamps."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)


@lru_cache()
def get_engine(database_url: Optional[str] = None) -> Engine:
    return create_engine(database_url or get_settings().database_url, future=True, pool_pre_ping=True)


@lru_cache()
def get_sessionmaker(database_url: Optional[str] = None) -> sessionmaker:
    return sessionmaker(bind=get_engine(database_url), autoflush=False, expire_on_commit=False)


def get_db(settings: Settings = Depends(get_settings)) -> Iterator[Session]:
    session = get_sessionmaker(settings.database_url)()
    try:
        yield session
    finally:
        session.close()
