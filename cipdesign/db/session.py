# cipdesign/db/session.py

from __future__ import annotations
from typing import Generator
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from cipdesign.core.config import settings
from cipdesign.core.fs import ensure_sqlite_dir
from cipdesign.db.models import Base


def _is_sqlite_memory(url: str) -> bool:
    return url.startswith("sqlite") and (url in ("sqlite://", "sqlite:///") or ":memory:" in url)


def _engine_kwargs(url: str) -> dict:
    if not url.startswith("sqlite"):
        return {}
    kw: dict = {"connect_args": {"check_same_thread": False}}
    # in-memory DB 는 커넥션마다 새 DB 이므로 단일 커넥션 공유
    if _is_sqlite_memory(url):
        kw["poolclass"] = StaticPool
    return kw


ensure_sqlite_dir(settings.DB_URL)

engine = create_engine(settings.DB_URL, future=True, **_engine_kwargs(settings.DB_URL))

SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
    future=True,
    expire_on_commit=False,
)


def init_db() -> None:
    """테이블 없으면 생성"""
    Base.metadata.create_all(bind=engine)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
