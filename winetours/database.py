"""Async database engine, session factory and declarative base"""

import time

import structlog
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from winetours.config import settings

logger = structlog.get_logger()

Base = declarative_base()


def create_engine(database_url: str = None) -> AsyncEngine:
    """Create the async engine, with slow query logging when enabled"""
    engine = create_async_engine(
        database_url or settings.database_url,
        echo=settings.database_echo,
        pool_pre_ping=True,
    )

    if settings.db_log_slow_queries:
        _install_slow_query_logging(engine)

    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory used by every service.

    expire_on_commit=False so rows returned from a committed transaction can
    still be read after their session closes.
    """
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


def _install_slow_query_logging(engine: AsyncEngine) -> None:
    threshold = settings.db_slow_query_threshold

    @event.listens_for(engine.sync_engine, "before_cursor_execute")
    def before_cursor_execute(conn, _cursor, _statement, _parameters, _context, _executemany):
        conn.info.setdefault("query_start_time", []).append(time.monotonic())

    @event.listens_for(engine.sync_engine, "after_cursor_execute")
    def after_cursor_execute(conn, _cursor, statement, _parameters, _context, _executemany):
        total = time.monotonic() - conn.info["query_start_time"].pop(-1)
        if total > threshold:
            logger.warning("Slow query", duration_s=round(total, 3), statement=statement[:200])


engine = create_engine()
SessionLocal = create_session_factory(engine)


def contains_pattern(text: str) -> str:
    """Lower-cased LIKE pattern matching text anywhere, with wildcards escaped"""
    escaped = text.strip().lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"
