from typing import Any

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine

from royalty_engine.core.config import settings


def build_engine(database_url: str, **kwargs: Any) -> AsyncEngine:
    if database_url.startswith("sqlite"):
        # pool sizing does not apply; a longer busy timeout lets concurrent
        # writers queue on the database lock instead of failing
        kwargs.setdefault("connect_args", {"timeout": 30})
        return create_async_engine(database_url, **kwargs)
    kwargs.setdefault("pool_size", settings.database_pool_size)
    kwargs.setdefault("max_overflow", settings.database_max_overflow)
    kwargs.setdefault("pool_pre_ping", True)
    return create_async_engine(database_url, **kwargs)


engine = build_engine(settings.database_url, echo=settings.database_echo)

AsyncSessionLocal = async_sessionmaker(engine, expire_on_commit=False)
