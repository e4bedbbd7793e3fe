from __future__ import annotations
import ssl
from typing import Any
from sqlalchemy.engine import URL, make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import DeclarativeBase
from modgate.config import Settings

class Base(DeclarativeBase):
    pass

def async_database_url(raw: str) -> URL:
    """Hosted Postgres hands out ``postgres://`` URLs; the engine needs the asyncpg driver."""
    url = make_url(raw)
    if url.get_backend_name() in ("postgres", "postgresql"):
        url = url.set(drivername="postgresql+asyncpg")
        # asyncpg does not understand libpq's sslmode; TLS goes through connect_args
        url = url.difference_update_query(["sslmode"])
    return url

def ssl_connect_args(mode: str) -> dict[str, Any]:
    if mode == "disable":
        return {"ssl": False}
    ctx = ssl.create_default_context()
    if mode == "no-verify":
        ctx.check_hostname = False
        ctx.verify_mode = ssl.CERT_NONE
    return {"ssl": ctx}

def build_engine(settings: Settings) -> AsyncEngine:
    url = async_database_url(settings.database_url)
    connect_args: dict[str, Any] = {}
    if url.get_driver_name() == "asyncpg":
        connect_args = ssl_connect_args(settings.database_ssl)
    return create_async_engine(url, future=True, echo=False, pool_pre_ping=True, connect_args=connect_args)

def build_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)
