# database.py

import logging
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, AsyncEngine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from config import settings
from models import Base

logger = logging.getLogger(__name__)

DATABASE_URL = settings.database_url


def build_engine(url: str = DATABASE_URL) -> AsyncEngine:
    """Create the async engine. In-memory SQLite needs a single shared connection."""
    if url.startswith("sqlite") and ":memory:" in url:
        return create_async_engine(
            url,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_async_engine(url, echo=False) # Set echo=True for SQL logging


def build_sessionmaker(bind: AsyncEngine) -> sessionmaker:
    return sessionmaker(
        bind=bind,
        class_=AsyncSession,
        expire_on_commit=False,
    )


# Application-scoped store, owned by the app lifespan
engine = build_engine()
AsyncSessionLocal = build_sessionmaker(engine)

# One session per request, closed when the response is done
async def get_db() -> AsyncIterator[AsyncSession]:
    async with AsyncSessionLocal() as session:
        yield session

# Called from the lifespan; tests pass their own engine
async def create_tables(bind: AsyncEngine = engine):
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Post tables ready on %s", bind.url)

async def dispose_engine(bind: AsyncEngine = engine):
    await bind.dispose()
    logger.info("Database engine disposed")
