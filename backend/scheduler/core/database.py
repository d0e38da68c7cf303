from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base

from scheduler.core import config


def _async_url(url: str) -> str:
    """Point a plain postgres URL at the asyncpg driver."""
    if url.startswith("postgresql+"):
        return url
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://"):]
    return url.replace("postgresql", "postgresql+asyncpg", 1)


DATABASE_URL = _async_url(config.DATABASE_URL)

# Create async engine
engine = create_async_engine(
    DATABASE_URL,
    echo=config.SQL_ECHO,
    future=True
)

# Create session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False
)

# Base class for models
Base = declarative_base()

# Dependency for FastAPI
async def get_db():
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()
