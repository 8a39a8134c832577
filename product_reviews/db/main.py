import logging
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from product_reviews.config import Config

logger = logging.getLogger(__name__)


def _engine_options(database_url: str) -> dict:
    # SQLite engines run on a static/singleton pool that rejects sizing options
    if database_url.startswith("sqlite"):
        return {}
    return {
        "pool_size": Config.DB_POOL_SIZE,
        "max_overflow": Config.DB_MAX_OVERFLOW,
        "pool_timeout": Config.DB_POOL_TIMEOUT,
    }


async_engine = create_async_engine(
    Config.DATABASE_URL,
    echo=Config.DB_ECHO,
    future=True,
    **_engine_options(Config.DATABASE_URL)
)

async_session_maker = sessionmaker(
    async_engine,
    class_=AsyncSession,
    expire_on_commit=False
)


async def get_session() -> AsyncSession: # type: ignore
    async with async_session_maker() as session:
        try:
            yield session
        except Exception as e:
            logger.error(f"Session error: {e}")
            raise
