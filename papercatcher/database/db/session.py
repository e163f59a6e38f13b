from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine

from papercatcher.config import Config
from papercatcher.database.db.models import Base


def create_engine_from_url(database_url: str) -> AsyncEngine:
    # accept plain postgres URLs from older settings files
    if database_url.startswith("postgresql://"):
        database_url = database_url.replace("postgresql://", "postgresql+asyncpg://", 1)

    return create_async_engine(
        database_url,
        pool_pre_ping=True,
    )


engine = create_engine_from_url(Config.database_url)

SessionLocal = async_sessionmaker(
    bind=engine,
    autoflush=False,
    expire_on_commit=False,
)


async def init_models(bind: AsyncEngine = engine) -> None:
    """Create any missing tables."""
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
