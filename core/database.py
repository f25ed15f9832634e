"""
Database engine and session factory (SQLAlchemy asyncio).
"""

from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from config import DATABASE_URL
from core.telegram import app_logger
from storage.models import Base


def create_engine(url=DATABASE_URL):
    """Create async engine; pre-ping only makes sense for pooled servers"""
    options = {"echo": False}
    if not url.startswith("sqlite"):
        options["pool_pre_ping"] = True
    return create_async_engine(url, **options)


engine = create_engine()
SessionLocal = async_sessionmaker(engine, expire_on_commit=False)


async def init_db(bind=None):
    """Создать таблицы, если их ещё нет"""
    bind = bind or engine
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    app_logger.info(f"Database ready: dialect={bind.dialect.name}")
