"""
Async database engine, session factory and declarative base.
"""
import logging

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from ats_service.config import settings

logger = logging.getLogger(__name__)

engine = create_async_engine(settings.database_url, echo=settings.debug)

AsyncSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)


class Base(DeclarativeBase):
    pass


async def get_db():
    """
    Yield a session per request.

    AsyncSessionLocal is looked up at call time so tests can replace it.
    """
    async with AsyncSessionLocal() as session:
        yield session
