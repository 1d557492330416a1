"""FastAPI dependencies for identity, access resolution and services."""
import logging
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ats_service.database import get_db
from ats_service.services.access import AccessContextResolver, DatabaseAccessResolver
from ats_service.services.events import EventPublisher, get_event_publisher
from ats_service.services.job_repository import JobRepository
from ats_service.services.jobs import JobService

logger = logging.getLogger(__name__)


async def get_clerk_user_id(
    x_clerk_user_id: Optional[str] = Header(None)
) -> Optional[str]:
    """
    Caller identity forwarded by the API gateway.
    Returns None for anonymous requests.
    """
    if x_clerk_user_id:
        return x_clerk_user_id.strip() or None
    return None


async def require_clerk_user_id(
    clerk_user_id: Optional[str] = Depends(get_clerk_user_id)
) -> str:
    """Require an authenticated caller."""
    if not clerk_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return clerk_user_id


async def get_user_role(
    x_user_role: Optional[str] = Header(None)
) -> Optional[str]:
    """Role the caller is acting as (e.g. hiring_manager)."""
    return x_user_role


def get_access_resolver(
    db: AsyncSession = Depends(get_db)
) -> AccessContextResolver:
    return DatabaseAccessResolver(db)


def get_job_service(
    db: AsyncSession = Depends(get_db),
    resolver: AccessContextResolver = Depends(get_access_resolver),
    publisher: EventPublisher = Depends(get_event_publisher),
) -> JobService:
    return JobService(JobRepository(db, resolver), publisher)
