"""
Access context resolution.

Maps an authenticated identity (Clerk user id) to the role flags and
organization associations used for row-level scoping. The resolver is
injected, so callers can be tested against fabricated contexts.
"""
import enum
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ats_service.models.identity import User, Membership, Recruiter, Candidate

logger = logging.getLogger(__name__)


PLATFORM_ADMIN_ROLE = "platform_admin"
COMPANY_ROLES = frozenset({"company_admin", "hiring_manager"})


class AccessScope(str, enum.Enum):
    """Row visibility class of a caller, in dispatch priority order."""
    PLATFORM_ADMIN = "platform_admin"
    RECRUITER = "recruiter"
    COMPANY = "company"
    CANDIDATE = "candidate"
    NONE = "none"


@dataclass
class AccessContext:
    identity_user_id: Optional[UUID] = None
    candidate_id: Optional[UUID] = None
    recruiter_id: Optional[UUID] = None
    organization_ids: list[UUID] = field(default_factory=list)
    roles: list[str] = field(default_factory=list)
    is_platform_admin: bool = False

    @property
    def is_company_user(self) -> bool:
        return bool(self.organization_ids) and any(r in COMPANY_ROLES for r in self.roles)

    @property
    def scope(self) -> AccessScope:
        if self.is_platform_admin:
            return AccessScope.PLATFORM_ADMIN
        if self.recruiter_id:
            return AccessScope.RECRUITER
        if self.is_company_user:
            return AccessScope.COMPANY
        if self.candidate_id:
            return AccessScope.CANDIDATE
        return AccessScope.NONE


class AccessContextResolver(ABC):
    """Maps a clerk user id to an AccessContext."""

    @abstractmethod
    async def resolve(self, clerk_user_id: str) -> AccessContext:
        """Unknown identities resolve to an empty context."""


class DatabaseAccessResolver(AccessContextResolver):
    """Resolve access contexts from the identity tables."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def resolve(self, clerk_user_id: str) -> AccessContext:
        result = await self.db.execute(
            select(User).where(User.clerk_user_id == clerk_user_id)
        )
        user = result.scalar_one_or_none()

        if not user:
            logger.info(f"No identity user for {clerk_user_id}, resolving empty access context")
            return AccessContext()

        memberships = (await self.db.execute(
            select(Membership).where(Membership.user_id == user.id)
        )).scalars().all()

        recruiter = (await self.db.execute(
            select(Recruiter).where(
                Recruiter.user_id == user.id,
                Recruiter.status == "active",
            )
        )).scalar_one_or_none()

        candidate = (await self.db.execute(
            select(Candidate).where(Candidate.user_id == user.id)
        )).scalar_one_or_none()

        roles = []
        organization_ids = []
        for membership in memberships:
            if membership.role_name not in roles:
                roles.append(membership.role_name)
            if membership.organization_id not in organization_ids:
                organization_ids.append(membership.organization_id)
        if recruiter:
            roles.append("recruiter")
        if candidate:
            roles.append("candidate")

        return AccessContext(
            identity_user_id=user.id,
            candidate_id=candidate.id if candidate else None,
            recruiter_id=recruiter.id if recruiter else None,
            organization_ids=organization_ids,
            roles=roles,
            is_platform_admin=PLATFORM_ADMIN_ROLE in roles,
        )
