"""
Identity tables read by the access-context resolver.

These mirror the identity service's schema; this service never writes them
outside of tests and seeding.
"""
from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint
import uuid

from ats_service.database import Base
from ats_service.database_types import GUID


class User(Base):
    __tablename__ = "users"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    clerk_user_id = Column(String, unique=True, nullable=False, index=True)
    email = Column(String, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class Membership(Base):
    __tablename__ = "memberships"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    user_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    organization_id = Column(GUID, nullable=False, index=True)

    # platform_admin | company_admin | hiring_manager
    role_name = Column(String, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint('user_id', 'organization_id', 'role_name', name='uq_membership_role'),
    )


class Recruiter(Base):
    __tablename__ = "recruiters"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    user_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)

    # pending | active | suspended
    status = Column(String, nullable=False, default="active")

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class Candidate(Base):
    __tablename__ = "candidates"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    user_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=True, unique=True)
    full_name = Column(String, nullable=True)
    email = Column(String, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
