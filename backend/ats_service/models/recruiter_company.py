from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, UniqueConstraint
import uuid

from ats_service.database import Base
from ats_service.database_types import GUID


class RecruiterCompany(Base):
    """Relationship granting a recruiter rights on a company's jobs."""
    __tablename__ = "recruiter_companies"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    recruiter_id = Column(GUID, ForeignKey("recruiters.id"), nullable=False, index=True)
    company_id = Column(GUID, ForeignKey("companies.id"), nullable=False, index=True)

    # pending | active | terminated
    status = Column(String, nullable=False, default="pending")
    can_manage_company_jobs = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint('recruiter_id', 'company_id', name='uq_recruiter_company'),
    )
