from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey
import uuid

from ats_service.database import Base
from ats_service.database_types import GUID


class Placement(Base):
    __tablename__ = "placements"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    job_id = Column(GUID, ForeignKey("jobs.id"), nullable=False, index=True)
    candidate_id = Column(GUID, nullable=False)
    company_id = Column(GUID, ForeignKey("companies.id"), nullable=False)

    # Recruiter roles sharing the placement fee (all optional)
    candidate_recruiter_id = Column(GUID, nullable=True, index=True)
    company_recruiter_id = Column(GUID, nullable=True, index=True)
    job_owner_recruiter_id = Column(GUID, nullable=True, index=True)

    # hired | active | completed | failed
    state = Column(String, nullable=False, default="hired")

    hired_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
