from datetime import datetime
from enum import Enum
from sqlalchemy import Column, String, DateTime, ForeignKey, Index
import uuid

from ats_service.database import Base
from ats_service.database_types import GUID


class ApplicationStage(str, Enum):
    """Application pipeline stages"""
    # Candidate self-service
    DRAFT = "draft"
    AI_REVIEW = "ai_review"
    AI_REVIEWED = "ai_reviewed"
    # Recruiter involvement
    RECRUITER_REQUEST = "recruiter_request"
    RECRUITER_PROPOSED = "recruiter_proposed"
    RECRUITER_REVIEW = "recruiter_review"
    # Company review
    SCREEN = "screen"
    SUBMITTED = "submitted"
    COMPANY_REVIEW = "company_review"
    COMPANY_FEEDBACK = "company_feedback"
    INTERVIEW = "interview"
    OFFER = "offer"
    # Terminal
    HIRED = "hired"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"
    EXPIRED = "expired"


class Application(Base):
    __tablename__ = "applications"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    job_id = Column(GUID, ForeignKey("jobs.id"), nullable=False, index=True)
    candidate_id = Column(GUID, nullable=False, index=True)
    candidate_recruiter_id = Column(GUID, nullable=True)  # recruiter representing the candidate

    stage = Column(String, nullable=False, default=ApplicationStage.DRAFT.value)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index('idx_applications_recruiter_stage', 'candidate_recruiter_id', 'stage'),
    )
