from datetime import datetime
from enum import Enum
from sqlalchemy import (
    Column, String, Integer, Float, Boolean, DateTime, Text, ForeignKey, Index
)
from sqlalchemy.orm import relationship
import uuid

from ats_service.database import Base
from ats_service.database_types import GUID, JSONList


class JobStatus(str, Enum):
    """Lifecycle states of a job posting"""
    DRAFT = "draft"
    ACTIVE = "active"
    PAUSED = "paused"
    CLOSED = "closed"
    FILLED = "filled"


class EmploymentType(str, Enum):
    FULL_TIME = "full_time"
    CONTRACT = "contract"
    TEMPORARY = "temporary"


class RequirementType(str, Enum):
    MANDATORY = "mandatory"
    PREFERRED = "preferred"


class PreScreenQuestionType(str, Enum):
    TEXT = "text"
    YES_NO = "yes_no"
    SELECT = "select"
    MULTI_SELECT = "multi_select"


class Job(Base):
    __tablename__ = "jobs"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    company_id = Column(GUID, ForeignKey("companies.id"), nullable=False, index=True)

    title = Column(String, nullable=False)
    department = Column(String, nullable=True)
    location = Column(String, nullable=True)
    employment_type = Column(String, nullable=True)  # full_time | contract | temporary

    # Descriptions (description is the legacy single field)
    description = Column(Text, nullable=True)
    recruiter_description = Column(Text, nullable=True)
    candidate_description = Column(Text, nullable=True)

    # Compensation
    salary_min = Column(Integer, nullable=True)
    salary_max = Column(Integer, nullable=True)
    show_salary_range = Column(Boolean, nullable=False, default=True)
    open_to_relocation = Column(Boolean, nullable=False, default=False)

    # Fees
    fee_percentage = Column(Float, nullable=False, default=20)
    splits_fee_percentage = Column(Float, nullable=True)
    guarantee_days = Column(Integer, nullable=False, default=90)

    # draft | active | paused | closed | filled
    status = Column(String, nullable=False, default=JobStatus.ACTIVE.value, index=True)

    # Ownership
    job_owner_id = Column(GUID, nullable=True, index=True)  # identity user
    job_owner_recruiter_id = Column(GUID, nullable=True, index=True)  # recruiter who posted the job
    company_recruiter_id = Column(GUID, nullable=True, index=True)  # recruiter representing the company

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
    deleted_at = Column(DateTime, nullable=True)  # soft delete

    # Relationships
    company = relationship("Company", back_populates="jobs")
    requirements = relationship(
        "JobRequirement",
        back_populates="job",
        cascade="all, delete-orphan",
        order_by="JobRequirement.sort_order",
    )
    pre_screen_questions = relationship(
        "JobPreScreenQuestion",
        back_populates="job",
        cascade="all, delete-orphan",
        order_by="JobPreScreenQuestion.sort_order",
    )

    __table_args__ = (
        Index('idx_jobs_visible', 'status', 'deleted_at', 'created_at'),
    )


class JobRequirement(Base):
    __tablename__ = "job_requirements"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    job_id = Column(GUID, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    requirement_type = Column(String, nullable=False, default=RequirementType.MANDATORY.value)
    description = Column(Text, nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    job = relationship("Job", back_populates="requirements")


class JobPreScreenQuestion(Base):
    __tablename__ = "job_pre_screen_questions"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    job_id = Column(GUID, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    question = Column(Text, nullable=False)
    question_type = Column(String, nullable=False, default=PreScreenQuestionType.TEXT.value)
    options = Column(JSONList, nullable=True)  # select / multi_select only
    is_required = Column(Boolean, nullable=False, default=False)
    sort_order = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    job = relationship("Job", back_populates="pre_screen_questions")
