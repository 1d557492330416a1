"""Job-related Pydantic schemas."""
from datetime import datetime
from typing import Literal, Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field

from ats_service.config import settings
from ats_service.models.job import EmploymentType, JobStatus, RequirementType, PreScreenQuestionType


# ============================================================
# NESTED RESOURCES
# ============================================================

class RequirementIn(BaseModel):
    requirement_type: RequirementType = RequirementType.MANDATORY
    description: str


class PreScreenQuestionIn(BaseModel):
    question: str
    question_type: PreScreenQuestionType = PreScreenQuestionType.TEXT
    options: Optional[list[str]] = None  # select / multi_select only
    is_required: bool = False


class RequirementResponse(BaseModel):
    id: UUID
    requirement_type: str
    description: str
    sort_order: int

    model_config = ConfigDict(from_attributes=True)


class PreScreenQuestionResponse(BaseModel):
    id: UUID
    question: str
    question_type: str
    options: Optional[list[str]] = None
    is_required: bool
    sort_order: int

    model_config = ConfigDict(from_attributes=True)


class CompanySummary(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    website: Optional[str] = None
    identity_organization_id: Optional[UUID] = None

    model_config = ConfigDict(from_attributes=True)


# ============================================================
# REQUESTS
# ============================================================

class JobFields(BaseModel):
    """Writable job fields shared by create and update."""
    model_config = ConfigDict(use_enum_values=True)

    department: Optional[str] = None
    location: Optional[str] = None
    employment_type: Optional[EmploymentType] = None
    description: Optional[str] = None
    recruiter_description: Optional[str] = None
    candidate_description: Optional[str] = None
    salary_min: Optional[int] = Field(None, ge=0)
    salary_max: Optional[int] = Field(None, ge=0)
    show_salary_range: Optional[bool] = None
    open_to_relocation: Optional[bool] = None
    fee_percentage: Optional[float] = Field(None, ge=0, le=100)
    splits_fee_percentage: Optional[float] = Field(None, ge=0, le=100)
    guarantee_days: Optional[int] = Field(None, ge=0)
    job_owner_id: Optional[UUID] = None
    job_owner_recruiter_id: Optional[UUID] = None
    company_recruiter_id: Optional[UUID] = None


class JobCreate(JobFields):
    """
    Schema for creating a job.

    title and company_id are optional here so the service can report
    which one is missing.
    """
    title: Optional[str] = None
    company_id: Optional[UUID] = None
    status: Optional[JobStatus] = None  # draft | active
    requirements: Optional[list[RequirementIn]] = None
    pre_screen_questions: Optional[list[PreScreenQuestionIn]] = None


class JobUpdate(JobFields):
    """Schema for a partial job update. Only fields sent are applied."""
    title: Optional[str] = None
    status: Optional[JobStatus] = None
    requirements: Optional[list[RequirementIn]] = None
    pre_screen_questions: Optional[list[PreScreenQuestionIn]] = None


class JobFilters(BaseModel):
    """List query parameters."""
    page: int = Field(1, ge=1)
    limit: int = Field(settings.default_page_size, ge=1, le=settings.max_page_size)
    search: Optional[str] = None
    status: Optional[JobStatus] = None
    location: Optional[str] = None
    employment_type: Optional[EmploymentType] = None
    company_id: Optional[UUID] = None
    job_owner_filter: Literal["all", "assigned"] = "all"
    sort_by: Optional[str] = None
    sort_order: Literal["asc", "desc"] = "desc"


# ============================================================
# RESPONSES
# ============================================================

class JobResponse(BaseModel):
    """Schema for job response."""
    id: UUID
    company_id: UUID
    title: str
    status: str
    department: Optional[str] = None
    location: Optional[str] = None
    employment_type: Optional[str] = None
    description: Optional[str] = None
    recruiter_description: Optional[str] = None
    candidate_description: Optional[str] = None
    salary_min: Optional[int] = None
    salary_max: Optional[int] = None
    show_salary_range: bool
    open_to_relocation: bool
    fee_percentage: float
    splits_fee_percentage: Optional[float] = None
    guarantee_days: int
    job_owner_id: Optional[UUID] = None
    job_owner_recruiter_id: Optional[UUID] = None
    company_recruiter_id: Optional[UUID] = None
    created_at: datetime
    updated_at: datetime

    # Related resources, present only when loaded
    company: Optional[CompanySummary] = None
    requirements: Optional[list[RequirementResponse]] = None
    pre_screen_questions: Optional[list[PreScreenQuestionResponse]] = None


class Pagination(BaseModel):
    total: int
    page: int
    limit: int
    total_pages: int


class JobEnvelope(BaseModel):
    data: JobResponse


class JobListEnvelope(BaseModel):
    data: list[JobResponse]
    pagination: Pagination


class MessageData(BaseModel):
    message: str


class MessageEnvelope(BaseModel):
    data: MessageData
