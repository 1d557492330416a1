"""
Jobs API endpoints (v2).
Handles job listing with role-based scoping and job CRUD.
"""
import logging
from typing import Iterable, Optional, Literal
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query

from ats_service.api.dependencies import (
    get_clerk_user_id,
    get_job_service,
    get_user_role,
    require_clerk_user_id,
)
from ats_service.models.job import EmploymentType, Job, JobStatus
from ats_service.schemas.job import (
    CompanySummary,
    JobCreate,
    JobEnvelope,
    JobFilters,
    JobListEnvelope,
    JobResponse,
    JobUpdate,
    MessageEnvelope,
    Pagination,
    PreScreenQuestionResponse,
    RequirementResponse,
)
from ats_service.config import settings
from ats_service.services.errors import JobNotFoundError, JobServiceError
from ats_service.services.jobs import JobService, parse_include

# Configure logger
logger = logging.getLogger(__name__)

router = APIRouter()

RELATED_FIELDS = ("company", "requirements", "pre_screen_questions")


def _serialize(job: Job, include: Iterable[str] = ()) -> JobResponse:
    """Build a response from loaded attributes only (no lazy loads)."""
    include = set(include)
    fields = {
        name: getattr(job, name)
        for name in JobResponse.model_fields
        if name not in RELATED_FIELDS
    }
    if "company" in include and job.company is not None:
        fields["company"] = CompanySummary.model_validate(job.company)
    if "requirements" in include:
        fields["requirements"] = [RequirementResponse.model_validate(r) for r in job.requirements]
    if "pre_screen_questions" in include:
        fields["pre_screen_questions"] = [
            PreScreenQuestionResponse.model_validate(q) for q in job.pre_screen_questions
        ]
    return JobResponse(**fields)


def _to_http_error(error: JobServiceError) -> HTTPException:
    if isinstance(error, JobNotFoundError):
        return HTTPException(status_code=404, detail=str(error))
    return HTTPException(status_code=400, detail=str(error))


# ============================================================
# ENDPOINTS
# ============================================================

@router.get("", response_model=JobListEnvelope)
async def list_jobs(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    search: Optional[str] = Query(None, description="Full-text search"),
    status: Optional[JobStatus] = Query(None, description="Filter by status (admins and company users)"),
    location: Optional[str] = Query(None, description="Location substring (ignored with search)"),
    employment_type: Optional[EmploymentType] = Query(None),
    company_id: Optional[UUID] = Query(None),
    job_owner_filter: Literal["all", "assigned"] = Query("all"),
    sort_by: Optional[str] = Query(None),
    sort_order: Literal["asc", "desc"] = Query("desc"),
    clerk_user_id: Optional[str] = Depends(get_clerk_user_id),
    service: JobService = Depends(get_job_service),
):
    """
    List jobs visible to the caller.

    Anonymous callers get active jobs. Callers without a matching role get
    an empty page, never a 403.
    """
    filters = JobFilters(
        page=page,
        limit=limit,
        search=search or None,
        status=status,
        location=location or None,
        employment_type=employment_type,
        company_id=company_id,
        job_owner_filter=job_owner_filter,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    result = await service.list_jobs(clerk_user_id, filters)

    return JobListEnvelope(
        data=[_serialize(job, include=["company"]) for job in result["data"]],
        pagination=Pagination(**result["pagination"]),
    )


@router.get("/{job_id}", response_model=JobEnvelope)
async def get_job(
    job_id: UUID,
    include: Optional[str] = Query(
        None, description="Comma separated: company,requirements,pre_screen_questions"
    ),
    service: JobService = Depends(get_job_service),
):
    """Get a single job, optionally with related resources."""
    names = parse_include(include)
    try:
        job = await service.get_job(job_id, include=names)
    except JobServiceError as e:
        raise _to_http_error(e)

    return JobEnvelope(data=_serialize(job, include=names))


@router.post("", response_model=JobEnvelope, status_code=201)
async def create_job(
    job: JobCreate,
    clerk_user_id: str = Depends(require_clerk_user_id),
    service: JobService = Depends(get_job_service),
):
    """Create a job for a company the caller may manage."""
    try:
        created = await service.create_job(job, clerk_user_id)
    except JobServiceError as e:
        logger.info(f"Create job rejected for {clerk_user_id}: {e}")
        raise _to_http_error(e)

    return JobEnvelope(data=_serialize(created, include=RELATED_FIELDS))


@router.patch("/{job_id}", response_model=JobEnvelope)
async def update_job(
    job_id: UUID,
    updates: JobUpdate,
    clerk_user_id: str = Depends(require_clerk_user_id),
    user_role: Optional[str] = Depends(get_user_role),
    service: JobService = Depends(get_job_service),
):
    """
    Partially update a job.

    Status changes follow the job state machine; hiring managers may not
    close jobs.
    """
    try:
        job = await service.update_job(job_id, updates, clerk_user_id, user_role)
    except JobServiceError as e:
        logger.info(f"Update of job {job_id} rejected for {clerk_user_id}: {e}")
        raise _to_http_error(e)

    return JobEnvelope(data=_serialize(job, include=RELATED_FIELDS))


@router.delete("/{job_id}", response_model=MessageEnvelope)
async def delete_job(
    job_id: UUID,
    clerk_user_id: str = Depends(require_clerk_user_id),
    service: JobService = Depends(get_job_service),
):
    """Soft delete a job. The row is kept with deleted_at set."""
    try:
        await service.delete_job(job_id, clerk_user_id)
    except JobServiceError as e:
        logger.info(f"Delete of job {job_id} rejected for {clerk_user_id}: {e}")
        raise _to_http_error(e)

    return {"data": {"message": "Job deleted successfully"}}
