"""
Job service: validation, authorization context and lifecycle events
around the job repository.
"""
import logging
import math
from typing import Any, Dict, List, Optional
from uuid import UUID

from ats_service.models.job import Job, JobStatus
from ats_service.schemas.job import JobCreate, JobFilters, JobUpdate
from ats_service.services.errors import JobNotFoundError, JobValidationError
from ats_service.services.events import (
    EventPublisher,
    JOB_CREATED,
    JOB_DELETED,
    JOB_STATUS_CHANGED,
    JOB_UPDATED,
)
from ats_service.services.job_repository import JobRepository, RELATED_RESOURCES
from ats_service.services.state_machine import validate_salary_range, validate_status_transition

logger = logging.getLogger(__name__)


CREATABLE_STATUSES = [JobStatus.DRAFT.value, JobStatus.ACTIVE.value]

# Columns that cannot be cleared; an explicit null in a request is ignored
NON_NULLABLE_FIELDS = {
    "status",
    "show_salary_range",
    "open_to_relocation",
    "fee_percentage",
    "guarantee_days",
}


def parse_include(include: Optional[str]) -> List[str]:
    """Parse ?include=a,b into known related-resource names, ignoring the rest."""
    if not include:
        return []
    names = [name.strip() for name in include.split(",")]
    return [name for name in names if name in RELATED_RESOURCES]


def _drop_nulls(data: Dict[str, Any]) -> Dict[str, Any]:
    return {
        key: value for key, value in data.items()
        if not (value is None and key in NON_NULLABLE_FIELDS)
    }


class JobService:
    """Jobs resource operations for the v2 API."""

    def __init__(self, repository: JobRepository, publisher: EventPublisher):
        self.repository = repository
        self.publisher = publisher

    async def list_jobs(self, clerk_user_id: Optional[str], filters: JobFilters) -> Dict[str, Any]:
        jobs, total = await self.repository.find_jobs(clerk_user_id, filters)
        return {
            "data": jobs,
            "pagination": {
                "total": total,
                "page": filters.page,
                "limit": filters.limit,
                "total_pages": math.ceil(total / filters.limit) if total else 0,
            },
        }

    async def get_job(self, job_id: UUID, include: Optional[List[str]] = None) -> Job:
        job = await self.repository.find_job(job_id, include=include or [])
        if not job:
            raise JobNotFoundError("Job not found")
        return job

    async def create_job(self, payload: JobCreate, clerk_user_id: str) -> Job:
        """
        Create a job posting.

        Raises:
            JobValidationError: Missing title/company, bad status or salary range
            ForbiddenError: Caller may not manage the company's jobs
        """
        data = payload.model_dump(exclude_unset=True, exclude={"requirements", "pre_screen_questions"})

        title = (data.get("title") or "").strip()
        if not title:
            raise JobValidationError("Job title is required")
        data["title"] = title

        if not data.get("company_id"):
            raise JobValidationError("Company ID is required")

        status = data.get("status") or JobStatus.ACTIVE
        data["status"] = JobStatus(status).value
        if data["status"] not in CREATABLE_STATUSES:
            raise JobValidationError(
                f"Jobs can only be created as draft or active, not {data['status']}"
            )

        validate_salary_range(data)

        job = await self.repository.create_job(
            _drop_nulls(data),
            clerk_user_id,
            requirements=[r.model_dump(mode="json") for r in payload.requirements or []],
            pre_screen_questions=[q.model_dump(mode="json") for q in payload.pre_screen_questions or []],
        )

        await self.publisher.publish(JOB_CREATED, {
            "job_id": str(job.id),
            "company_id": str(job.company_id),
            "title": job.title,
            "status": job.status,
            "created_by": clerk_user_id,
        })
        return job

    async def update_job(
        self,
        job_id: UUID,
        payload: JobUpdate,
        clerk_user_id: str,
        user_role: Optional[str] = None,
    ) -> Job:
        """
        Update a job, enforcing status transitions and the salary range.

        Raises:
            JobNotFoundError: Job missing, or not manageable by the caller
            InvalidTransitionError: Status change outside the transition table
            ForbiddenError: Hiring manager closing a job
            JobValidationError: salary_min above salary_max, empty title
        """
        updates = payload.model_dump(exclude_unset=True, exclude={"requirements", "pre_screen_questions"})
        fields_set = payload.model_fields_set

        current = await self.repository.find_job(job_id)
        if not current:
            raise JobNotFoundError("Job not found")
        old_status = current.status

        # Field rules are checked against the stored job before the scoped
        # write, so a rule violation reports 400 ahead of the 404 for
        # callers who cannot manage the job.

        if "title" in updates:
            title = (updates["title"] or "").strip()
            if not title:
                raise JobValidationError("Job title is required")
            updates["title"] = title

        if updates.get("status") is not None:
            updates["status"] = JobStatus(updates["status"]).value
            validate_status_transition(old_status, updates["status"], user_role)

        validate_salary_range(updates, {
            "salary_min": current.salary_min,
            "salary_max": current.salary_max,
        })

        updates = _drop_nulls(updates)
        await self.repository.update_job(job_id, updates, clerk_user_id)

        if "requirements" in fields_set:
            await self.repository.replace_requirements(
                job_id, [r.model_dump(mode="json") for r in payload.requirements or []]
            )
        if "pre_screen_questions" in fields_set:
            await self.repository.replace_pre_screen_questions(
                job_id, [q.model_dump(mode="json") for q in payload.pre_screen_questions or []]
            )

        job = await self.repository.find_job(job_id, include=RELATED_RESOURCES.keys())

        if job.status != old_status:
            logger.info(f"Job {job_id} status: {old_status} -> {job.status}")
            await self.publisher.publish(JOB_STATUS_CHANGED, {
                "job_id": str(job.id),
                "company_id": str(job.company_id),
                "old_status": old_status,
                "new_status": job.status,
                "changed_by": clerk_user_id,
            })

        updated_fields = list(updates.keys()) + [
            name for name in ("requirements", "pre_screen_questions") if name in fields_set
        ]
        await self.publisher.publish(JOB_UPDATED, {
            "job_id": str(job.id),
            "company_id": str(job.company_id),
            "updated_fields": updated_fields,
            "updated_by": clerk_user_id,
        })
        return job

    async def delete_job(self, job_id: UUID, clerk_user_id: str) -> None:
        job = await self.repository.delete_job(job_id, clerk_user_id)
        await self.publisher.publish(JOB_DELETED, {
            "job_id": str(job.id),
            "company_id": str(job.company_id),
            "deleted_by": clerk_user_id,
        })
