"""
Job repository with role-based row scoping.

Every query here excludes soft-deleted rows. Visibility and management
rights are derived from the caller's AccessContext, resolved once per call.
"""
import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import select, delete, func, or_, false
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ats_service.models.application import Application, ApplicationStage
from ats_service.models.company import Company
from ats_service.models.job import Job, JobStatus, JobRequirement, JobPreScreenQuestion
from ats_service.models.placement import Placement
from ats_service.models.recruiter_company import RecruiterCompany
from ats_service.schemas.job import JobFilters
from ats_service.services.access import AccessContext, AccessContextResolver, AccessScope
from ats_service.services.errors import ForbiddenError, JobNotFoundError, JobValidationError

logger = logging.getLogger(__name__)


# Application stages in which a recruiter counts as involved with the job
IN_PROGRESS_STAGES = [
    ApplicationStage.RECRUITER_REQUEST.value,
    ApplicationStage.RECRUITER_PROPOSED.value,
    ApplicationStage.RECRUITER_REVIEW.value,
    ApplicationStage.SCREEN.value,
    ApplicationStage.SUBMITTED.value,
    ApplicationStage.COMPANY_REVIEW.value,
    ApplicationStage.COMPANY_FEEDBACK.value,
    ApplicationStage.INTERVIEW.value,
    ApplicationStage.OFFER.value,
]

SORTABLE_COLUMNS = {
    "created_at": Job.created_at,
    "updated_at": Job.updated_at,
    "title": Job.title,
    "status": Job.status,
    "location": Job.location,
    "salary_min": Job.salary_min,
    "salary_max": Job.salary_max,
    "fee_percentage": Job.fee_percentage,
}

RELATED_RESOURCES = {
    "company": Job.company,
    "requirements": Job.requirements,
    "pre_screen_questions": Job.pre_screen_questions,
}


class JobRepository:
    """Query composition and persistence for jobs."""

    def __init__(self, db: AsyncSession, resolver: AccessContextResolver):
        self.db = db
        self.resolver = resolver

    async def resolve_context(self, clerk_user_id: Optional[str]) -> Optional[AccessContext]:
        if not clerk_user_id:
            return None
        return await self.resolver.resolve(clerk_user_id)

    # ============================================================
    # READ
    # ============================================================

    async def find_jobs(
        self,
        clerk_user_id: Optional[str],
        filters: JobFilters
    ) -> Tuple[List[Job], int]:
        """
        List jobs visible to the caller.

        Anonymous callers see active jobs. Authenticated callers are
        dispatched once on their AccessScope; a caller matching no role
        gets an empty page rather than an error.

        Returns:
            (jobs for the requested page, total matching rows)
        """
        context = await self.resolve_context(clerk_user_id)
        scope = context.scope if context else None

        conditions = [Job.deleted_at.is_(None)]
        honor_status_filter = False

        if context is None:
            conditions.append(Job.status == JobStatus.ACTIVE.value)

        elif scope == AccessScope.PLATFORM_ADMIN:
            honor_status_filter = True

        elif scope == AccessScope.RECRUITER:
            conditions.append(Job.status == JobStatus.ACTIVE.value)
            if filters.job_owner_filter == "assigned":
                assigned_ids = await self._assigned_job_ids(context.recruiter_id)
                if not assigned_ids:
                    logger.info(f"Recruiter {context.recruiter_id} has no assigned jobs")
                    return [], 0
                conditions.append(Job.id.in_(list(assigned_ids)))

        elif scope == AccessScope.COMPANY:
            honor_status_filter = True
            conditions.append(
                Job.company_id.in_(
                    select(Company.id).where(
                        Company.identity_organization_id.in_(context.organization_ids)
                    )
                )
            )
            if filters.job_owner_filter == "assigned":
                conditions.append(Job.job_owner_id == context.identity_user_id)

        elif scope == AccessScope.CANDIDATE:
            conditions.append(Job.status == JobStatus.ACTIVE.value)

        else:
            logger.info(f"No job visibility for {clerk_user_id}: no matching role")
            return [], 0

        if honor_status_filter and filters.status:
            conditions.append(Job.status == filters.status.value)

        # Search and location substring filters conflict; search wins
        if filters.search:
            conditions.append(self._search_clause(filters.search))
        elif filters.location:
            conditions.append(Job.location.ilike(f"%{filters.location}%"))

        if filters.employment_type:
            conditions.append(Job.employment_type == filters.employment_type.value)
        if filters.company_id:
            conditions.append(Job.company_id == filters.company_id)

        count_result = await self.db.execute(
            select(func.count()).select_from(Job).where(*conditions)
        )
        total = count_result.scalar() or 0

        query = (
            select(Job)
            .options(selectinload(Job.company))
            .where(*conditions)
            .order_by(*self._ordering(filters))
            .offset((filters.page - 1) * filters.limit)
            .limit(filters.limit)
        )
        result = await self.db.execute(query)
        jobs = list(result.scalars().all())

        logger.info(
            f"Listed {len(jobs)} of {total} jobs "
            f"(scope={scope.value if scope else 'anonymous'}, page={filters.page})"
        )
        return jobs, total

    async def find_job(
        self,
        job_id: UUID,
        include: Iterable[str] = ()
    ) -> Optional[Job]:
        """Get a non-deleted job, eager-loading the requested related resources."""
        options = [
            selectinload(RELATED_RESOURCES[name])
            for name in include
            if name in RELATED_RESOURCES
        ]
        result = await self.db.execute(
            select(Job)
            .options(*options)
            .where(Job.id == job_id, Job.deleted_at.is_(None))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def find_company(self, company_id: UUID) -> Optional[Company]:
        result = await self.db.execute(
            select(Company).where(Company.id == company_id)
        )
        return result.scalar_one_or_none()

    # ============================================================
    # WRITE
    # ============================================================

    async def create_job(
        self,
        job_data: Dict[str, Any],
        clerk_user_id: str,
        requirements: Optional[List[Dict[str, Any]]] = None,
        pre_screen_questions: Optional[List[Dict[str, Any]]] = None,
    ) -> Job:
        """
        Insert a job for a company the caller may manage.

        Raises:
            JobValidationError: If the company does not exist
            ForbiddenError: If the caller may not manage the company's jobs
        """
        context = await self.resolve_context(clerk_user_id)
        company = await self.find_company(job_data["company_id"])
        if not company:
            raise JobValidationError("Company not found")

        if not await self.can_manage_company(context, company):
            logger.warning(f"Create denied for {clerk_user_id} on company {company.id}")
            raise ForbiddenError(
                "Forbidden: you do not have permission to create jobs for this company"
            )

        job_data = dict(job_data)
        if job_data.get("job_owner_id") is None:
            job_data["job_owner_id"] = context.identity_user_id
        if job_data.get("job_owner_recruiter_id") is None and context.recruiter_id:
            job_data["job_owner_recruiter_id"] = context.recruiter_id

        job = Job(**job_data)
        job.requirements = [
            JobRequirement(sort_order=i, **item)
            for i, item in enumerate(requirements or [])
        ]
        job.pre_screen_questions = [
            JobPreScreenQuestion(sort_order=i, **item)
            for i, item in enumerate(pre_screen_questions or [])
        ]

        self.db.add(job)
        await self.db.commit()

        logger.info(f"Created job {job.id}: {job.title} for company {company.id}")
        return await self.find_job(job.id, include=RELATED_RESOURCES.keys())

    async def update_job(
        self,
        job_id: UUID,
        updates: Dict[str, Any],
        clerk_user_id: str,
    ) -> Job:
        """
        Apply field updates to a job the caller may manage.

        Raises:
            JobNotFoundError: If no managed, non-deleted job matches
        """
        context = await self.resolve_context(clerk_user_id)

        result = await self.db.execute(
            select(Job).where(
                Job.id == job_id,
                Job.deleted_at.is_(None),
                self._manageable_clause(context),
            )
        )
        job = result.scalar_one_or_none()
        if not job:
            logger.warning(f"Update of job {job_id} by {clerk_user_id} matched no row")
            raise JobNotFoundError("Job not found or access denied")

        for field, value in updates.items():
            setattr(job, field, value)
        job.updated_at = datetime.utcnow()

        await self.db.commit()
        return job

    async def replace_requirements(self, job_id: UUID, requirements: List[Dict[str, Any]]) -> None:
        await self.db.execute(delete(JobRequirement).where(JobRequirement.job_id == job_id))
        self.db.add_all([
            JobRequirement(job_id=job_id, sort_order=i, **item)
            for i, item in enumerate(requirements)
        ])
        await self.db.commit()

    async def replace_pre_screen_questions(self, job_id: UUID, questions: List[Dict[str, Any]]) -> None:
        await self.db.execute(delete(JobPreScreenQuestion).where(JobPreScreenQuestion.job_id == job_id))
        self.db.add_all([
            JobPreScreenQuestion(job_id=job_id, sort_order=i, **item)
            for i, item in enumerate(questions)
        ])
        await self.db.commit()

    async def delete_job(self, job_id: UUID, clerk_user_id: str) -> Job:
        """
        Soft delete a job by stamping deleted_at.

        Raises:
            JobNotFoundError: If the job does not exist or is already deleted
            ForbiddenError: If the caller may not manage the company's jobs
        """
        context = await self.resolve_context(clerk_user_id)
        job = await self.find_job(job_id, include=["company"])
        if not job:
            raise JobNotFoundError("Job not found")

        if not await self.can_manage_company(context, job.company):
            logger.warning(f"Delete denied for {clerk_user_id} on job {job_id}")
            raise ForbiddenError(
                "Forbidden: you do not have permission to delete this job"
            )

        job.deleted_at = datetime.utcnow()
        job.updated_at = job.deleted_at
        await self.db.commit()

        logger.info(f"Soft deleted job {job_id}")
        return job

    # ============================================================
    # AUTHORIZATION
    # ============================================================

    async def can_manage_company(self, context: Optional[AccessContext], company: Company) -> bool:
        """
        Platform admins manage everything; organization members manage
        their organization's companies; recruiters need an active
        relationship with can_manage_company_jobs.
        """
        if context is None:
            return False
        if context.is_platform_admin:
            return True
        if company.identity_organization_id and company.identity_organization_id in context.organization_ids:
            return True
        if context.recruiter_id:
            result = await self.db.execute(
                select(RecruiterCompany.id).where(
                    RecruiterCompany.recruiter_id == context.recruiter_id,
                    RecruiterCompany.company_id == company.id,
                    RecruiterCompany.status == "active",
                    RecruiterCompany.can_manage_company_jobs.is_(True),
                )
            )
            return result.first() is not None
        return False

    def _manageable_clause(self, context: Optional[AccessContext]):
        """SQL condition equivalent to can_manage_company for Job rows."""
        if context is None:
            return false()
        if context.is_platform_admin:
            return Job.id.is_not(None)

        clauses = []
        if context.organization_ids:
            clauses.append(Job.company_id.in_(
                select(Company.id).where(
                    Company.identity_organization_id.in_(context.organization_ids)
                )
            ))
        if context.recruiter_id:
            clauses.append(Job.company_id.in_(
                select(RecruiterCompany.company_id).where(
                    RecruiterCompany.recruiter_id == context.recruiter_id,
                    RecruiterCompany.status == "active",
                    RecruiterCompany.can_manage_company_jobs.is_(True),
                )
            ))
        if not clauses:
            return false()
        return or_(*clauses)

    # ============================================================
    # QUERY HELPERS
    # ============================================================

    async def _assigned_job_ids(self, recruiter_id: UUID) -> set:
        """
        Jobs a recruiter owns, represents, or is working through
        applications and placements. Lookups run sequentially.
        """
        application_rows = await self.db.execute(
            select(Application.job_id).where(
                Application.candidate_recruiter_id == recruiter_id,
                Application.stage.in_(IN_PROGRESS_STAGES),
            )
        )
        placement_rows = await self.db.execute(
            select(Placement.job_id).where(
                or_(
                    Placement.candidate_recruiter_id == recruiter_id,
                    Placement.company_recruiter_id == recruiter_id,
                    Placement.job_owner_recruiter_id == recruiter_id,
                )
            )
        )
        owned_rows = await self.db.execute(
            select(Job.id).where(
                Job.deleted_at.is_(None),
                or_(
                    Job.job_owner_recruiter_id == recruiter_id,
                    Job.company_recruiter_id == recruiter_id,
                ),
            )
        )

        job_ids = set(application_rows.scalars().all())
        job_ids.update(placement_rows.scalars().all())
        job_ids.update(owned_rows.scalars().all())
        return job_ids

    def _search_clause(self, search: str):
        """Full-text match on PostgreSQL, substring match elsewhere."""
        if self.db.get_bind().dialect.name == "postgresql":
            document = func.to_tsvector(
                "english",
                func.concat_ws(" ", Job.title, Job.description, Job.location, Job.department),
            )
            return document.op("@@")(func.websearch_to_tsquery("english", search))

        pattern = f"%{search}%"
        return or_(
            Job.title.ilike(pattern),
            Job.description.ilike(pattern),
            Job.location.ilike(pattern),
            Job.department.ilike(pattern),
        )

    def _ordering(self, filters: JobFilters) -> list:
        # Relevance ranking is approximated by recency
        if filters.search:
            return [Job.created_at.desc(), Job.id]

        column = SORTABLE_COLUMNS.get(filters.sort_by or "created_at", Job.created_at)
        if (filters.sort_order or "desc").lower() == "asc":
            return [column.asc(), Job.id]
        return [column.desc(), Job.id]
