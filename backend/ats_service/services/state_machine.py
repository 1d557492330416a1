"""
State machine and cross-field validators for job postings.
ALL job status changes must be validated through this module.
"""
import logging
from typing import Optional, Dict, Any

from ats_service.models.job import JobStatus
from ats_service.services.errors import JobValidationError, ForbiddenError

# Configure logger
logger = logging.getLogger(__name__)


HIRING_MANAGER_ROLE = "hiring_manager"

# Define allowed status transitions
ALLOWED_TRANSITIONS: Dict[JobStatus, list[JobStatus]] = {
    JobStatus.DRAFT: [JobStatus.ACTIVE, JobStatus.CLOSED],
    JobStatus.ACTIVE: [JobStatus.PAUSED, JobStatus.CLOSED, JobStatus.FILLED],
    JobStatus.PAUSED: [JobStatus.ACTIVE, JobStatus.CLOSED, JobStatus.FILLED],
    JobStatus.CLOSED: [JobStatus.ACTIVE, JobStatus.FILLED],  # Reopen or mark filled after close
    JobStatus.FILLED: [JobStatus.ACTIVE, JobStatus.CLOSED],  # Placement fell through, or archive
}


class InvalidTransitionError(JobValidationError):
    """Raised when a status change is not in ALLOWED_TRANSITIONS"""
    pass


def can_transition(from_status: str, to_status: str) -> bool:
    """Check if a transition is allowed. Unknown statuses are never allowed."""
    try:
        source = JobStatus(from_status)
        target = JobStatus(to_status)
    except ValueError:
        return False
    return target in ALLOWED_TRANSITIONS.get(source, [])


def validate_status_transition(
    current_status: str,
    new_status: str,
    user_role: Optional[str] = None
) -> None:
    """
    Validate a requested status change.

    Args:
        current_status: Status stored on the job
        new_status: Requested status
        user_role: Role reported by the caller (x-user-role header)

    Raises:
        InvalidTransitionError: If the edge is not in the transition table
        ForbiddenError: If a hiring manager tries to close the job
    """
    if new_status == current_status:
        return

    if not can_transition(current_status, new_status):
        raise InvalidTransitionError(
            f"Invalid status transition: {current_status} -> {new_status}"
        )

    if user_role == HIRING_MANAGER_ROLE and new_status == JobStatus.CLOSED.value:
        logger.warning(f"Hiring manager attempted to close job ({current_status} -> {new_status})")
        raise ForbiddenError("Forbidden: hiring managers cannot close jobs")


def validate_salary_range(
    updates: Dict[str, Any],
    existing: Optional[Dict[str, Any]] = None
) -> None:
    """
    Ensure salary_min <= salary_max for the effective values.

    A bound present in the update wins, even when it is None (cleared).
    A bound absent from the update falls back to the stored value:
    - both bounds in the update: compare them
    - only salary_min in the update: compare against the stored salary_max
    - only salary_max in the update: compare against the stored salary_min

    Raises:
        JobValidationError: If the effective minimum exceeds the maximum
    """
    existing = existing or {}
    if "salary_min" not in updates and "salary_max" not in updates:
        return

    low = updates["salary_min"] if "salary_min" in updates else existing.get("salary_min")
    high = updates["salary_max"] if "salary_max" in updates else existing.get("salary_max")

    if low is not None and high is not None and low > high:
        raise JobValidationError("salary_min cannot exceed salary_max")
