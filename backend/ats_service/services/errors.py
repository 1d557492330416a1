"""
Domain errors raised by the job service and repository.

Routes translate these into HTTP responses:
JobValidationError and ForbiddenError -> 400, JobNotFoundError -> 404.
"""


class JobServiceError(Exception):
    """Base class for deliberate job service failures"""
    pass


class JobValidationError(JobServiceError):
    """Input violates a field or cross-field rule"""
    pass


class ForbiddenError(JobServiceError):
    """Caller lacks the relationship required for the operation"""
    pass


class JobNotFoundError(JobServiceError):
    """Job does not exist, is soft-deleted, or is outside the caller's scope"""
    pass
