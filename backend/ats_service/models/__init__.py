"""Database models"""
from ats_service.models.company import Company
from ats_service.models.job import (
    Job,
    JobStatus,
    JobRequirement,
    JobPreScreenQuestion,
)
from ats_service.models.application import Application, ApplicationStage
from ats_service.models.placement import Placement
from ats_service.models.recruiter_company import RecruiterCompany
from ats_service.models.identity import User, Membership, Recruiter, Candidate

__all__ = [
    "Company",
    "Job",
    "JobStatus",
    "JobRequirement",
    "JobPreScreenQuestion",
    "Application",
    "ApplicationStage",
    "Placement",
    "RecruiterCompany",
    "User",
    "Membership",
    "Recruiter",
    "Candidate",
]
