"""
Tests for the job state machine and salary validation.

Validates:
- Every edge of the transition table is allowed
- Every edge outside the table raises InvalidTransitionError
- Same-status updates are a no-op
- Hiring managers cannot close jobs
- salary_min <= salary_max across update-only and mixed cases
"""
import pytest

from ats_service.models.job import JobStatus
from ats_service.services.errors import ForbiddenError, JobValidationError
from ats_service.services.state_machine import (
    ALLOWED_TRANSITIONS,
    InvalidTransitionError,
    can_transition,
    validate_salary_range,
    validate_status_transition,
)


ALLOWED = [
    ("draft", "active"),
    ("draft", "closed"),
    ("active", "paused"),
    ("active", "closed"),
    ("active", "filled"),
    ("paused", "active"),
    ("paused", "closed"),
    ("paused", "filled"),
    ("closed", "active"),
    ("closed", "filled"),
    ("filled", "active"),
    ("filled", "closed"),
]

ALL_STATUSES = [s.value for s in JobStatus]

FORBIDDEN = [
    (source, target)
    for source in ALL_STATUSES
    for target in ALL_STATUSES
    if source != target and (source, target) not in ALLOWED
]


# =============================================================================
# Transition table
# =============================================================================

def test_table_covers_every_status():
    assert set(ALLOWED_TRANSITIONS.keys()) == set(JobStatus)


def test_table_matches_expected_edges():
    edges = {
        (source.value, target.value)
        for source, targets in ALLOWED_TRANSITIONS.items()
        for target in targets
    }
    assert edges == set(ALLOWED)


@pytest.mark.parametrize("source,target", ALLOWED)
def test_allowed_transition(source, target):
    assert can_transition(source, target) is True
    validate_status_transition(source, target)


@pytest.mark.parametrize("source,target", FORBIDDEN)
def test_forbidden_transition(source, target):
    assert can_transition(source, target) is False
    with pytest.raises(InvalidTransitionError) as exc_info:
        validate_status_transition(source, target)
    assert str(exc_info.value) == f"Invalid status transition: {source} -> {target}"


def test_draft_to_filled_message():
    with pytest.raises(InvalidTransitionError, match="Invalid status transition: draft -> filled"):
        validate_status_transition("draft", "filled")


def test_same_status_is_noop():
    for status in ALL_STATUSES:
        validate_status_transition(status, status)


def test_unknown_status_is_not_transitionable():
    assert can_transition("active", "archived") is False
    with pytest.raises(InvalidTransitionError):
        validate_status_transition("active", "archived")


def test_invalid_transition_is_validation_error():
    """Routes map validation errors to 400."""
    assert issubclass(InvalidTransitionError, JobValidationError)


# =============================================================================
# Role restrictions
# =============================================================================

@pytest.mark.parametrize("source", ["draft", "active", "paused", "filled"])
def test_hiring_manager_cannot_close(source):
    with pytest.raises(ForbiddenError):
        validate_status_transition(source, "closed", user_role="hiring_manager")


def test_hiring_manager_other_transitions_allowed():
    validate_status_transition("active", "paused", user_role="hiring_manager")
    validate_status_transition("paused", "filled", user_role="hiring_manager")


def test_company_admin_can_close():
    validate_status_transition("active", "closed", user_role="company_admin")


def test_hiring_manager_invalid_edge_reports_transition_first():
    with pytest.raises(InvalidTransitionError):
        validate_status_transition("draft", "filled", user_role="hiring_manager")


# =============================================================================
# Salary range
# =============================================================================

def test_salary_both_in_update_valid():
    validate_salary_range({"salary_min": 100000, "salary_max": 150000})


def test_salary_equal_bounds_valid():
    validate_salary_range({"salary_min": 120000, "salary_max": 120000})


def test_salary_both_in_update_inverted():
    with pytest.raises(JobValidationError, match="salary_min cannot exceed salary_max"):
        validate_salary_range(
            {"salary_min": 200000, "salary_max": 150000},
            {"salary_min": 0, "salary_max": 999999},
        )


def test_salary_min_only_checked_against_existing_max():
    existing = {"salary_min": 90000, "salary_max": 120000}
    validate_salary_range({"salary_min": 110000}, existing)
    with pytest.raises(JobValidationError, match="salary_min cannot exceed salary_max"):
        validate_salary_range({"salary_min": 130000}, existing)


def test_salary_max_only_checked_against_existing_min():
    existing = {"salary_min": 90000, "salary_max": 120000}
    validate_salary_range({"salary_max": 95000}, existing)
    with pytest.raises(JobValidationError, match="salary_min cannot exceed salary_max"):
        validate_salary_range({"salary_max": 80000}, existing)


def test_salary_single_bound_without_stored_counterpart():
    validate_salary_range({"salary_min": 500000}, {"salary_min": None, "salary_max": None})
    validate_salary_range({"salary_max": 1}, {})


def test_salary_untouched_update_skips_check():
    # Stored values are not re-validated when the update does not touch salary
    validate_salary_range({"title": "New"}, {"salary_min": 200, "salary_max": 100})


def test_salary_cleared_min_skips_stored_min():
    existing = {"salary_min": 100, "salary_max": 200}
    validate_salary_range({"salary_min": None, "salary_max": 50}, existing)


def test_salary_cleared_max_skips_stored_max():
    existing = {"salary_min": 100, "salary_max": 200}
    validate_salary_range({"salary_min": 500, "salary_max": None}, existing)


def test_salary_absent_bound_still_uses_stored_value():
    existing = {"salary_min": 100, "salary_max": None}
    validate_salary_range({"salary_max": None}, existing)
    with pytest.raises(JobValidationError, match="salary_min cannot exceed salary_max"):
        validate_salary_range({"salary_max": 50}, existing)
