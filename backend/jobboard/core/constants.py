"""Application Constants.

Centralized constants used throughout the data-access core.
"""

# ============================================================================
# TABLE NAMES
# ============================================================================

class Tables:
    """Relational table names."""
    JOBS = "jobs"
    COMPANIES = "companies"
    APPLICATIONS = "applications"


# ============================================================================
# APPLICATION STATE CONSTANTS
# ============================================================================

class ApplicationState:
    """Common application state values.

    State is opaque to the repository; these are the values callers use
    by convention and nothing validates against them.
    """
    INTERESTED = "interested"
    APPLIED = "applied"
    ACCEPTED = "accepted"
    REJECTED = "rejected"

    ALL_STATES = [
        INTERESTED,
        APPLIED,
        ACCEPTED,
        REJECTED,
    ]


# ============================================================================
# PAGINATION CONSTANTS
# ============================================================================

class Pagination:
    """Pagination defaults. No upper bound is applied here."""
    DEFAULT_OFFSET = 0
    DEFAULT_COUNT = 20


# ============================================================================
# JOB FIELD LIMITS
# ============================================================================

class JobLimits:
    """Bounds for job column values."""
    MIN_SALARY = 0
    MIN_EQUITY = 0.0
    MAX_EQUITY = 1.0
    TITLE_MAX_LENGTH = 255
    HANDLE_MAX_LENGTH = 64


# ============================================================================
# ERROR MESSAGES
# ============================================================================

class ErrorMessages:
    """Error message templates."""
    JOB_NOT_FOUND = "There exists no job '{job_id}'"
    APPLICATION_NOT_FOUND = "There exists no application for job '{job_id}' by '{username}'"
    EMPTY_UPDATE = "No fields supplied to update"
    NEGATIVE_PAGINATION = "offset and count must be non-negative integers (got offset={offset}, count={count})"
    DUPLICATE_APPLICATION = "'{username}' has already applied to job '{job_id}'"
    JOB_HAS_APPLICATIONS = "Job '{job_id}' still has applications and cannot be deleted"


# ============================================================================
# STORAGE CONSTRAINT CLASSIFICATION
# ============================================================================

class ConflictReason:
    """Kinds of storage constraint violation."""
    DUPLICATE = "duplicate"
    REFERENCE = "reference"
    CHECK = "check"

    # Lower-cased fragments of PostgreSQL and SQLite constraint error text
    PATTERNS = {
        DUPLICATE: ('duplicate key', 'unique constraint'),
        REFERENCE: ('foreign key',),
        CHECK: ('check constraint',),
    }
