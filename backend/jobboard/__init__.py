"""Jobboard data-access core.

Query construction and the Job/Application repository for the job-board backend.
"""

__version__ = "1.0.0"
