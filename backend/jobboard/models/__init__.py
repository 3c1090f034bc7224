"""Models package.

Export all models for easy importing
"""

from .job import Application, Company, Job

__all__ = [
    "Application",
    "Company",
    "Job",
]
