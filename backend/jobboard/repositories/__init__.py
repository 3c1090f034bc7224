"""Repository Layer.

Data access layer following Repository Pattern.
Separates data access logic from business logic.
"""

from .job_repository import JobRepository

__all__ = ['JobRepository']
