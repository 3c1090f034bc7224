"""Pydantic schemas for repository input and output."""

from .job import JobCreate, JobFilter, JobPage, JobUpdate

__all__ = [
    "JobCreate",
    "JobFilter",
    "JobPage",
    "JobUpdate",
]
