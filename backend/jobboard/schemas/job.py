"""Pydantic Schemas for Repository Input/Output.

These schemas validate caller-supplied data before any SQL is built. The
update schema doubles as the column whitelist for partial updates.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..core.constants import JobLimits


class JobFilter(BaseModel):
    """Optional search criteria for job listings."""
    model_config = ConfigDict(extra='forbid')

    min_salary: int | None = Field(None, ge=JobLimits.MIN_SALARY)
    min_equity: float | None = Field(
        None, ge=JobLimits.MIN_EQUITY, le=JobLimits.MAX_EQUITY
    )
    search: str | None = None

    @field_validator('search')
    @classmethod
    def blank_search_is_absent(cls, v):
        if v is None:
            return None
        stripped = v.strip()
        return stripped or None

    @property
    def has_criteria(self) -> bool:
        return any(
            value is not None
            for value in (self.min_salary, self.min_equity, self.search)
        )


class JobBase(BaseModel):
    """Common job fields."""
    model_config = ConfigDict(extra='forbid')

    salary: int | None = Field(None, ge=JobLimits.MIN_SALARY)
    equity: float | None = Field(
        None, ge=JobLimits.MIN_EQUITY, le=JobLimits.MAX_EQUITY
    )


class JobCreate(JobBase):
    """Schema for creating a job."""
    title: str = Field(..., min_length=1, max_length=JobLimits.TITLE_MAX_LENGTH)
    company_handle: str = Field(..., min_length=1, max_length=JobLimits.HANDLE_MAX_LENGTH)


class JobUpdate(JobBase):
    """Schema for a partial job update.

    Only explicitly supplied fields are written; salary and equity may be
    cleared with None, title and company_handle may not.
    """
    title: str | None = Field(None, min_length=1, max_length=JobLimits.TITLE_MAX_LENGTH)
    company_handle: str | None = Field(
        None, min_length=1, max_length=JobLimits.HANDLE_MAX_LENGTH
    )

    @model_validator(mode='after')
    def required_columns_not_null(self):
        for name in ('title', 'company_handle'):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"'{name}' cannot be set to null")
        return self

    def to_fields(self) -> dict[str, Any]:
        """Sparse column -> value map of the supplied fields."""
        return self.model_dump(exclude_unset=True)


class JobPage(BaseModel):
    """One pagination window plus the unfiltered total row count."""
    jobs: list[dict[str, Any]]
    total: int
    offset: int
    count: int
