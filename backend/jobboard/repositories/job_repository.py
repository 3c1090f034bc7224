"""Job Repository.

Data access layer for jobs and job applications. Builds parameterized SQL
with the statement builders and runs it through the ConnectionGateway.
Missing rows are reported as NotFoundError; the repository never returns an
empty/default result in place of an error and performs no retries.

Table and column names are read from the ORM tables in ``models`` so the
SQL here follows the schema ``init_models`` creates.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, TypeVar

from pydantic import BaseModel, ValidationError as PydanticValidationError

from ..core.constants import ConflictReason, ErrorMessages, Pagination
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..core.logging import get_logger
from ..db.gateway import ConnectionGateway, Row
from ..db.query_builder import build_job_filter_query, build_partial_update, placeholder
from ..models import Application, Company, Job
from ..schemas.job import JobCreate, JobFilter, JobPage, JobUpdate

logger = get_logger(__name__)

SchemaT = TypeVar('SchemaT', bound=BaseModel)

JOBS = Job.__tablename__
COMPANIES = Company.__tablename__
APPLICATIONS = Application.__tablename__

JOB_COLUMNS = tuple(column.name for column in Job.__table__.columns)
INSERT_COLUMNS = tuple(
    column.name for column in Job.__table__.columns if not column.primary_key
)
COMPANY_FIELDS = tuple(
    column.name for column in Company.__table__.columns if not column.primary_key
)
APPLICATION_COLUMNS = tuple(column.name for column in Application.__table__.columns)


def column_list(names: Iterable[str], alias: str | None = None) -> str:
    """Comma-separated column names, optionally qualified by a table alias."""
    prefix = f"{alias}." if alias else ""
    return ", ".join(f"{prefix}{name}" for name in names)


# :p1 is always the acting username
JOBS_FOR_USER = f"""
    SELECT {column_list(JOB_COLUMNS, 'j')},
           c.name AS company_name, a.state
      FROM {JOBS} AS j
        LEFT JOIN {COMPANIES} AS c ON j.company_handle = c.handle
        LEFT OUTER JOIN {APPLICATIONS} AS a
          ON a.job_id = j.id AND a.username = :p1"""


def _coerce(schema: type[SchemaT], data: SchemaT | Mapping[str, Any]) -> SchemaT:
    """Validate caller data into ``schema``, raising our ValidationError."""
    if isinstance(data, schema):
        return data
    try:
        return schema.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid {schema.__name__}: {e}") from e


def _job_not_found(job_id: int) -> NotFoundError:
    logger.warning("Job not found", extra={'job_id': job_id})
    return NotFoundError(
        ErrorMessages.JOB_NOT_FOUND.format(job_id=job_id),
        resource='job',
        identifier=job_id
    )


class JobRepository:
    """Repository for Job and Application data access operations."""

    def __init__(self, gateway: ConnectionGateway):
        self.gateway = gateway

    async def list_for_user(self, username: str) -> list[Row]:
        """All jobs with ``username``'s application state (None when not applied).

        Args:
            username: Acting username

        Returns:
            Rows ordered by job id
        """
        return await self.gateway.execute(f"{JOBS_FOR_USER} ORDER BY j.id", [username])

    async def search(
        self,
        criteria: JobFilter | Mapping[str, Any],
        username: str
    ) -> list[Row]:
        """Jobs matching every supplied criterion, with ``username``'s state.

        Args:
            criteria: JobFilter or a mapping of min_salary/min_equity/search
            username: Acting username

        Returns:
            Matching rows ordered by job id
        """
        criteria = _coerce(JobFilter, criteria)
        statement, params = build_job_filter_query(
            JOBS_FOR_USER, criteria, username, order_by="j.id"
        )
        return await self.gateway.execute(statement, params)

    async def list_applied(self, username: str) -> list[Row]:
        """Only the jobs ``username`` has an application for."""
        return await self.gateway.execute(
            f"""
            SELECT {column_list(JOB_COLUMNS, 'j')},
                   c.name AS company_name, a.state
              FROM {JOBS} AS j
                JOIN {APPLICATIONS} AS a ON a.job_id = j.id
                LEFT JOIN {COMPANIES} AS c ON j.company_handle = c.handle
              WHERE a.username = :p1
              ORDER BY j.id""",
            [username]
        )

    async def page(
        self,
        offset: int = Pagination.DEFAULT_OFFSET,
        count: int = Pagination.DEFAULT_COUNT,
        username: str | None = None
    ) -> JobPage:
        """One window of jobs ordered by id, plus the total job count.

        Args:
            offset: Rows to skip (>= 0)
            count: Maximum rows to return (>= 0)
            username: Acting username for the application join (None joins no state)

        Returns:
            JobPage with the window and the unfiltered total

        Raises:
            ValidationError: If offset or count is negative or not an integer
        """
        if (
            not isinstance(offset, int) or not isinstance(count, int)
            or isinstance(offset, bool) or isinstance(count, bool)
            or offset < 0 or count < 0
        ):
            raise ValidationError(
                ErrorMessages.NEGATIVE_PAGINATION.format(offset=offset, count=count)
            )

        async with self.gateway.transaction() as tx:
            jobs = await tx.execute(
                f"{JOBS_FOR_USER} ORDER BY j.id LIMIT :p2 OFFSET :p3",
                [username, count, offset]
            )
            total_rows = await tx.execute(f"SELECT COUNT(*) AS total FROM {JOBS}")

        return JobPage(
            jobs=jobs,
            total=int(total_rows[0]['total']),
            offset=offset,
            count=count
        )

    async def get_by_id(self, job_id: int) -> Row:
        """One job with its company embedded under ``company``.

        Raises:
            NotFoundError: If no job has that id
        """
        rows = await self.gateway.execute(
            f"""
            SELECT {column_list(JOB_COLUMNS, 'j')},
                   {column_list(COMPANY_FIELDS, 'c')}
              FROM {JOBS} AS j
                JOIN {COMPANIES} AS c ON j.company_handle = c.handle
              WHERE j.id = :p1""",
            [job_id]
        )
        if not rows:
            raise _job_not_found(job_id)

        row = rows[0]
        job = {key: value for key, value in row.items() if key not in COMPANY_FIELDS}
        job['company'] = {key: row[key] for key in COMPANY_FIELDS}
        return job

    async def create(self, data: JobCreate | Mapping[str, Any]) -> Row:
        """Insert a job and return it with its generated id.

        Raises:
            ValidationError: If data is invalid
            ConflictError: If company_handle references no company
        """
        job = _coerce(JobCreate, data)
        values = ", ".join(placeholder(index) for index in range(1, len(INSERT_COLUMNS) + 1))
        rows = await self.gateway.execute(
            f"""
            INSERT INTO {JOBS} ({column_list(INSERT_COLUMNS)})
              VALUES ({values})
              RETURNING {column_list(JOB_COLUMNS)}""",
            [getattr(job, name) for name in INSERT_COLUMNS]
        )
        created = rows[0]
        logger.info(
            "Job created",
            extra={'job_id': created['id'], 'company_handle': created['company_handle']}
        )
        return created

    async def update(self, job_id: int, data: JobUpdate | Mapping[str, Any]) -> Row:
        """Partially update a job; only supplied fields change.

        Raises:
            ValidationError: If data is empty or names an unknown column
            NotFoundError: If no job has that id
        """
        fields = _coerce(JobUpdate, data).to_fields()
        statement, params = build_partial_update(
            JOBS, fields, "id", job_id, returning=column_list(JOB_COLUMNS)
        )

        rows = await self.gateway.execute(statement, params)
        if not rows:
            raise _job_not_found(job_id)

        logger.info("Job updated", extra={'job_id': job_id, 'fields': list(fields)})
        return rows[0]

    async def delete(self, job_id: int) -> None:
        """Delete a job.

        Raises:
            NotFoundError: If no job has that id
            ConflictError: If applications still reference the job
        """
        try:
            rows = await self.gateway.execute(
                f"DELETE FROM {JOBS} WHERE id = :p1 RETURNING id",
                [job_id]
            )
        except ConflictError as e:
            if e.reason != ConflictReason.REFERENCE:
                raise
            raise ConflictError(
                ErrorMessages.JOB_HAS_APPLICATIONS.format(job_id=job_id),
                reason=e.reason
            ) from e

        if not rows:
            raise _job_not_found(job_id)

        logger.info("Job deleted", extra={'job_id': job_id})

    async def apply(self, job_id: int, username: str, state: str | None) -> Row:
        """Record ``username``'s application to a job.

        The existence check and the insert share one transaction.

        Raises:
            NotFoundError: If no job has that id (nothing is inserted)
            ConflictError: If ``username`` already applied to this job (reason
                DUPLICATE); other constraint failures keep their own reason
        """
        try:
            async with self.gateway.transaction() as tx:
                found = await tx.execute(
                    f"SELECT id FROM {JOBS} WHERE id = :p1",
                    [job_id]
                )
                if not found:
                    raise _job_not_found(job_id)

                rows = await tx.execute(
                    f"""
                    INSERT INTO {APPLICATIONS} ({column_list(APPLICATION_COLUMNS)})
                      VALUES (:p1, :p2, :p3)
                      RETURNING {column_list(APPLICATION_COLUMNS)}""",
                    [job_id, username, state]
                )
        except ConflictError as e:
            # A reference failure here means the job vanished after the check
            if e.reason != ConflictReason.DUPLICATE:
                raise
            raise ConflictError(
                ErrorMessages.DUPLICATE_APPLICATION.format(job_id=job_id, username=username),
                reason=e.reason
            ) from e

        logger.info(
            "Application recorded",
            extra={'job_id': job_id, 'username': username, 'state': state}
        )
        return rows[0]

    async def withdraw(self, job_id: int, username: str) -> None:
        """Remove ``username``'s application to a job.

        Raises:
            NotFoundError: If there is no such application
        """
        rows = await self.gateway.execute(
            f"""
            DELETE FROM {APPLICATIONS}
              WHERE job_id = :p1 AND username = :p2
              RETURNING job_id""",
            [job_id, username]
        )
        if not rows:
            logger.warning(
                "Application not found",
                extra={'job_id': job_id, 'username': username}
            )
            raise NotFoundError(
                ErrorMessages.APPLICATION_NOT_FOUND.format(job_id=job_id, username=username),
                resource='application',
                identifier=(job_id, username)
            )

        logger.info("Application withdrawn", extra={'job_id': job_id, 'username': username})
