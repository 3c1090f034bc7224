"""SQLAlchemy Models for Jobs, Companies and Applications.

The repository issues its own SQL; these models are the source of the
schema created by ``init_models``.
"""

from sqlalchemy import (
    CheckConstraint,
    Column,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)

from ..core.constants import JobLimits, Tables
from ..db.database import Base


class Company(Base):
    """Employer referenced by jobs. Read-only from the repository."""

    __tablename__ = Tables.COMPANIES

    handle = Column(String(JobLimits.HANDLE_MAX_LENGTH), primary_key=True)
    name = Column(Text, nullable=False, unique=True)
    num_employees = Column(Integer, nullable=True)
    description = Column(Text, nullable=True)
    logo_url = Column(Text, nullable=True)

    def __repr__(self):
        return f"<Company {self.handle}>"


class Job(Base):
    """Postable position owned by a company."""

    __tablename__ = Tables.JOBS

    __table_args__ = (
        CheckConstraint(
            f'equity IS NULL OR equity <= {JobLimits.MAX_EQUITY}',
            name='check_equity_fraction'
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(JobLimits.TITLE_MAX_LENGTH), nullable=False)
    salary = Column(Integer, nullable=True)
    equity = Column(Float, nullable=True)
    # No ON DELETE action: deleting a company or a job with dependents is rejected
    company_handle = Column(
        String(JobLimits.HANDLE_MAX_LENGTH),
        ForeignKey(f'{Tables.COMPANIES}.handle'),
        nullable=False
    )

    def __repr__(self):
        return f"<Job {self.id}: {self.title}>"


class Application(Base):
    """A user's application to a job. At most one per (job_id, username)."""

    __tablename__ = Tables.APPLICATIONS

    job_id = Column(Integer, ForeignKey(f'{Tables.JOBS}.id'), primary_key=True)
    username = Column(String(JobLimits.HANDLE_MAX_LENGTH), primary_key=True)
    state = Column(Text, nullable=True)

    def __repr__(self):
        return f"<Application job={self.job_id} user={self.username} state={self.state}>"
