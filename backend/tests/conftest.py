"""
Pytest Configuration and Shared Fixtures

Each test gets its own SQLite database file (aiosqlite driver) with the
schema created and a few companies seeded.
"""

import os

os.environ["ENVIRONMENT"] = "test"

import pytest
import pytest_asyncio

from jobboard.db.database import create_database_engine, init_models
from jobboard.db.gateway import ConnectionGateway
from jobboard.repositories import JobRepository

COMPANIES = [
    ("acme", "Acme Corp", 120, "Makes everything", "https://acme.example/logo.png"),
    ("globex", "Globex", 900, "Global exports", None),
]


@pytest_asyncio.fixture
async def engine(tmp_path):
    """Engine over a fresh database file with the schema created."""
    engine = create_database_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'jobboard_test.db'}",
        echo=False
    )
    await init_models(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def gateway(engine):
    """Gateway over the test database, companies seeded."""
    gateway = ConnectionGateway(engine)
    for company in COMPANIES:
        await gateway.execute(
            "INSERT INTO companies (handle, name, num_employees, description, logo_url) "
            "VALUES (:p1, :p2, :p3, :p4, :p5)",
            company
        )
    return gateway


@pytest.fixture
def repository(gateway):
    return JobRepository(gateway)


@pytest.fixture()
def sample_job():
    """Sample job data for testing"""
    return {
        "title": "Backend Engineer",
        "salary": 120000,
        "equity": 0.02,
        "company_handle": "acme",
    }


@pytest_asyncio.fixture
async def three_jobs(repository):
    """Three jobs with salaries 50000, 70000 and 90000, in id order."""
    jobs = []
    for title, salary, equity, handle in [
        ("Junior Engineer", 50000, 0.0, "acme"),
        ("Data Analyst", 70000, 0.05, "globex"),
        ("Senior Engineer", 90000, 0.1, "acme"),
    ]:
        jobs.append(await repository.create({
            "title": title,
            "salary": salary,
            "equity": equity,
            "company_handle": handle,
        }))
    return jobs
