"""
Tests for engine creation, schema initialization and configuration.
"""

import pytest
from pydantic import ValidationError

from jobboard.core.config import Settings, settings
from jobboard.db.database import create_database_engine, get_gateway, init_models


class TestSettings:

    def test_log_level_normalized(self):
        assert Settings(LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"

    def test_unknown_log_level_rejected(self):
        with pytest.raises(ValidationError):
            Settings(LOG_LEVEL="LOUD")

    def test_postgres_url_uses_asyncpg(self):
        config = Settings(DATABASE_URL="postgresql://u:p@db:5432/jobs")
        assert config.async_database_url == "postgresql+asyncpg://u:p@db:5432/jobs"

    def test_other_urls_untouched(self):
        config = Settings(DATABASE_URL="sqlite+aiosqlite:///jobs.db")
        assert config.async_database_url == "sqlite+aiosqlite:///jobs.db"

    def test_environment_from_env(self):
        assert settings.ENVIRONMENT == "test"


class TestEngine:

    @pytest.mark.asyncio
    async def test_default_engine_uses_settings_url(self):
        engine = create_database_engine()
        try:
            assert engine.url.drivername == "postgresql+asyncpg"
            assert engine.echo == settings.DEBUG
        finally:
            await engine.dispose()

    def test_get_gateway_is_shared(self):
        assert get_gateway() is get_gateway()

    @pytest.mark.asyncio
    async def test_init_models_creates_tables(self, tmp_path):
        engine = create_database_engine(f"sqlite+aiosqlite:///{tmp_path / 'schema.db'}")
        try:
            await init_models(engine)
            # Running twice must not fail on existing tables
            await init_models(engine)

            async with engine.connect() as conn:
                result = await conn.exec_driver_sql(
                    "SELECT name FROM sqlite_master WHERE type = 'table' ORDER BY name"
                )
                tables = [row[0] for row in result]
        finally:
            await engine.dispose()

        assert tables == ["applications", "companies", "jobs"]

    @pytest.mark.asyncio
    async def test_sqlite_foreign_keys_enabled(self, engine):
        async with engine.connect() as conn:
            result = await conn.exec_driver_sql("PRAGMA foreign_keys")
            assert result.scalar() == 1
