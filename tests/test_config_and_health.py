"""
Noteshelf — Configuration and Health Tests
"""

import pytest

from noteshelf.config import Settings


class TestSettings:

    def test_log_level_normalized(self):
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_log_level_rejected(self):
        with pytest.raises(ValueError):
            Settings(log_level="chatty")

    def test_cors_origins_list(self):
        s = Settings(cors_origins="http://a.test, http://b.test,")
        assert s.cors_origins_list == ["http://a.test", "http://b.test"]

    def test_is_sqlite(self):
        assert Settings(database_url="sqlite+aiosqlite:///./notes.db").is_sqlite
        assert not Settings(database_url="postgresql+asyncpg://u:p@h/db").is_sqlite

    def test_default_secret_flagged(self):
        with pytest.raises(ValueError, match="SESSION_SECRET"):
            Settings(session_secret="noteshelf-dev-secret").validate_required_for_production()

    def test_custom_secret_passes(self):
        Settings(session_secret="a-real-secret").validate_required_for_production()


class TestHealth:

    @pytest.mark.asyncio
    async def test_health_reports_database(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"

    @pytest.mark.asyncio
    async def test_health_needs_no_session(self, test_client):
        response = await test_client.get("/health")
        assert response.status_code != 401
