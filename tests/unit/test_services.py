"""
Service Wiring and Status Service Unit Tests
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from psycopg2 import OperationalError

from factories import context_of
from ragtime.dbs.adapters import ApiSecondaryDataSource, PostgresSecondaryDataSource
from ragtime.errors import ApiError
from ragtime.services.factory import open_analysis_service
from ragtime.services.status_service import ApiStatusService, PostgresStatusService
from ragtime.utils.settings.core import AnalysisSettings, DatabaseSettings


@pytest.mark.asyncio
async def test_remote_source_reuses_api_client(api_client):
    settings = AnalysisSettings(source="remote", degrade_on_server_error=False)

    async with open_analysis_service(api_client, analysis_settings=settings) as service:
        assert isinstance(service.secondary_source, ApiSecondaryDataSource)
        assert service.secondary_source.client is api_client
        assert service.secondary_source.degrade_on_server_error is False


@pytest.mark.asyncio
async def test_direct_source_opens_database_adapter(api_client):
    adapter = MagicMock()
    settings = AnalysisSettings(source="direct", preview_threshold=5)

    with patch("ragtime.services.factory.open_document_adapter", context_of(adapter)):
        async with open_analysis_service(api_client, analysis_settings=settings) as service:
            assert isinstance(service.secondary_source, PostgresSecondaryDataSource)
            assert service.secondary_source.adapter is adapter
            assert service.secondary_source.preview_threshold == 5


def postgres_adapter(status=None, error=None) -> MagicMock:
    adapter = MagicMock()
    adapter.settings = DatabaseSettings(host="localhost", name="ragtime")
    adapter.server_status = AsyncMock(return_value=status, side_effect=error)
    return adapter


@pytest.mark.asyncio
async def test_postgres_status_healthy():
    adapter = postgres_adapter({
        "version": "PostgreSQL 15.4",
        "pgvector": "0.5.1",
        "tables": ["document_embeddings", "documents", "schema_migrations"],
        "missing_tables": [],
    })

    result = await PostgresStatusService(adapter).check_status()

    assert result.is_ok()
    assert result.unwrap()["status"] == "healthy"
    assert result.unwrap()["database"] == "ragtime"


@pytest.mark.asyncio
async def test_postgres_status_without_pgvector():
    adapter = postgres_adapter({"version": "PostgreSQL 15.4", "pgvector": None, "tables": [], "missing_tables": []})

    result = await PostgresStatusService(adapter).check_status()

    assert result.is_ok()
    assert result.unwrap()["status"] == "schema_error"
    assert result.unwrap()["message"] == "pgvector extension is not installed"


@pytest.mark.asyncio
async def test_postgres_status_connection_error():
    adapter = postgres_adapter(error=OperationalError("could not connect to server"))

    result = await PostgresStatusService(adapter).check_status()

    assert result.is_err()
    assert result.unwrap_err()["status"] == "connection_error"
    assert result.unwrap_err()["connected"] is False


@pytest.mark.asyncio
async def test_api_status_error_with_http_status(api_client):
    api_client.ping = AsyncMock(side_effect=ApiError("HTTP 403: Forbidden", status_code=403))

    result = await ApiStatusService(api_client).check_status()

    assert result.is_err()
    assert result.unwrap_err()["status"] == "api_error"


@pytest.mark.asyncio
async def test_api_status_healthy(api_client):
    api_client.ping = AsyncMock(return_value=200)

    result = await ApiStatusService(api_client).check_status()

    assert result.is_ok()
    assert result.unwrap()["status_code"] == 200
    assert result.unwrap()["tenant_id"] == "test-tenant"
