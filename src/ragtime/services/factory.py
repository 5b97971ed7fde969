"""
Scoped construction of the per-command resources.

Every CLI invocation opens its API client and, when configured, its database
pool through these context managers and releases them on exit. Nothing is
cached at module level.
"""

from contextlib import AsyncExitStack, asynccontextmanager
from typing import AsyncIterator, Optional

from loguru import logger

from ragtime.clients.api_client import RagtimeApiClient
from ragtime.dbs.adapters import (
    ApiSecondaryDataSource,
    PgVectorDocumentAdapter,
    PostgresSecondaryDataSource,
)
from ragtime.dbs.interfaces.secondary_source import SecondaryDataSource
from ragtime.integrations.aws.api_gateway import discover_api_url
from ragtime.integrations.aws.s3 import S3ObjectProbe
from ragtime.integrations.aws.secrets import resolve_database_settings
from ragtime.services.document_analysis_service import DocumentAnalysisService
from ragtime.utils.settings.core import AnalysisSettings, ApiSettings, AwsSettings, DatabaseSettings
from ragtime.utils.settings.factory import settings_factory


@asynccontextmanager
async def open_api_client(
    api_settings: Optional[ApiSettings] = None,
    aws_settings: Optional[AwsSettings] = None,
) -> AsyncIterator[RagtimeApiClient]:
    """API client for one command; the base URL is discovered when not configured"""
    api_settings = api_settings or settings_factory.create_api_settings()
    aws_settings = aws_settings or settings_factory.create_aws_settings()
    base_url = await discover_api_url(api_settings, aws_settings)
    async with RagtimeApiClient.from_settings(base_url, api_settings) as client:
        yield client


@asynccontextmanager
async def open_document_adapter(
    db_settings: Optional[DatabaseSettings] = None,
    aws_settings: Optional[AwsSettings] = None,
) -> AsyncIterator[PgVectorDocumentAdapter]:
    """PostgreSQL adapter with credentials resolved through Secrets Manager"""
    db_settings = db_settings or settings_factory.create_database_settings()
    aws_settings = aws_settings or settings_factory.create_aws_settings()
    resolved = await resolve_database_settings(db_settings, aws_settings)
    async with PgVectorDocumentAdapter(resolved) as adapter:
        yield adapter


@asynccontextmanager
async def open_analysis_service(
    api_client: RagtimeApiClient,
    analysis_settings: Optional[AnalysisSettings] = None,
    aws_settings: Optional[AwsSettings] = None,
    db_settings: Optional[DatabaseSettings] = None,
) -> AsyncIterator[DocumentAnalysisService]:
    """
    Analysis service wired to the secondary source selected by ANALYSIS_SOURCE.

    `direct` opens a database pool for the lifetime of the context; `remote`
    reuses the API client for the joint analysis endpoint.
    """
    analysis_settings = analysis_settings or settings_factory.create_analysis_settings()
    aws_settings = aws_settings or settings_factory.create_aws_settings()

    async with AsyncExitStack() as stack:
        source: SecondaryDataSource
        if analysis_settings.source == "direct":
            adapter = await stack.enter_async_context(open_document_adapter(db_settings, aws_settings))
            source = PostgresSecondaryDataSource(
                adapter,
                preview_threshold=analysis_settings.preview_threshold,
                section_timeout=analysis_settings.section_timeout,
            )
        else:
            source = ApiSecondaryDataSource(
                api_client,
                degrade_on_server_error=analysis_settings.degrade_on_server_error,
            )
        logger.debug(f"Using {source.name} as secondary data source")

        yield DocumentAnalysisService(
            api_client=api_client,
            object_probe=S3ObjectProbe(aws_settings),
            secondary_source=source,
            settings=analysis_settings,
        )
