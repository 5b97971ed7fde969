from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from ragtime.dbs.adapters.pgvector_document_adapter import PgVectorDocumentAdapter
from ragtime.errors import ConfigurationError
from ragtime.integrations.aws.secrets import resolve_database_settings
from ragtime.utils.settings.core import AwsSettings, DatabaseSettings, LambdaSettings
from ragtime.utils.settings.factory import settings_factory


def lambda_database_settings(lambda_settings: LambdaSettings) -> DatabaseSettings:
    if not lambda_settings.database_secret_name:
        raise ConfigurationError("DATABASE_SECRET_NAME environment variable not set")
    return DatabaseSettings(
        host=lambda_settings.database_cluster_endpoint,
        name=lambda_settings.database_name,
        secret_name=lambda_settings.database_secret_name,
        sslmode="require",
    )


@asynccontextmanager
async def open_lambda_adapter(
    lambda_settings: Optional[LambdaSettings] = None,
    aws_settings: Optional[AwsSettings] = None,
) -> AsyncIterator[PgVectorDocumentAdapter]:
    """pgvector adapter scoped to one invocation; credentials must come from Secrets Manager"""
    lambda_settings = lambda_settings or settings_factory.create_lambda_settings()
    aws_settings = aws_settings or settings_factory.create_aws_settings()
    db_settings = await resolve_database_settings(
        lambda_database_settings(lambda_settings),
        aws_settings,
        require_secret=True,
    )
    async with PgVectorDocumentAdapter(db_settings) as adapter:
        yield adapter
