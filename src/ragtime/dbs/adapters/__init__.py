from ragtime.dbs.adapters.pgvector_document_adapter import PgVectorDocumentAdapter
from ragtime.dbs.adapters.postgres_secondary_source import PostgresSecondaryDataSource
from ragtime.dbs.adapters.api_secondary_source import ApiSecondaryDataSource
from ragtime.dbs.adapters.dynamodb_document_store import DynamoDBDocumentStore

__all__ = [
    "PgVectorDocumentAdapter",
    "PostgresSecondaryDataSource",
    "ApiSecondaryDataSource",
    "DynamoDBDocumentStore",
]
