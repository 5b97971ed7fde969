import asyncio
import threading
from typing import Any, Dict, List, Optional

from loguru import logger
from psycopg2.extras import RealDictCursor
from psycopg2.pool import ThreadedConnectionPool

from ragtime.dbs.interfaces.metadata_store import AbstractDocumentMetadataStore
from ragtime.models.analysis import EmbeddingChunk, EmbeddingStatistics, RelationalDocumentRecord
from ragtime.utils.settings.core import DatabaseSettings

EXPECTED_TABLES = ("document_embeddings", "documents", "schema_migrations")

DOCUMENT_RECORD_QUERY = """
    SELECT
        asset_id,
        original_filename,
        content_type,
        file_size,
        total_chunks,
        status,
        error_message,
        correlation_id,
        created_at
    FROM documents
    WHERE asset_id = %(asset_id)s
"""

EMBEDDING_STATS_QUERY = """
    SELECT
        COUNT(*) AS total_embeddings,
        COUNT(DISTINCT chunk_index) AS unique_chunks,
        AVG(LENGTH(content)) AS avg_content_length,
        MIN(created_at) AS first_embedding,
        MAX(created_at) AS last_embedding
    FROM document_embeddings
    WHERE asset_id = %(asset_id)s
"""

CHUNK_PREVIEW_QUERY = """
    SELECT chunk_index, content, metadata, created_at
    FROM document_embeddings
    WHERE asset_id = %(asset_id)s
    ORDER BY chunk_index
    LIMIT %(limit)s
"""


class PgVectorDocumentAdapter(AbstractDocumentMetadataStore):
    """
    PostgreSQL adapter for the `documents` and `document_embeddings` tables.

    The connection pool is created on first use and released by `close()`;
    use the adapter as an async context manager to scope it to one command or
    one Lambda invocation.
    """

    def __init__(self, settings: DatabaseSettings):
        self.settings = settings
        self._pool: Optional[ThreadedConnectionPool] = None
        self._pool_lock = threading.Lock()

    async def __aenter__(self) -> "PgVectorDocumentAdapter":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def _get_pool(self) -> ThreadedConnectionPool:
        with self._pool_lock:
            if self._pool is None:
                self._pool = ThreadedConnectionPool(
                    minconn=1,
                    maxconn=self.settings.pool_max,
                    **self.settings.connection_kwargs,
                )
                logger.info(f"Created connection pool for database: {self.settings.name}@{self.settings.host}")
            return self._pool

    def _run(self, query: str, params: Optional[Dict[str, Any]], fetch: str) -> Any:
        pool = self._get_pool()
        conn = pool.getconn()
        try:
            with conn.cursor(cursor_factory=RealDictCursor) as cursor:
                cursor.execute(query, params)
                if fetch == "all":
                    result: Any = [dict(row) for row in cursor.fetchall()]
                elif fetch == "one":
                    row = cursor.fetchone()
                    result = dict(row) if row else None
                elif fetch == "scalar":
                    row = cursor.fetchone()
                    result = next(iter(row.values())) if row else None
                else:
                    result = cursor.rowcount
            conn.commit()
            return result
        except Exception as e:
            conn.rollback()
            logger.error(f"Error executing query: {e}")
            logger.error(f"Query: {query.strip()}")
            logger.error(f"Params: {params}")
            raise
        finally:
            pool.putconn(conn)

    async def _execute(self, query: str, params: Optional[Dict[str, Any]], fetch: str) -> Any:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._run, query, params, fetch)

    async def execute_query(
        self,
        query: str,
        params: Optional[Dict[str, Any]] = None
    ) -> List[Dict[str, Any]]:
        """Execute a SQL query and return results as list of dictionaries."""
        return await self._execute(query, params, "all")

    async def execute_query_single(
        self,
        query: str,
        params: Optional[Dict[str, Any]] = None
    ) -> Optional[Dict[str, Any]]:
        """Execute a SQL query and return single result or None."""
        return await self._execute(query, params, "one")

    async def execute_query_scalar(
        self,
        query: str,
        params: Optional[Dict[str, Any]] = None
    ) -> Any:
        """Execute a SQL query and return single scalar value."""
        return await self._execute(query, params, "scalar")

    async def execute_update(self, query: str, params: Optional[Dict[str, Any]] = None) -> int:
        """Execute a write statement and return the affected row count."""
        return await self._execute(query, params, "rowcount")

    async def health_check(self) -> bool:
        """Check if the metadata store connection is healthy."""
        try:
            result = await self.execute_query_scalar("SELECT 1")
            return result == 1
        except Exception as e:
            logger.error(f"Health check failed: {e}")
            return False

    async def close(self) -> None:
        with self._pool_lock:
            pool, self._pool = self._pool, None
        if pool is not None:
            pool.closeall()
            logger.info("Closed database connection pool")

    async def get_document_record(self, asset_id: str) -> Optional[RelationalDocumentRecord]:
        """`documents` row for the asset, or None when there is none"""
        row = await self.execute_query_single(DOCUMENT_RECORD_QUERY, {"asset_id": asset_id})
        if row is None:
            return None
        return RelationalDocumentRecord.model_validate(row)

    async def get_embedding_statistics(self, asset_id: str) -> EmbeddingStatistics:
        """Counts, mean content length and timestamp range of the asset's embedding rows"""
        row = await self.execute_query_single(EMBEDDING_STATS_QUERY, {"asset_id": asset_id}) or {}
        total = int(row.get("total_embeddings") or 0)
        if total == 0:
            return EmbeddingStatistics()
        return EmbeddingStatistics(
            total_embeddings=total,
            unique_chunks=int(row.get("unique_chunks") or 0),
            avg_content_length=float(row.get("avg_content_length") or 0),
            first_embedding=row.get("first_embedding"),
            last_embedding=row.get("last_embedding"),
        )

    async def get_chunk_previews(self, asset_id: str, limit: int = 10) -> List[EmbeddingChunk]:
        rows = await self.execute_query(CHUNK_PREVIEW_QUERY, {"asset_id": asset_id, "limit": limit})
        return [
            EmbeddingChunk(
                chunk_index=row["chunk_index"],
                content=row["content"],
                metadata=row.get("metadata") or {},
                created_at=row.get("created_at"),
            )
            for row in rows
        ]

    async def delete_document_embeddings(self, asset_id: str) -> int:
        deleted = await self.execute_update(
            "DELETE FROM document_embeddings WHERE asset_id = %(asset_id)s",
            {"asset_id": asset_id},
        )
        logger.info(f"Deleted {deleted} embeddings for document {asset_id}")
        return deleted

    async def server_status(self) -> Dict[str, Any]:
        """Server version, pgvector availability and presence of the pipeline tables"""
        version = await self.execute_query_scalar("SELECT version()")
        vector_version = await self.execute_query_scalar(
            "SELECT extversion FROM pg_extension WHERE extname = 'vector'"
        )
        rows = await self.execute_query(
            """
            SELECT table_name
            FROM information_schema.tables
            WHERE table_schema = 'public' AND table_name = ANY(%(tables)s)
            ORDER BY table_name
            """,
            {"tables": list(EXPECTED_TABLES)},
        )
        tables = [row["table_name"] for row in rows]
        return {
            "version": version,
            "pgvector": vector_version,
            "tables": tables,
            "missing_tables": [t for t in EXPECTED_TABLES if t not in tables],
        }
