import asyncio
from typing import Optional

from loguru import logger

from ragtime.dbs.interfaces.metadata_store import AbstractDocumentMetadataStore
from ragtime.dbs.interfaces.secondary_source import SecondaryDataSource
from ragtime.models.analysis import (
    EmbeddingStatistics,
    RelationalDocumentRecord,
    SecondaryData,
    Section,
)
from ragtime.utils.results import capture


class PostgresSecondaryDataSource(SecondaryDataSource):
    """Reads the relational record and embedding statistics straight from PostgreSQL"""

    name = "postgresql"
    bounds_lookups = True

    def __init__(
        self,
        adapter: AbstractDocumentMetadataStore,
        preview_threshold: int = 10,
        section_timeout: Optional[float] = 15.0,
    ):
        self.adapter = adapter
        self.preview_threshold = preview_threshold
        self.section_timeout = section_timeout

    async def fetch(self, asset_id: str) -> SecondaryData:
        record_result, stats_result = await asyncio.gather(
            capture(
                self.adapter.get_document_record(asset_id),
                "Relational record query",
                timeout=self.section_timeout,
            ),
            capture(
                self._embedding_statistics(asset_id),
                "Embedding statistics query",
                timeout=self.section_timeout,
            ),
        )

        if record_result.is_ok():
            record = record_result.unwrap()
            relational = (
                Section[RelationalDocumentRecord].present(record)
                if record is not None
                else Section[RelationalDocumentRecord].absent()
            )
        else:
            relational = Section[RelationalDocumentRecord].failed(record_result.unwrap_err())

        if stats_result.is_ok():
            stats = stats_result.unwrap()
            embeddings = (
                Section[EmbeddingStatistics].present(stats)
                if stats.total_embeddings > 0
                else Section[EmbeddingStatistics].empty(stats)
            )
        else:
            embeddings = Section[EmbeddingStatistics].failed(stats_result.unwrap_err())

        logger.info(f"PostgreSQL lookup for {asset_id}: relational={relational.state.value}, embeddings={embeddings.state.value}")
        return SecondaryData(relational=relational, embeddings=embeddings)

    async def _embedding_statistics(self, asset_id: str) -> EmbeddingStatistics:
        stats = await self.adapter.get_embedding_statistics(asset_id)
        if 0 < stats.total_embeddings <= self.preview_threshold:
            stats.chunks = await self.adapter.get_chunk_previews(asset_id, limit=self.preview_threshold)
        return stats
