from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ragtime.models.analysis import EmbeddingChunk, EmbeddingStatistics, RelationalDocumentRecord


class AbstractDocumentMetadataStore(ABC):
    """Read/cleanup access to the pipeline's `documents` and `document_embeddings` tables"""

    @abstractmethod
    async def get_document_record(self, asset_id: str) -> Optional[RelationalDocumentRecord]:
        """`documents` row of the asset, or None when there is none."""
        pass

    @abstractmethod
    async def get_embedding_statistics(self, asset_id: str) -> EmbeddingStatistics:
        """Aggregate over the asset's embedding rows; all zero when there are none."""
        pass

    @abstractmethod
    async def get_chunk_previews(self, asset_id: str, limit: int = 10) -> List[EmbeddingChunk]:
        pass

    @abstractmethod
    async def delete_document_embeddings(self, asset_id: str) -> int:
        """Remove the asset's embedding rows and return how many were deleted."""
        pass

    @abstractmethod
    async def server_status(self) -> Dict[str, Any]:
        """Server version, pgvector extension version and the pipeline tables present."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release pooled connections."""
        pass
