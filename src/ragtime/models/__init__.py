"""Domain models for documents and pipeline analysis"""

from ragtime.models.document import (
    Document,
    DocumentList,
    DocumentStatus,
    StorageLocation,
)
from ragtime.models.analysis import (
    AnalysisReport,
    EmbeddingChunk,
    EmbeddingStatistics,
    ObjectInfo,
    PipelineVerdict,
    RelationalDocumentRecord,
    SecondaryData,
    Section,
    SectionState,
)

__all__ = [
    "Document",
    "DocumentList",
    "DocumentStatus",
    "StorageLocation",
    "AnalysisReport",
    "EmbeddingChunk",
    "EmbeddingStatistics",
    "ObjectInfo",
    "PipelineVerdict",
    "RelationalDocumentRecord",
    "SecondaryData",
    "Section",
    "SectionState",
]
