"""
Pipeline analysis models.

Row models (parsed from PostgreSQL rows or the analysis endpoint):
- ObjectInfo: result of an S3 HEAD probe
- RelationalDocumentRecord: `documents` row tracking chunking/ingestion state
- EmbeddingChunk: one `document_embeddings` row, used for previews
- EmbeddingStatistics: aggregate over a document's embedding rows

Derived, non-persisted models:
- PipelineVerdict / SectionState enums
- Section: one secondary lookup outcome
- SecondaryData: relational + embeddings sections from a SecondaryDataSource
- AnalysisReport: everything the presentation layer renders
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from ragtime.models.document import Document

T = TypeVar("T")


class ObjectInfo(BaseModel):
    """Outcome of checking an object in S3"""
    exists: bool
    size: Optional[int] = None
    last_modified: Optional[datetime] = None
    content_type: Optional[str] = None
    error: Optional[str] = None
    not_found: bool = Field(default=False, description="True only when S3 answered 404")


class RelationalDocumentRecord(BaseModel):
    """Secondary record from the `documents` table"""
    model_config = ConfigDict(extra="ignore")

    asset_id: Optional[str] = None
    original_filename: Optional[str] = None
    content_type: Optional[str] = None
    file_size: Optional[int] = None
    total_chunks: int = 0
    status: Optional[str] = None
    error_message: Optional[str] = None
    correlation_id: Optional[str] = None
    created_at: Optional[datetime] = None


class EmbeddingChunk(BaseModel):
    """Preview of a single embedding row"""
    model_config = ConfigDict(extra="ignore")

    chunk_index: int
    content: str
    metadata: Dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[datetime] = None


class EmbeddingStatistics(BaseModel):
    """Aggregate over the embedding rows of one document"""
    model_config = ConfigDict(extra="ignore")

    total_embeddings: int = 0
    unique_chunks: int = 0
    avg_content_length: float = 0.0
    first_embedding: Optional[datetime] = None
    last_embedding: Optional[datetime] = None
    chunks: List[EmbeddingChunk] = Field(default_factory=list)


class PipelineVerdict(str, Enum):
    """Aggregate pipeline health classification"""
    FULLY_PROCESSED = "FULLY_PROCESSED"
    FAILED = "FAILED"
    INCOMPLETE = "INCOMPLETE"


class SectionState(str, Enum):
    """Outcome of one secondary lookup"""
    PRESENT = "present"
    EMPTY = "empty"
    ABSENT = "absent"
    FAILED = "failed"
    MISSING_REFERENCE = "missing_reference"
    SKIPPED = "skipped"


@dataclass
class Section(Generic[T]):
    """One report section: its state plus data or error"""
    state: SectionState
    data: Optional[T] = None
    error: Optional[str] = None

    @classmethod
    def present(cls, data: T) -> "Section[T]":
        return cls(state=SectionState.PRESENT, data=data)

    @classmethod
    def empty(cls, data: T) -> "Section[T]":
        return cls(state=SectionState.EMPTY, data=data)

    @classmethod
    def absent(cls, data: Optional[T] = None, error: Optional[str] = None) -> "Section[T]":
        return cls(state=SectionState.ABSENT, data=data, error=error)

    @classmethod
    def failed(cls, error: str) -> "Section[T]":
        return cls(state=SectionState.FAILED, error=error)

    @classmethod
    def missing_reference(cls) -> "Section[T]":
        return cls(state=SectionState.MISSING_REFERENCE)

    @classmethod
    def skipped(cls) -> "Section[T]":
        return cls(state=SectionState.SKIPPED)

    @property
    def ok(self) -> bool:
        return self.state in (SectionState.PRESENT, SectionState.EMPTY)


@dataclass
class SecondaryData:
    """Relational record and embedding statistics for one document"""
    relational: Section[RelationalDocumentRecord]
    embeddings: Section[EmbeddingStatistics]


@dataclass
class AnalysisReport:
    """Combined pipeline view for one document"""
    document: Document
    verdict: PipelineVerdict
    detailed: bool = False
    storage: Section[ObjectInfo] = field(default_factory=Section.skipped)
    storage_preview: Optional[str] = None
    relational: Section[RelationalDocumentRecord] = field(default_factory=Section.skipped)
    embeddings: Section[EmbeddingStatistics] = field(default_factory=Section.skipped)
    degraded: bool = False

    @property
    def storage_exists(self) -> bool:
        return self.storage.state == SectionState.PRESENT and bool(self.storage.data and self.storage.data.exists)

    @property
    def chunk_count(self) -> Optional[int]:
        if self.embeddings.ok and self.embeddings.data is not None:
            return self.embeddings.data.total_embeddings
        return None
