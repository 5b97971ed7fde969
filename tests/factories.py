"""Builders and fakes shared by the unit tests"""

from contextlib import asynccontextmanager
from typing import Any, Dict
from unittest.mock import MagicMock

from ragtime.models.analysis import (
    EmbeddingStatistics,
    RelationalDocumentRecord,
    SecondaryData,
    Section,
)
from ragtime.models.document import Document


def document_payload(**overrides: Any) -> Dict[str, Any]:
    """Primary record as the REST API returns it"""
    payload = {
        "tenant_id": "test-tenant",
        "asset_id": "doc-123",
        "file_name": "report.pdf",
        "file_size": 2048,
        "content_type": "application/pdf",
        "status": "PROCESSED",
        "created_at": "2025-08-22T10:00:00Z",
        "updated_at": "2025-08-22T10:00:42Z",
        "s3_bucket": "b",
        "s3_key": "k",
    }
    payload.update(overrides)
    return payload

def make_document(**overrides: Any) -> Document:
    return Document.model_validate(document_payload(**overrides))

def make_stats(total: int = 3) -> EmbeddingStatistics:
    if total == 0:
        return EmbeddingStatistics()
    return EmbeddingStatistics(
        total_embeddings=total,
        unique_chunks=total,
        avg_content_length=512.0,
        first_embedding="2025-08-22T10:00:10Z",
        last_embedding="2025-08-22T10:00:40Z",
    )

def make_record(**overrides: Any) -> RelationalDocumentRecord:
    data = {
        "asset_id": "doc-123",
        "original_filename": "report.pdf",
        "total_chunks": 3,
        "status": "processed",
        "correlation_id": "PROC-20250822100000-ABC123",
    }
    data.update(overrides)
    return RelationalDocumentRecord.model_validate(data)

def secondary(record: Any = "default", total: int = 3) -> SecondaryData:
    """SecondaryData with a present record (or absent when record=None) and `total` chunks"""
    if record == "default":
        record = make_record()
    relational = Section.present(record) if record is not None else Section.absent()
    stats = make_stats(total)
    embeddings = Section.present(stats) if total > 0 else Section.empty(stats)
    return SecondaryData(relational=relational, embeddings=embeddings)

class FakeClientContext:
    """Stands in for the async context manager returned by aioboto3 `session.client()`"""

    def __init__(self, client: Any):
        self.client = client

    async def __aenter__(self) -> Any:
        return self.client

    async def __aexit__(self, *exc: Any) -> bool:
        return False

def fake_session(client: Any) -> MagicMock:
    session = MagicMock()
    session.client.return_value = FakeClientContext(client)
    session.resource.return_value = FakeClientContext(client)
    return session


def context_of(value: Any):
    """Factory returning an async context manager that yields `value`"""

    @asynccontextmanager
    async def _open(*args: Any, **kwargs: Any):
        yield value

    return _open
