"""
Primary document models as returned by the RagTime REST API.

- DocumentStatus: lifecycle status maintained by the upload/status API
- StorageLocation: value object for the S3 bucket + key of the original upload
- Document: primary metadata record (read-only snapshot per invocation)
- DocumentList: list response with optional pagination token
"""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class DocumentStatus(str, Enum):
    """Primary document status"""
    UPLOADED = "UPLOADED"
    PROCESSING = "PROCESSING"
    PROCESSED = "PROCESSED"
    FAILED = "FAILED"
    DELETED = "DELETED"


class StorageLocation(BaseModel):
    """S3 reference of a stored artifact"""
    bucket: str
    key: str

    def __str__(self) -> str:
        return f"s3://{self.bucket}/{self.key}"


class Document(BaseModel):
    """Primary metadata record for an uploaded document."""
    model_config = ConfigDict(extra="ignore", use_enum_values=False)

    asset_id: str = Field(..., description="Document identifier")
    file_name: str = Field(..., description="Display name of the document")
    status: DocumentStatus = Field(..., description="Primary processing status")
    file_size: int = Field(default=0, description="Size in bytes")
    content_type: str = Field(default="text/plain", description="MIME type of the upload")
    created_at: datetime = Field(..., description="Upload timestamp")
    updated_at: datetime = Field(..., description="Last status update timestamp")
    error_message: Optional[str] = Field(default=None, description="Failure reason, if any")
    s3_bucket: Optional[str] = Field(default=None, description="Bucket holding the original upload")
    s3_key: Optional[str] = Field(default=None, description="Key of the original upload")
    tenant_id: Optional[str] = Field(default=None, description="Owning tenant")
    word_count: Optional[int] = Field(default=None, description="Extracted word count")

    @property
    def storage_location(self) -> Optional[StorageLocation]:
        """Storage reference, only when both bucket and key are set"""
        if self.s3_bucket and self.s3_key:
            return StorageLocation(bucket=self.s3_bucket, key=self.s3_key)
        return None

    @property
    def processing_seconds(self) -> Optional[int]:
        """Seconds between upload and last update, when the record was updated after upload"""
        delta = (_as_utc(self.updated_at) - _as_utc(self.created_at)).total_seconds()
        if delta > 0:
            return round(delta)
        return None


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class DocumentList(BaseModel):
    """Response of GET /documents"""
    model_config = ConfigDict(extra="ignore")

    documents: List[Document] = Field(default_factory=list)
    next_token: Optional[str] = None
    total_count: Optional[int] = None
