"""Services package for the document analysis workflow and health checks."""

from ragtime.services.document_analysis_service import (
    DocumentAnalysisService,
    compute_verdict,
)
from ragtime.services.status_service import ApiStatusService, PostgresStatusService

__all__ = [
    "DocumentAnalysisService",
    "compute_verdict",
    "ApiStatusService",
    "PostgresStatusService",
]
