"""
Document Analysis Service

Builds one pipeline-health view of a document:

1. The primary metadata record is fetched from the REST API. This is a hard
   dependency; NotFoundError and ApiError propagate to the caller and no
   verdict is computed.
2. In detailed mode the S3 probe and the secondary data source (PostgreSQL or
   the analysis endpoint) run concurrently. Each runs under its own timeout and
   its outcome is captured independently, so one failing lookup never cancels
   or alters the other.
3. The verdict is computed from whatever is known at that point.

The service performs no formatting; the CLI presenters render the report.
"""

import asyncio
from typing import Optional, Tuple

from loguru import logger

from ragtime.clients.api_client import RagtimeApiClient
from ragtime.dbs.interfaces.secondary_source import SecondaryDataSource
from ragtime.errors import RemoteUnavailableError, SecondaryUnavailableError
from ragtime.integrations.aws.s3 import S3ObjectProbe
from ragtime.models.analysis import (
    AnalysisReport,
    EmbeddingStatistics,
    ObjectInfo,
    PipelineVerdict,
    RelationalDocumentRecord,
    SecondaryData,
    Section,
)
from ragtime.models.document import Document, DocumentStatus
from ragtime.utils.results import capture
from ragtime.utils.settings.core import AnalysisSettings


def compute_verdict(
    status: DocumentStatus,
    storage_exists: Optional[bool],
    chunk_count: Optional[int],
) -> PipelineVerdict:
    """
    FAILED when the primary status says so, FULLY_PROCESSED only when the
    status is PROCESSED, the S3 object is confirmed and at least one embedding
    chunk exists, INCOMPLETE otherwise. Unknown inputs are passed as None.
    """
    if status == DocumentStatus.FAILED:
        return PipelineVerdict.FAILED
    if status == DocumentStatus.PROCESSED and storage_exists is True and (chunk_count or 0) >= 1:
        return PipelineVerdict.FULLY_PROCESSED
    return PipelineVerdict.INCOMPLETE


class DocumentAnalysisService:
    """Combines the primary record with S3 and PostgreSQL lookups into one report"""

    def __init__(
        self,
        api_client: RagtimeApiClient,
        object_probe: S3ObjectProbe,
        secondary_source: SecondaryDataSource,
        settings: Optional[AnalysisSettings] = None,
    ):
        self.api_client = api_client
        self.object_probe = object_probe
        self.secondary_source = secondary_source
        self.settings = settings or AnalysisSettings()

    async def analyze(self, asset_id: str, detailed: bool = False) -> AnalysisReport:
        """
        Analyze one document.

        Args:
            asset_id: Document identifier
            detailed: Run the S3 and secondary lookups; basic mode only uses the primary record

        Returns:
            AnalysisReport with per-section states and the verdict

        Raises:
            NotFoundError: the primary record does not exist
            ApiError: the primary record could not be fetched
        """
        document = await self.api_client.get_document(asset_id)
        logger.info(f"Fetched primary record for {asset_id} (status={document.status.value})")

        if not detailed:
            return AnalysisReport(
                document=document,
                verdict=compute_verdict(document.status, None, None),
            )

        (storage, preview), (secondary, degraded) = await asyncio.gather(
            self._storage_section(document),
            self._secondary_sections(asset_id),
        )

        report = AnalysisReport(
            document=document,
            verdict=PipelineVerdict.INCOMPLETE,
            detailed=True,
            storage=storage,
            storage_preview=preview,
            relational=secondary.relational,
            embeddings=secondary.embeddings,
            degraded=degraded,
        )
        report.verdict = compute_verdict(document.status, report.storage_exists, report.chunk_count)
        logger.info(f"Analysis of {asset_id}: verdict={report.verdict.value}, degraded={degraded}")
        return report

    async def _storage_section(self, document: Document) -> Tuple[Section[ObjectInfo], Optional[str]]:
        location = document.storage_location
        if location is None:
            logger.info(f"Document {document.asset_id} has no S3 reference, skipping probe")
            return Section[ObjectInfo].missing_reference(), None

        result = await capture(
            self.object_probe.verify_object(location.bucket, location.key),
            "S3 verification",
            timeout=self.settings.section_timeout,
        )
        if result.is_err():
            return Section[ObjectInfo].failed(result.unwrap_err()), None

        info = result.unwrap()
        if info.exists:
            preview = await capture(
                self.object_probe.get_object_preview(location.bucket, location.key, self.settings.preview_length),
                "S3 preview",
                timeout=self.settings.section_timeout,
            )
            return Section[ObjectInfo].present(info), preview.unwrap() if preview.is_ok() else None
        if info.not_found:
            return Section[ObjectInfo].absent(info, error=info.error), None
        return Section[ObjectInfo].failed(info.error or "S3 verification failed"), None

    async def _secondary_sections(self, asset_id: str) -> Tuple[SecondaryData, bool]:
        """Secondary data plus a flag telling whether the report is degraded"""
        try:
            # Sources that bound each of their lookups report per-section timeouts themselves
            timeout = None if self.secondary_source.bounds_lookups else self.settings.section_timeout
            data = await asyncio.wait_for(self.secondary_source.fetch(asset_id), timeout=timeout)
            return data, False
        except RemoteUnavailableError as e:
            logger.warning(f"Secondary data unavailable for {asset_id}: {e}")
            return SecondaryData(
                relational=Section[RelationalDocumentRecord].skipped(),
                embeddings=Section[EmbeddingStatistics].skipped(),
            ), True
        except asyncio.TimeoutError:
            error = SecondaryUnavailableError(
                self.secondary_source.name, f"timed out after {self.settings.section_timeout:g}s"
            )
        except Exception as e:
            error = SecondaryUnavailableError(self.secondary_source.name, str(e) or e.__class__.__name__)

        logger.warning(f"Secondary lookup failed for {asset_id}: {error}")
        return SecondaryData(
            relational=Section[RelationalDocumentRecord].failed(str(error)),
            embeddings=Section[EmbeddingStatistics].failed(str(error)),
        ), False
