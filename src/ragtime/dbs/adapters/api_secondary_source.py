from typing import Any, Dict, Optional

from loguru import logger
from pydantic import ValidationError

from ragtime.clients.api_client import RagtimeApiClient
from ragtime.dbs.interfaces.secondary_source import SecondaryDataSource
from ragtime.errors import ApiError, NotFoundError, RemoteUnavailableError
from ragtime.models.analysis import (
    EmbeddingStatistics,
    RelationalDocumentRecord,
    SecondaryData,
    Section,
)


class ApiSecondaryDataSource(SecondaryDataSource):
    """
    Reads the relational record and embedding statistics from the joint
    `GET /documents/{asset_id}/analysis` endpoint in a single call.

    A 404 means the endpoint is not deployed and raises RemoteUnavailableError.
    Other API failures raise RemoteUnavailableError too when
    `degrade_on_server_error` is set, otherwise the ApiError propagates.
    """

    name = "analysis endpoint"

    def __init__(self, client: RagtimeApiClient, degrade_on_server_error: bool = True):
        self.client = client
        self.degrade_on_server_error = degrade_on_server_error

    async def fetch(self, asset_id: str) -> SecondaryData:
        try:
            payload = await self.client.get_document_analysis(asset_id)
        except NotFoundError as e:
            logger.warning(f"Analysis endpoint not available for {asset_id}")
            raise RemoteUnavailableError("Analysis endpoint not available", status_code=404) from e
        except ApiError as e:
            if not self.degrade_on_server_error:
                raise
            logger.warning(f"Analysis endpoint failed for {asset_id}, degrading: {e}")
            raise RemoteUnavailableError(f"Analysis endpoint failed: {e}", status_code=e.status_code) from e

        return SecondaryData(
            relational=parse_relational_section(asset_id, payload.get("postgresql")),
            embeddings=parse_embeddings_section(payload.get("embeddings")),
        )


def parse_relational_section(asset_id: str, data: Optional[Dict[str, Any]]) -> Section[RelationalDocumentRecord]:
    if data is None:
        return Section[RelationalDocumentRecord].failed("Analysis response has no postgresql section")
    if data.get("error"):
        return Section[RelationalDocumentRecord].failed(str(data["error"]))
    if not data.get("exists"):
        return Section[RelationalDocumentRecord].absent()
    try:
        record = RelationalDocumentRecord.model_validate({"asset_id": asset_id, **data})
    except ValidationError as e:
        return Section[RelationalDocumentRecord].failed(f"Malformed postgresql section: {e.error_count()} errors")
    return Section[RelationalDocumentRecord].present(record)


def parse_embeddings_section(data: Optional[Dict[str, Any]]) -> Section[EmbeddingStatistics]:
    if data is None:
        return Section[EmbeddingStatistics].failed("Analysis response has no embeddings section")
    if data.get("error"):
        return Section[EmbeddingStatistics].failed(str(data["error"]))
    try:
        stats = EmbeddingStatistics.model_validate(data)
    except ValidationError as e:
        return Section[EmbeddingStatistics].failed(f"Malformed embeddings section: {e.error_count()} errors")
    if stats.total_embeddings > 0:
        return Section[EmbeddingStatistics].present(stats)
    return Section[EmbeddingStatistics].empty(stats)
