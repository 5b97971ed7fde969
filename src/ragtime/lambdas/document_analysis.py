"""
Document Analysis Lambda

GET /documents/{asset_id}/analysis?tenant_id=...

Returns the PostgreSQL record and embedding statistics of a document in one
response, the joint view consumed by `ragtime get --status`:

    {
        "postgresql": {"exists": true, "total_chunks": 4, "status": "processed", ...},
        "embeddings": {"total_embeddings": 4, "unique_chunks": 4, "chunks": [...], ...}
    }
"""

import asyncio
from typing import Any, AsyncContextManager, Callable, Dict

from loguru import logger

from ragtime.dbs.interfaces.metadata_store import AbstractDocumentMetadataStore
from ragtime.lambdas.correlation import correlation_id_for
from ragtime.lambdas.resources import open_lambda_adapter
from ragtime.lambdas.response import create_response
from ragtime.utils.logging import configure_lambda_logging

CHUNK_PREVIEW_LIMIT = 10

AdapterFactory = Callable[[], AsyncContextManager[AbstractDocumentMetadataStore]]

configure_lambda_logging()


async def build_analysis(adapter: AbstractDocumentMetadataStore, asset_id: str) -> Dict[str, Any]:
    record = await adapter.get_document_record(asset_id)
    if record is None:
        postgresql: Dict[str, Any] = {"exists": False}
    else:
        postgresql = {"exists": True, **record.model_dump(mode="json", exclude={"asset_id"})}

    stats = await adapter.get_embedding_statistics(asset_id)
    if stats.total_embeddings > 0:
        stats.chunks = await adapter.get_chunk_previews(asset_id, limit=CHUNK_PREVIEW_LIMIT)
        embeddings = stats.model_dump(mode="json")
    else:
        embeddings = {"total_embeddings": 0, "unique_chunks": 0, "avg_content_length": 0}

    return {"postgresql": postgresql, "embeddings": embeddings}


async def handle_analysis(event: Dict[str, Any], adapter_factory: AdapterFactory = open_lambda_adapter) -> Dict[str, Any]:
    asset_id = (event.get("pathParameters") or {}).get("asset_id")
    if not asset_id:
        return create_response(400, {"error": "Asset ID is required"})

    tenant_id = (event.get("queryStringParameters") or {}).get("tenant_id")
    if not tenant_id:
        return create_response(400, {"error": "tenant_id parameter is required"})

    try:
        async with adapter_factory() as adapter:
            analysis = await build_analysis(adapter, asset_id)
    except Exception as e:
        logger.opt(exception=e).error(f"Document analysis failed for {asset_id}: {e}")
        return create_response(500, {"error": "Internal server error"})

    logger.info(
        f"Document analysis completed for {asset_id} (tenant={tenant_id}, "
        f"record={analysis['postgresql']['exists']}, embeddings={analysis['embeddings']['total_embeddings']})"
    )
    return create_response(200, analysis)


def handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    correlation_id = correlation_id_for(event, "ANLZ")
    with logger.contextualize(correlation_id=correlation_id):
        logger.info(f"Document analysis request received: {event.get('httpMethod')} {event.get('path')}")
        response = asyncio.run(handle_analysis(event, open_lambda_adapter))
    response["headers"]["X-Correlation-ID"] = correlation_id
    return response
