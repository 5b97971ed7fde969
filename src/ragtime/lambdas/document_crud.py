"""
Document CRUD Lambda

    GET    /documents               list documents of a tenant
    GET    /documents/{asset_id}    primary record, flagged when the S3 object is gone
    DELETE /documents/{asset_id}    hard delete (S3 + DynamoDB + embeddings) or soft delete
    OPTIONS                         CORS preflight
"""

import asyncio
import base64
import binascii
import json
from dataclasses import dataclass
from typing import Any, AsyncContextManager, Callable, Dict, List, Optional

from botocore.exceptions import BotoCoreError, ClientError
from loguru import logger

from ragtime.dbs.adapters.dynamodb_document_store import DynamoDBDocumentStore
from ragtime.dbs.interfaces.metadata_store import AbstractDocumentMetadataStore
from ragtime.errors import ConfigurationError
from ragtime.integrations.aws.s3 import S3ObjectProbe, delete_object
from ragtime.lambdas.correlation import correlation_id_for
from ragtime.lambdas.resources import open_lambda_adapter
from ragtime.lambdas.response import create_error_response, create_response
from ragtime.models.document import DocumentStatus
from ragtime.utils.logging import configure_lambda_logging
from ragtime.utils.settings.core import AwsSettings
from ragtime.utils.settings.factory import settings_factory

DEFAULT_LIMIT = 10
MAX_LIMIT = 100
SORT_FIELDS = ("created_at", "file_name", "file_size")
MISSING_OBJECT_MESSAGE = "S3 object not found"

configure_lambda_logging()


@dataclass
class CrudDependencies:
    store: DynamoDBDocumentStore
    probe: S3ObjectProbe
    aws_settings: AwsSettings
    adapter_factory: Optional[Callable[[], AsyncContextManager[AbstractDocumentMetadataStore]]] = None


def build_dependencies() -> CrudDependencies:
    lambda_settings = settings_factory.create_lambda_settings()
    aws_settings = settings_factory.create_aws_settings()
    if not lambda_settings.documents_table_name:
        raise ConfigurationError("DOCUMENTS_TABLE_NAME environment variable not set")
    adapter_factory = open_lambda_adapter if lambda_settings.database_secret_name else None
    return CrudDependencies(
        store=DynamoDBDocumentStore(lambda_settings.documents_table_name, aws_settings),
        probe=S3ObjectProbe(aws_settings),
        aws_settings=aws_settings,
        adapter_factory=adapter_factory,
    )


def encode_token(key: Dict[str, Any]) -> str:
    return base64.b64encode(json.dumps(key, default=str).encode()).decode()


def decode_token(token: str) -> Dict[str, Any]:
    """Raises ValueError for anything that is not base64-encoded JSON"""
    try:
        return json.loads(base64.b64decode(token, validate=True).decode())
    except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ValueError("Invalid next_token") from e


def sort_documents(items: List[Dict[str, Any]], sort_by: str, descending: bool) -> List[Dict[str, Any]]:
    def key(item: Dict[str, Any]) -> Any:
        if sort_by == "file_name":
            return str(item.get("file_name", "")).lower()
        if sort_by == "file_size":
            return item.get("file_size") or 0
        return str(item.get("created_at", ""))

    return sorted(items, key=key, reverse=descending)


async def list_documents(event: Dict[str, Any], deps: CrudDependencies) -> Dict[str, Any]:
    params = event.get("queryStringParameters") or {}
    tenant_id = params.get("tenant_id")
    if not tenant_id:
        return create_response(400, {"error": "tenant_id query parameter is required"})

    try:
        limit = min(int(params.get("limit") or DEFAULT_LIMIT), MAX_LIMIT)
    except ValueError:
        return create_response(400, {"error": "limit must be an integer"})

    start_key = None
    if params.get("next_token"):
        try:
            start_key = decode_token(params["next_token"])
        except ValueError:
            return create_response(400, {"error": "Invalid next_token"})

    status = params.get("status")
    if status and status not in DocumentStatus.__members__:
        return create_response(400, {"error": f"Unknown status: {status}"})
    sort_by = params.get("sort_by") if params.get("sort_by") in SORT_FIELDS else "created_at"
    descending = params.get("sort_order", "desc") != "asc"

    logger.info(f"Listing documents for tenant: {tenant_id}, limit: {limit}, status: {status}")
    if status:
        items, last_key, count = await deps.store.query_status(
            tenant_id, status, limit, start_key=start_key, ascending=not descending
        )
    else:
        items, last_key, count = await deps.store.scan_tenant(tenant_id, limit, start_key=start_key)
        items = sort_documents(items, sort_by, descending)

    body: Dict[str, Any] = {"documents": items, "total_count": count}
    if last_key:
        body["next_token"] = encode_token(last_key)
    return create_response(200, body)


def _keys(event: Dict[str, Any]) -> tuple:
    asset_id = (event.get("pathParameters") or {}).get("asset_id")
    tenant_id = (event.get("queryStringParameters") or {}).get("tenant_id")
    return asset_id, tenant_id


async def get_document(event: Dict[str, Any], deps: CrudDependencies) -> Dict[str, Any]:
    asset_id, tenant_id = _keys(event)
    if not asset_id:
        return create_response(400, {"error": "asset_id path parameter is required"})
    if not tenant_id:
        return create_response(400, {"error": "tenant_id query parameter is required"})

    logger.info(f"Getting document: tenant={tenant_id}, asset={asset_id}")
    document = await deps.store.get(tenant_id, asset_id)
    if document is None:
        return create_response(404, {"error": "Document not found"})

    if document.get("s3_bucket") and document.get("s3_key"):
        info = await deps.probe.verify_object(document["s3_bucket"], document["s3_key"])
        if info.not_found:
            logger.warning(f"S3 object not found for document {asset_id}: {document['s3_key']}")
            document["error_message"] = MISSING_OBJECT_MESSAGE

    return create_response(200, {"document": document})


async def _cleanup_embeddings(asset_id: str, deps: CrudDependencies) -> bool:
    if deps.adapter_factory is None:
        logger.info("No database configured, skipping embedding cleanup")
        return False
    try:
        async with deps.adapter_factory() as adapter:
            await adapter.delete_document_embeddings(asset_id)
    except Exception as e:
        logger.error(f"Embedding cleanup failed for {asset_id}: {e}")
        return False
    return True


async def delete_document(event: Dict[str, Any], deps: CrudDependencies) -> Dict[str, Any]:
    asset_id, tenant_id = _keys(event)
    if not asset_id:
        return create_response(400, {"error": "asset_id path parameter is required"})
    if not tenant_id:
        return create_response(400, {"error": "tenant_id query parameter is required"})
    soft_delete = (event.get("queryStringParameters") or {}).get("soft_delete") == "true"

    logger.info(f"Deleting document: tenant={tenant_id}, asset={asset_id}, soft_delete={soft_delete}")
    document = await deps.store.get(tenant_id, asset_id)
    if document is None:
        return create_response(404, {"error": "Document not found"})

    if soft_delete:
        await deps.store.mark_deleted(tenant_id, asset_id)
        return create_response(200, {
            "success": True,
            "message": "Document soft deleted successfully",
            "document_id": asset_id,
            "deletion_type": "soft",
        })

    results = {"s3_deleted": False, "dynamodb_deleted": False, "vector_cleanup": False}
    if document.get("s3_bucket") and document.get("s3_key"):
        results["s3_deleted"] = await delete_object(deps.aws_settings, document["s3_bucket"], document["s3_key"])

    await deps.store.delete(tenant_id, asset_id)
    results["dynamodb_deleted"] = True
    results["vector_cleanup"] = await _cleanup_embeddings(asset_id, deps)

    return create_response(200, {
        "success": True,
        "message": "Document permanently deleted successfully",
        "document_id": asset_id,
        "deletion_type": "hard",
        "cleanup_results": results,
    })


async def route(event: Dict[str, Any], deps: CrudDependencies) -> Dict[str, Any]:
    method = event.get("httpMethod")
    has_asset = bool((event.get("pathParameters") or {}).get("asset_id"))

    if method == "OPTIONS":
        return create_response(200, {"message": "CORS preflight successful"})

    try:
        if method == "GET" and not has_asset:
            return await list_documents(event, deps)
        if method == "GET":
            return await get_document(event, deps)
        if method == "DELETE" and has_asset:
            return await delete_document(event, deps)
    except (ClientError, BotoCoreError) as e:
        logger.opt(exception=e).error(f"AWS error handling {method} {event.get('path')}: {e}")
        return create_error_response(500, "Internal server error", str(e))

    return create_response(405, {
        "error": "Method not allowed",
        "allowed_methods": ["GET", "DELETE", "OPTIONS"],
    })


def handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    correlation_id = correlation_id_for(event, "CRUD")
    with logger.contextualize(correlation_id=correlation_id):
        logger.info(
            f"Document CRUD request received: {event.get('httpMethod')} {event.get('path')} "
            f"path={event.get('pathParameters')} query={event.get('queryStringParameters')}"
        )
        try:
            deps = build_dependencies()
        except ConfigurationError as e:
            logger.error(f"Configuration error: {e}")
            return create_error_response(500, "Internal server error", str(e))
        return asyncio.run(route(event, deps))
