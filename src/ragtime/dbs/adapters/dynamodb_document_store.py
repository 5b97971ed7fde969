"""
DynamoDB Document Store Adapter

Async access to the primary document records used by the CRUD Lambda.
Table layout:
Partition key: tenant_id
Sort key: asset_id
GSI2: gsi2_pk = tenant_id#status, gsi2_sk = created_at#asset_id
Async with aioboto3 so the handler can share the event loop with the S3 probe
and the pgvector adapter.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from loguru import logger

from ragtime.integrations.aws.session import create_session
from ragtime.models.document import DocumentStatus
from ragtime.utils.settings.core import AwsSettings

Page = Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]], int]


class DynamoDBDocumentStore:
    """Primary document records keyed by tenant and asset id"""

    def __init__(self, table_name: str, aws_settings: AwsSettings, session: Any = None) -> None:
        self.table_name: str = table_name
        self.aws_settings: AwsSettings = aws_settings
        self._session = session

    @property
    def session(self) -> Any:
        if self._session is None:
            self._session = create_session(self.aws_settings)
        return self._session

    def _resource(self) -> Any:
        return self.session.resource(
            "dynamodb",
            region_name=self.aws_settings.region,
            endpoint_url=self.aws_settings.endpoint_url,
        )

    async def scan_tenant(
        self,
        tenant_id: str,
        limit: int,
        start_key: Optional[Dict[str, Any]] = None,
    ) -> Page:
        """All records of a tenant (unordered)"""
        params: Dict[str, Any] = {
            "FilterExpression": "tenant_id = :tenant_id",
            "ExpressionAttributeValues": {":tenant_id": tenant_id},
            "Limit": limit,
        }
        if start_key:
            params["ExclusiveStartKey"] = start_key
        logger.info(f"Scanning documents for tenant {tenant_id}")
        async with self._resource() as dynamodb:
            table = await dynamodb.Table(self.table_name)
            response: Dict[str, Any] = await table.scan(**params)
        return response.get("Items", []), response.get("LastEvaluatedKey"), response.get("Count", 0)

    async def query_status(
        self,
        tenant_id: str,
        status: str,
        limit: int,
        start_key: Optional[Dict[str, Any]] = None,
        ascending: bool = False,
    ) -> Page:
        """Records of a tenant with the given status, ordered by creation time through GSI2"""
        params: Dict[str, Any] = {
            "IndexName": "GSI2",
            "KeyConditionExpression": "gsi2_pk = :pk",
            "ExpressionAttributeValues": {":pk": f"{tenant_id}#{status}"},
            "Limit": limit,
            "ScanIndexForward": ascending,
        }
        if start_key:
            params["ExclusiveStartKey"] = start_key
        logger.info(f"Querying {status} documents for tenant {tenant_id}")
        async with self._resource() as dynamodb:
            table = await dynamodb.Table(self.table_name)
            response: Dict[str, Any] = await table.query(**params)
        return response.get("Items", []), response.get("LastEvaluatedKey"), response.get("Count", 0)

    async def get(self, tenant_id: str, asset_id: str) -> Optional[Dict[str, Any]]:
        async with self._resource() as dynamodb:
            table = await dynamodb.Table(self.table_name)
            response: Dict[str, Any] = await table.get_item(Key={"tenant_id": tenant_id, "asset_id": asset_id})
        return response.get("Item")

    async def delete(self, tenant_id: str, asset_id: str) -> None:
        logger.info(f"Deleting document record {asset_id}")
        async with self._resource() as dynamodb:
            table = await dynamodb.Table(self.table_name)
            await table.delete_item(Key={"tenant_id": tenant_id, "asset_id": asset_id})

    async def mark_deleted(self, tenant_id: str, asset_id: str) -> None:
        """Soft delete: flip the status to DELETED and move the record in GSI2"""
        status = DocumentStatus.DELETED.value
        logger.info(f"Soft deleting document record {asset_id}")
        async with self._resource() as dynamodb:
            table = await dynamodb.Table(self.table_name)
            await table.update_item(
                Key={"tenant_id": tenant_id, "asset_id": asset_id},
                UpdateExpression="SET #status = :status, updated_at = :updated_at, gsi2_pk = :gsi2_pk",
                ExpressionAttributeNames={"#status": "status"},
                ExpressionAttributeValues={
                    ":status": status,
                    ":updated_at": datetime.now(timezone.utc).isoformat(),
                    ":gsi2_pk": f"{tenant_id}#{status}",
                },
            )
