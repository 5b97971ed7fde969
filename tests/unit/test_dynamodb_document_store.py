from unittest.mock import AsyncMock, MagicMock

import pytest

from factories import fake_session
from ragtime.dbs.adapters.dynamodb_document_store import DynamoDBDocumentStore
from ragtime.utils.settings.core import AwsSettings


@pytest.fixture
def table() -> MagicMock:
    table = MagicMock()
    table.scan = AsyncMock(return_value={"Items": [{"asset_id": "a"}], "Count": 1})
    table.query = AsyncMock(return_value={"Items": [], "Count": 0, "LastEvaluatedKey": {"asset_id": "z"}})
    table.get_item = AsyncMock(return_value={})
    table.update_item = AsyncMock()
    return table


@pytest.fixture
def store(table) -> DynamoDBDocumentStore:
    dynamodb = MagicMock()
    dynamodb.Table = AsyncMock(return_value=table)
    return DynamoDBDocumentStore("documents", AwsSettings(), session=fake_session(dynamodb))


@pytest.mark.asyncio
async def test_scan_filters_by_tenant(store, table):
    items, last_key, count = await store.scan_tenant("acme", 10, start_key={"asset_id": "x"})

    assert items == [{"asset_id": "a"}]
    assert last_key is None
    assert count == 1
    kwargs = table.scan.await_args.kwargs
    assert kwargs["ExpressionAttributeValues"] == {":tenant_id": "acme"}
    assert kwargs["ExclusiveStartKey"] == {"asset_id": "x"}


@pytest.mark.asyncio
async def test_status_query_uses_gsi2(store, table):
    _, last_key, _ = await store.query_status("acme", "FAILED", 5)

    kwargs = table.query.await_args.kwargs
    assert kwargs["IndexName"] == "GSI2"
    assert kwargs["ExpressionAttributeValues"] == {":pk": "acme#FAILED"}
    assert kwargs["ScanIndexForward"] is False
    assert last_key == {"asset_id": "z"}


@pytest.mark.asyncio
async def test_get_missing_item(store):
    assert await store.get("acme", "missing") is None


@pytest.mark.asyncio
async def test_mark_deleted_updates_status_and_index_key(store, table):
    await store.mark_deleted("acme", "doc-1")

    kwargs = table.update_item.await_args.kwargs
    assert kwargs["Key"] == {"tenant_id": "acme", "asset_id": "doc-1"}
    assert kwargs["ExpressionAttributeValues"][":status"] == "DELETED"
    assert kwargs["ExpressionAttributeValues"][":gsi2_pk"] == "acme#DELETED"
