"""
Pytest Configuration and Fixtures

Environment defaults and shared fixtures. Nothing here touches AWS, the
RagTime API or PostgreSQL.
"""

import os

# ---------------------------------------------------------------------------
# Test environment defaults, set before any ragtime settings are created so
# that nothing tries to discover real AWS resources.
# ---------------------------------------------------------------------------
_test_env = {
    "RAGTIME_API_URL": "https://api.test.local/prod",
    "RAGTIME_TENANT_ID": "test-tenant",
    "AWS_REGION": "us-east-1",
    "AWS_ACCESS_KEY_ID": "testing",
    "AWS_SECRET_ACCESS_KEY": "testing",
    "DB_HOST": "localhost",
}
for _key, _value in _test_env.items():
    os.environ.setdefault(_key, _value)

from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402

from factories import make_document  # noqa: E402
from ragtime.models.analysis import ObjectInfo  # noqa: E402


@pytest.fixture
def object_probe() -> MagicMock:
    """S3 probe that finds every object"""
    probe = MagicMock()
    probe.verify_object = AsyncMock(
        return_value=ObjectInfo(exists=True, size=2048, content_type="application/pdf")
    )
    probe.get_object_preview = AsyncMock(return_value="%PDF-1.7 ...")
    return probe


@pytest.fixture
def api_client() -> MagicMock:
    client = MagicMock()
    client.base_url = "https://api.test.local/prod"
    client.tenant_id = "test-tenant"
    client.get_document = AsyncMock(return_value=make_document())
    client.list_documents = AsyncMock()
    client.delete_document = AsyncMock(return_value={"success": True})
    client.upload_file = AsyncMock(return_value=make_document(status="UPLOADED"))
    client.upload_string = AsyncMock(return_value=make_document(status="UPLOADED", file_name="text-content.txt"))
    client.upload_url = AsyncMock(return_value=make_document(status="UPLOADED", file_name="page.html"))
    return client
