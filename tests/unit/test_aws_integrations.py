"""
AWS Integration Unit Tests

S3 probe, Secrets Manager credential merge and API Gateway discovery, each
against a fake aioboto3 session.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from factories import fake_session
from ragtime.errors import ConfigurationError
from ragtime.integrations.aws.api_gateway import discover_api_url
from ragtime.integrations.aws.s3 import S3ObjectProbe, delete_object
from ragtime.integrations.aws.secrets import get_secret_json, resolve_database_settings
from ragtime.utils.settings.core import ApiSettings, AwsSettings, DatabaseSettings


@pytest.fixture
def aws_settings() -> AwsSettings:
    return AwsSettings(region="eu-west-1")


def client_error(code: str, operation: str = "HeadObject") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


@pytest.mark.asyncio
async def test_verify_object_exists(aws_settings):
    s3 = MagicMock()
    modified = datetime(2025, 8, 22, 10, 0, tzinfo=timezone.utc)
    s3.head_object = AsyncMock(
        return_value={"ContentLength": 2048, "LastModified": modified, "ContentType": "application/pdf"}
    )
    probe = S3ObjectProbe(aws_settings, session=fake_session(s3))

    info = await probe.verify_object("b", "k")

    assert info.exists is True
    assert info.size == 2048
    assert info.last_modified == modified
    assert info.content_type == "application/pdf"
    s3.head_object.assert_awaited_once_with(Bucket="b", Key="k")


@pytest.mark.asyncio
@pytest.mark.parametrize("code", ["404", "NotFound", "NoSuchKey"])
async def test_verify_object_not_found(aws_settings, code):
    s3 = MagicMock()
    s3.head_object = AsyncMock(side_effect=client_error(code))
    probe = S3ObjectProbe(aws_settings, session=fake_session(s3))

    info = await probe.verify_object("b", "k")

    assert info.exists is False
    assert info.not_found is True
    assert info.error == "Object not found in S3"


@pytest.mark.asyncio
async def test_verify_object_access_denied_is_not_a_404(aws_settings):
    s3 = MagicMock()
    s3.head_object = AsyncMock(side_effect=client_error("403"))
    probe = S3ObjectProbe(aws_settings, session=fake_session(s3))

    info = await probe.verify_object("b", "k")

    assert info.exists is False
    assert info.not_found is False
    assert "403" in info.error


@pytest.mark.asyncio
async def test_verify_object_endpoint_unreachable(aws_settings):
    s3 = MagicMock()
    s3.head_object = AsyncMock(side_effect=EndpointConnectionError(endpoint_url="https://s3.local"))
    probe = S3ObjectProbe(aws_settings, session=fake_session(s3))

    info = await probe.verify_object("b", "k")

    assert info.exists is False
    assert info.not_found is False
    assert info.error


def preview_client(raw: bytes, content_range: str) -> MagicMock:
    body = MagicMock()
    body.read = AsyncMock(return_value=raw)
    s3 = MagicMock()
    s3.get_object = AsyncMock(return_value={"Body": body, "ContentRange": content_range})
    return s3


@pytest.mark.asyncio
async def test_preview_of_small_object(aws_settings):
    s3 = preview_client(b"hello world", "bytes 0-10/11")
    probe = S3ObjectProbe(aws_settings, session=fake_session(s3))

    preview = await probe.get_object_preview("b", "k", max_length=200)

    assert preview == "hello world"
    s3.get_object.assert_awaited_once_with(Bucket="b", Key="k", Range="bytes=0-199")


@pytest.mark.asyncio
async def test_preview_of_large_object_is_truncated(aws_settings):
    s3 = preview_client(b"a" * 10, "bytes 0-9/5000")
    probe = S3ObjectProbe(aws_settings, session=fake_session(s3))

    preview = await probe.get_object_preview("b", "k", max_length=10)

    assert preview == "a" * 10 + "..."


@pytest.mark.asyncio
async def test_preview_failure_returns_none(aws_settings):
    s3 = MagicMock()
    s3.get_object = AsyncMock(side_effect=client_error("NoSuchKey", "GetObject"))
    probe = S3ObjectProbe(aws_settings, session=fake_session(s3))

    assert await probe.get_object_preview("b", "k") is None


@pytest.mark.asyncio
async def test_delete_object_already_gone(aws_settings):
    s3 = MagicMock()
    s3.delete_object = AsyncMock(side_effect=client_error("NoSuchKey", "DeleteObject"))

    assert await delete_object(aws_settings, "b", "k", session=fake_session(s3)) is False


@pytest.mark.asyncio
async def test_delete_object_other_error_raises(aws_settings):
    s3 = MagicMock()
    s3.delete_object = AsyncMock(side_effect=client_error("AccessDenied", "DeleteObject"))

    with pytest.raises(ClientError):
        await delete_object(aws_settings, "b", "k", session=fake_session(s3))


@pytest.mark.asyncio
async def test_get_secret_json(aws_settings):
    client = MagicMock()
    client.get_secret_value = AsyncMock(return_value={"SecretString": '{"username": "ragtime"}'})

    secret = await get_secret_json("db-secret", aws_settings, session=fake_session(client))

    assert secret == {"username": "ragtime"}


@pytest.mark.asyncio
async def test_get_secret_json_rejects_non_json(aws_settings):
    client = MagicMock()
    client.get_secret_value = AsyncMock(return_value={"SecretString": "not json"})

    with pytest.raises(ConfigurationError):
        await get_secret_json("db-secret", aws_settings, session=fake_session(client))


@pytest.mark.asyncio
async def test_secret_credentials_override_environment(aws_settings):
    db_settings = DatabaseSettings(host=None, username="env-user", password="env-pass")
    secret = {"username": "secret-user", "password": "s3cret", "host": "aurora.local", "port": "6543", "dbname": "rag"}

    with patch("ragtime.integrations.aws.secrets.get_secret_json", AsyncMock(return_value=secret)):
        resolved = await resolve_database_settings(db_settings, aws_settings)

    assert resolved.username == "secret-user"
    assert resolved.password == "s3cret"
    assert resolved.host == "aurora.local"
    assert resolved.port == 6543
    assert resolved.name == "rag"
    assert resolved.effective_sslmode == "require"


@pytest.mark.asyncio
async def test_explicit_host_wins_over_secret(aws_settings):
    db_settings = DatabaseSettings(host="localhost")

    with patch(
        "ragtime.integrations.aws.secrets.get_secret_json",
        AsyncMock(return_value={"host": "aurora.local", "password": "s3cret"}),
    ):
        resolved = await resolve_database_settings(db_settings, aws_settings)

    assert resolved.host == "localhost"
    assert resolved.password == "s3cret"
    assert resolved.effective_sslmode == "disable"


@pytest.mark.asyncio
async def test_unreadable_secret_falls_back_to_environment(aws_settings):
    db_settings = DatabaseSettings(host="db.internal", password="env-pass")

    with patch(
        "ragtime.integrations.aws.secrets.get_secret_json",
        AsyncMock(side_effect=client_error("ResourceNotFoundException", "GetSecretValue")),
    ):
        resolved = await resolve_database_settings(db_settings, aws_settings)

    assert resolved.host == "db.internal"
    assert resolved.password == "env-pass"


@pytest.mark.asyncio
async def test_required_secret_must_be_readable(aws_settings):
    db_settings = DatabaseSettings(host="db.internal")

    with patch(
        "ragtime.integrations.aws.secrets.get_secret_json",
        AsyncMock(side_effect=client_error("AccessDeniedException", "GetSecretValue")),
    ):
        with pytest.raises(ConfigurationError):
            await resolve_database_settings(db_settings, aws_settings, require_secret=True)


@pytest.mark.asyncio
async def test_missing_host_is_a_configuration_error(aws_settings):
    db_settings = DatabaseSettings(host=None, secret_name=None)

    with pytest.raises(ConfigurationError):
        await resolve_database_settings(db_settings, aws_settings)


@pytest.mark.asyncio
async def test_configured_api_url_is_used_as_is(aws_settings):
    session = MagicMock()
    url = await discover_api_url(ApiSettings(api_url="https://api.example.com/prod/"), aws_settings, session=session)

    assert url == "https://api.example.com/prod"
    session.client.assert_not_called()


@pytest.mark.asyncio
async def test_api_url_discovered_from_api_gateway(aws_settings):
    client = MagicMock()
    client.get_rest_apis = AsyncMock(
        return_value={"items": [{"id": "other", "name": "billing"}, {"id": "abc123", "name": "RagTime-API-dev"}]}
    )

    url = await discover_api_url(ApiSettings(api_url=None), aws_settings, session=fake_session(client))

    assert url == "https://abc123.execute-api.eu-west-1.amazonaws.com/prod"


@pytest.mark.asyncio
async def test_api_discovery_without_match(aws_settings):
    client = MagicMock()
    client.get_rest_apis = AsyncMock(return_value={"items": [{"id": "other", "name": "billing"}]})

    with pytest.raises(ConfigurationError):
        await discover_api_url(ApiSettings(api_url=None), aws_settings, session=fake_session(client))
