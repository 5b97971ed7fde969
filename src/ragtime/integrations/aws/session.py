from typing import Any, Dict

import aioboto3
from botocore.config import Config

from ragtime.utils.settings.core import AwsSettings

# Diagnostics should fail fast instead of hanging on a dead endpoint
PROBE_CLIENT_CONFIG = Config(
    connect_timeout=5,
    read_timeout=10,
    retries={"max_attempts": 1},
)


def create_session(aws_settings: AwsSettings) -> aioboto3.Session:
    """Async boto session; falls back to the default credential chain when no keys are configured"""
    return aioboto3.Session(
        aws_access_key_id=aws_settings.access_key_id,
        aws_secret_access_key=aws_settings.secret_access_key,
        region_name=aws_settings.region,
    )


def client_kwargs(aws_settings: AwsSettings) -> Dict[str, Any]:
    kwargs: Dict[str, Any] = {"region_name": aws_settings.region, "config": PROBE_CLIENT_CONFIG}
    if aws_settings.endpoint_url:
        kwargs["endpoint_url"] = aws_settings.endpoint_url
    return kwargs
