"""AWS integrations (S3, Secrets Manager, API Gateway) built on aioboto3"""

from ragtime.integrations.aws.api_gateway import discover_api_url
from ragtime.integrations.aws.s3 import S3ObjectProbe, delete_object
from ragtime.integrations.aws.secrets import get_secret_json, resolve_database_settings

__all__ = [
    "discover_api_url",
    "S3ObjectProbe",
    "delete_object",
    "get_secret_json",
    "resolve_database_settings",
]
