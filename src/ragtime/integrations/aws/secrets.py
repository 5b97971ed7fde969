import json
from typing import Any, Dict, Optional

from botocore.exceptions import BotoCoreError, ClientError
from loguru import logger

from ragtime.errors import ConfigurationError
from ragtime.integrations.aws.session import client_kwargs, create_session
from ragtime.utils.settings.core import AwsSettings, DatabaseSettings


async def get_secret_json(secret_id: str, aws_settings: AwsSettings, session: Any = None) -> Dict[str, Any]:
    """Fetch a Secrets Manager secret and decode its JSON SecretString"""
    session = session or create_session(aws_settings)
    async with session.client("secretsmanager", **client_kwargs(aws_settings)) as client:
        response = await client.get_secret_value(SecretId=secret_id)

    secret_string = response.get("SecretString")
    if not secret_string:
        raise ConfigurationError(f"Secret {secret_id} has no SecretString")
    try:
        return json.loads(secret_string)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Secret {secret_id} is not valid JSON: {e}") from e


async def resolve_database_settings(
    db_settings: DatabaseSettings,
    aws_settings: AwsSettings,
    session: Any = None,
    require_secret: bool = False,
) -> DatabaseSettings:
    """
    Merge database credentials from Secrets Manager over the environment settings.

    The secret may carry `username`, `password`, `host`, `port` and `dbname`.
    When the secret cannot be read the environment values are used as they are,
    unless `require_secret` is set.

    Raises:
        ConfigurationError: if no host is known after merging, or the secret is
            required and unavailable.
    """
    secret: Optional[Dict[str, Any]] = None
    if db_settings.secret_name:
        try:
            secret = await get_secret_json(db_settings.secret_name, aws_settings, session=session)
            logger.info(f"Loaded database credentials from secret {db_settings.secret_name}")
        except (ClientError, BotoCoreError, ConfigurationError) as e:
            if require_secret:
                raise ConfigurationError(f"Failed to retrieve database credentials: {e}") from e
            logger.warning(f"Could not retrieve database credentials from Secrets Manager: {e}")

    updates: Dict[str, Any] = {}
    if secret:
        for field_name, secret_key in (
            ("username", "username"),
            ("password", "password"),
            ("host", "host"),
            ("port", "port"),
            ("name", "dbname"),
        ):
            value = secret.get(secret_key)
            # An explicitly configured host wins over the secret's host
            if field_name == "host" and db_settings.host:
                continue
            if value not in (None, ""):
                updates[field_name] = int(value) if field_name == "port" else value

    resolved = db_settings.model_copy(update=updates)
    if not resolved.host:
        raise ConfigurationError(
            "Database host is not configured. Set DB_HOST or store it in the "
            f"'{db_settings.secret_name}' secret."
        )
    return resolved
