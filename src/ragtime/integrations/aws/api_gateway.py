from typing import Any

from botocore.exceptions import BotoCoreError, ClientError
from loguru import logger

from ragtime.errors import ConfigurationError
from ragtime.integrations.aws.session import client_kwargs, create_session
from ragtime.utils.settings.core import ApiSettings, AwsSettings


async def discover_api_url(api_settings: ApiSettings, aws_settings: AwsSettings, session: Any = None) -> str:
    """
    Resolve the RagTime API base URL.

    RAGTIME_API_URL wins when set. Otherwise the API Gateway REST APIs of the
    account are searched for one whose name contains the configured hint.

    Raises:
        ConfigurationError: if no API can be found.
    """
    if api_settings.api_url:
        return api_settings.api_url.rstrip("/")

    session = session or create_session(aws_settings)
    hint = api_settings.api_name_hint.lower()
    try:
        async with session.client("apigateway", **client_kwargs(aws_settings)) as client:
            response = await client.get_rest_apis()
    except (ClientError, BotoCoreError) as e:
        logger.warning(f"API Gateway lookup failed: {e}")
        response = {}

    for api in response.get("items", []):
        if hint in api.get("name", "").lower():
            url = f"https://{api['id']}.execute-api.{aws_settings.region}.amazonaws.com/{api_settings.stage}"
            logger.info(f"Discovered RagTime API {api['name']} at {url}")
            return url

    raise ConfigurationError(
        "Could not find RagTime API Gateway. Set RAGTIME_API_URL environment variable "
        "or ensure AWS credentials are configured."
    )
