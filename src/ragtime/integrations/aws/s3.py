"""
S3 object probe.

Checks whether the original upload of a document is still in S3 and fetches a
short preview of its content. Both operations report problems through their
return values: `verify_object` returns an ObjectInfo with `not_found` set for a
404 and `error` set for any other failure, `get_object_preview` returns None.
"""

from typing import Any, Optional

from botocore.exceptions import BotoCoreError, ClientError
from loguru import logger

from ragtime.integrations.aws.session import client_kwargs, create_session
from ragtime.models.analysis import ObjectInfo
from ragtime.utils.settings.core import AwsSettings

NOT_FOUND_CODES = {"404", "NotFound", "NoSuchKey"}
NOT_FOUND_MESSAGE = "Object not found in S3"


class S3ObjectProbe:
    """Read-only S3 probe used by the document analysis workflow"""

    def __init__(self, aws_settings: AwsSettings, session: Any = None):
        self.aws_settings = aws_settings
        self._session = session

    @property
    def session(self) -> Any:
        if self._session is None:
            self._session = create_session(self.aws_settings)
        return self._session

    async def verify_object(self, bucket: str, key: str) -> ObjectInfo:
        """HEAD the object and describe what was found"""
        try:
            async with self.session.client("s3", **client_kwargs(self.aws_settings)) as s3:
                response = await s3.head_object(Bucket=bucket, Key=key)
        except ClientError as e:
            code = str(e.response.get("Error", {}).get("Code", ""))
            if code in NOT_FOUND_CODES:
                logger.info(f"S3 object s3://{bucket}/{key} not found")
                return ObjectInfo(exists=False, not_found=True, error=NOT_FOUND_MESSAGE)
            logger.warning(f"S3 HEAD failed for s3://{bucket}/{key}: {e}")
            return ObjectInfo(exists=False, error=str(e))
        except BotoCoreError as e:
            logger.warning(f"S3 HEAD failed for s3://{bucket}/{key}: {e}")
            return ObjectInfo(exists=False, error=str(e))

        return ObjectInfo(
            exists=True,
            size=response.get("ContentLength"),
            last_modified=response.get("LastModified"),
            content_type=response.get("ContentType"),
        )

    async def get_object_preview(self, bucket: str, key: str, max_length: int = 200) -> Optional[str]:
        """
        Best-effort preview of the first `max_length` bytes.

        Returns None when the content is unavailable for any reason.
        """
        try:
            async with self.session.client("s3", **client_kwargs(self.aws_settings)) as s3:
                response = await s3.get_object(Bucket=bucket, Key=key, Range=f"bytes=0-{max_length - 1}")
                body = response.get("Body")
                if body is None:
                    return None
                raw = await body.read()
        except Exception as e:
            logger.debug(f"Preview unavailable for s3://{bucket}/{key}: {e}")
            return None

        content = raw.decode("utf-8", errors="replace")
        total = response.get("ContentRange", "")
        truncated = len(content) > max_length or _has_more(total, max_length)
        return content[:max_length] + "..." if truncated else content


def _has_more(content_range: str, max_length: int) -> bool:
    """True when a `bytes 0-199/5000` style ContentRange reports a larger object"""
    try:
        size = int(content_range.rsplit("/", 1)[1])
    except (IndexError, ValueError):
        return False
    return size > max_length


async def delete_object(aws_settings: AwsSettings, bucket: str, key: str, session: Any = None) -> bool:
    """
    Delete an object; returns False when it was already gone.

    Raises:
        ClientError: for any failure other than a missing key.
    """
    session = session or create_session(aws_settings)
    try:
        async with session.client("s3", **client_kwargs(aws_settings)) as s3:
            await s3.delete_object(Bucket=bucket, Key=key)
    except ClientError as e:
        if str(e.response.get("Error", {}).get("Code", "")) in NOT_FOUND_CODES:
            logger.warning(f"S3 object s3://{bucket}/{key} already deleted")
            return False
        raise
    logger.info(f"S3 object deleted: s3://{bucket}/{key}")
    return True
