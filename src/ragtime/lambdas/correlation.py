import secrets
import string
from datetime import datetime, timezone
from typing import Any, Dict, Optional

CORRELATION_HEADERS = ("x-correlation-id", "x-request-id")
_ALPHABET = string.ascii_uppercase + string.digits


def generate_correlation_id(prefix: str = "PROC") -> str:
    """`PREFIX-YYYYMMDDHHMMSS-XXXXXX`"""
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(6))
    return f"{prefix}-{timestamp}-{suffix}"


def extract_correlation_id(event: Dict[str, Any]) -> Optional[str]:
    """Correlation id from API Gateway headers or a direct invocation payload"""
    headers = {k.lower(): v for k, v in (event.get("headers") or {}).items()}
    for name in CORRELATION_HEADERS:
        if headers.get(name):
            return headers[name]
    return event.get("correlationId")


def correlation_id_for(event: Dict[str, Any], prefix: str) -> str:
    return extract_correlation_id(event) or generate_correlation_id(prefix)
