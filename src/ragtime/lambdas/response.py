import json
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Optional

CORS_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type,X-Amz-Date,Authorization,X-Api-Key,X-Amz-Security-Token",
    "Access-Control-Allow-Methods": "GET,POST,PUT,DELETE,OPTIONS",
}


def _json_default(value: Any) -> Any:
    # DynamoDB numbers come back as Decimal, PostgreSQL timestamps as datetime
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def create_response(
    status_code: int,
    body: Any,
    additional_headers: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """API Gateway proxy response with JSON body and CORS headers"""
    return {
        "statusCode": status_code,
        "headers": {**CORS_HEADERS, **(additional_headers or {})},
        "body": json.dumps(body, default=_json_default),
    }


def create_error_response(
    status_code: int,
    error: str,
    message: Optional[str] = None,
    details: Any = None,
) -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "error": error,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    if message is not None:
        body["message"] = message
    if details is not None:
        body["details"] = details
    return create_response(status_code, body)
