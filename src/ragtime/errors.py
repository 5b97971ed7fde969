"""Error taxonomy shared by the CLI, the analysis workflow and the Lambda handlers.

- NotFoundError: primary record absent, fatal to the command
- SecondaryUnavailableError: one secondary section failed, folded into the report
- RemoteUnavailableError: joint analysis endpoint missing or unreachable, degraded report
- ConfigurationError: required connection parameters missing, fatal at startup
- ApiError: any other REST failure
"""

from typing import Optional


class RagtimeError(Exception):
    """Base class for all RagTime errors"""


class ConfigurationError(RagtimeError):
    """Required configuration (API URL, database host, credentials) is missing"""


class ApiError(RagtimeError):
    """REST API call failed"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(ApiError):
    """Requested document does not exist"""

    def __init__(self, message: str = "Document not found"):
        super().__init__(message, status_code=404)


class RemoteUnavailableError(RagtimeError):
    """The joint analysis endpoint is not deployed or cannot be reached"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class SecondaryUnavailableError(RagtimeError):
    """A secondary lookup (object store, relational record, embeddings) failed"""

    def __init__(self, section: str, message: str):
        super().__init__(f"{section}: {message}")
        self.section = section
        self.reason = message
