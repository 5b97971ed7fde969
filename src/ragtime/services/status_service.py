from typing import Any, Dict

from loguru import logger
from neopipe import Err, Ok, Result
from psycopg2 import OperationalError

from ragtime.clients.api_client import RagtimeApiClient
from ragtime.dbs.adapters.pgvector_document_adapter import PgVectorDocumentAdapter
from ragtime.errors import ApiError


class PostgresStatusService:
    """PostgreSQL / pgvector health check for the pipeline database"""

    def __init__(self, adapter: PgVectorDocumentAdapter):
        self.adapter = adapter
        self.config = adapter.settings

    def _base(self) -> Dict[str, Any]:
        return {
            "host": self.config.host,
            "port": self.config.port,
            "database": self.config.name,
        }

    async def check_status(self) -> Result[Dict[str, Any], Dict[str, Any]]:
        """Check PostgreSQL connection status

        Returns:
            Result[Ok, Err]: Ok with status data if successful, Err with error details if failed
        """
        try:
            status = await self.adapter.server_status()
        except OperationalError as e:
            logger.error(f"PostgreSQL connection failed: {e}")
            return Err({
                **self._base(),
                "connected": False,
                "status": "connection_error",
                "error": str(e),
                "message": "PostgreSQL connection failed",
            })
        except Exception as e:
            logger.error(f"Unexpected error checking PostgreSQL status: {e}")
            return Err({
                **self._base(),
                "connected": False,
                "status": "error",
                "error": str(e),
                "message": "Unexpected error occurred",
            })

        healthy = bool(status["pgvector"]) and not status["missing_tables"]
        message = "PostgreSQL connection successful"
        if not status["pgvector"]:
            message = "pgvector extension is not installed"
        elif status["missing_tables"]:
            message = f"Missing tables: {', '.join(status['missing_tables'])}"

        return Ok({
            **self._base(),
            "connected": True,
            "status": "healthy" if healthy else "schema_error",
            "version": status["version"],
            "pgvector": status["pgvector"],
            "tables": status["tables"],
            "message": message,
        })


class ApiStatusService:
    """Reachability check for the RagTime REST API"""

    def __init__(self, client: RagtimeApiClient):
        self.client = client

    async def check_status(self) -> Result[Dict[str, Any], Dict[str, Any]]:
        try:
            status_code = await self.client.ping()
        except ApiError as e:
            logger.error(f"RagTime API check failed: {e}")
            return Err({
                "connected": False,
                "status": "connection_error" if e.status_code is None else "api_error",
                "endpoint_url": self.client.base_url,
                "error": str(e),
                "message": "RagTime API request failed",
            })

        return Ok({
            "connected": True,
            "status": "healthy",
            "endpoint_url": self.client.base_url,
            "tenant_id": self.client.tenant_id,
            "status_code": status_code,
            "message": "RagTime API reachable",
        })
