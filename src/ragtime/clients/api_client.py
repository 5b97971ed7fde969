"""
Async client for the RagTime REST API.

Endpoints:
    POST   /documents                       multipart upload
    GET    /documents                       list documents of the tenant
    GET    /documents/{asset_id}            primary metadata record
    DELETE /documents/{asset_id}            delete a document
    GET    /documents/{asset_id}/analysis   joint PostgreSQL + embeddings view

Every request carries the tenant id. HTTP 404 raises NotFoundError, any other
failure raises ApiError.
"""

from typing import Any, Dict, Optional
from urllib.parse import urlparse

import httpx
from loguru import logger

from ragtime.errors import ApiError, NotFoundError
from ragtime.models.document import Document, DocumentList
from ragtime.utils.settings.core import ApiSettings


class RagtimeApiClient:
    """Thin async wrapper around the RagTime REST API"""

    def __init__(
        self,
        base_url: str,
        tenant_id: str,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.tenant_id = tenant_id
        self._client = httpx.AsyncClient(base_url=self.base_url, timeout=timeout, transport=transport)

    @classmethod
    def from_settings(
        cls,
        base_url: str,
        api_settings: ApiSettings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "RagtimeApiClient":
        return cls(base_url, api_settings.tenant_id, timeout=api_settings.timeout, transport=transport)

    async def __aenter__(self) -> "RagtimeApiClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        logger.debug(f"{method} {self.base_url}{path}")
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise ApiError(f"Request to {path} failed: {e}") from e

        if response.status_code == 404:
            raise NotFoundError()
        if response.is_error:
            raise ApiError(_error_message(response), status_code=response.status_code)
        return response

    @property
    def _tenant_params(self) -> Dict[str, str]:
        return {"tenant_id": self.tenant_id}

    async def upload_file(self, file_name: str, content: bytes, content_type: str) -> Document:
        files = {"file": (file_name, content, content_type)}
        response = await self._request("POST", "/documents", files=files, data=self._tenant_params)
        document = Document.model_validate(response.json()["document"])
        logger.info(f"Uploaded {file_name} as {document.asset_id}")
        return document

    async def upload_string(self, content: str, file_name: str) -> Document:
        return await self.upload_file(file_name, content.encode("utf-8"), "text/plain")

    async def upload_url(self, url: str, file_name: Optional[str] = None) -> Document:
        """Download the URL and upload its body as text"""
        try:
            async with httpx.AsyncClient(timeout=self._client.timeout, follow_redirects=True) as fetcher:
                fetched = await fetcher.get(url)
                fetched.raise_for_status()
        except httpx.HTTPError as e:
            raise ApiError(f"Failed to fetch {url}: {e}") from e

        name = file_name or urlparse(url).path.rstrip("/").split("/")[-1] or "url-content.txt"
        return await self.upload_file(name, fetched.content, "text/plain")

    async def list_documents(self) -> DocumentList:
        response = await self._request("GET", "/documents", params=self._tenant_params)
        return DocumentList.model_validate(response.json())

    async def get_document(self, asset_id: str) -> Document:
        response = await self._request("GET", f"/documents/{asset_id}", params=self._tenant_params)
        return Document.model_validate(response.json()["document"])

    async def delete_document(self, asset_id: str) -> Dict[str, Any]:
        response = await self._request("DELETE", f"/documents/{asset_id}", params=self._tenant_params)
        return response.json() if response.content else {}

    async def get_document_analysis(self, asset_id: str) -> Dict[str, Any]:
        response = await self._request("GET", f"/documents/{asset_id}/analysis", params=self._tenant_params)
        return response.json()

    async def ping(self) -> int:
        """Status code of a bare list call; used by the health command"""
        response = await self._request("GET", "/documents", params={**self._tenant_params, "limit": "1"})
        return response.status_code


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}: {response.text[:200]}"
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict):
            error = error.get("message")
        message = body.get("message")
        parts = [str(p) for p in (error, message) if p]
        if parts:
            return f"HTTP {response.status_code}: {' - '.join(parts)}"
    return f"HTTP {response.status_code}"
