"""
HTTP client for the knowledge base REST API.

Every failure is translated into the shared error taxonomy so callers (the
autosave coordinator in particular) never have to look at httpx exceptions:
transport problems become NetworkFailure, 404 NotFound, 400 ValidationError
and 5xx PersistenceFailure, as does a success response whose body is not
JSON. Nothing here retries; that is a caller decision.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

import httpx

from knowledge_base.exceptions import (
    KnowledgeBaseError,
    NetworkFailure,
    NotFound,
    PersistenceFailure,
    ValidationError,
)

logger = logging.getLogger(__name__)


@dataclass
class PageSummary:
    """A row of ``GET /pages``; enough to build trees and breadcrumbs."""
    id: str
    title: str
    parent_id: Optional[str] = None
    position: int = 0
    icon: str = "📄"
    updated_at: Optional[str] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "PageSummary":
        return cls(
            id=data["id"],
            title=data.get("title") or "",
            parent_id=data.get("parent_id"),
            position=data.get("position", 0),
            icon=data.get("icon") or "📄",
            updated_at=data.get("updated_at"),
        )


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.reason_phrase or "Request failed"
    if isinstance(body, dict):
        return body.get("message") or body.get("error") or "Request failed"
    return "Request failed"


class KnowledgeBaseClient:
    """Synchronous client; one instance per server."""

    DEFAULT_TIMEOUT = 10.0

    def __init__(
        self,
        base_url: str = "http://127.0.0.1:5000/api/v1",
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Args:
            base_url: API root, including the ``/api/v1`` prefix.
            timeout: Per-request timeout in seconds; no call blocks longer.
            transport: Optional httpx transport (tests use ``httpx.MockTransport``).
        """
        self.base_url = base_url.rstrip("/")
        self._http = httpx.Client(base_url=self.base_url, timeout=timeout, transport=transport)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "KnowledgeBaseClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            response = self._http.request(method, path, **kwargs)
        except httpx.TimeoutException as exc:
            raise NetworkFailure(f"{method} {path} timed out") from exc
        except httpx.RequestError as exc:
            raise NetworkFailure(f"{method} {path} failed: {exc}") from exc

        if response.is_success:
            if not response.content:
                return None
            try:
                return response.json()
            except ValueError as exc:
                raise PersistenceFailure(f"{method} {path} returned a non-JSON body") from exc

        message = _error_message(response)
        logger.debug("%s %s -> %s: %s", method, path, response.status_code, message)

        if response.status_code == 404:
            raise NotFound(message)
        if response.status_code == 400:
            raise ValidationError(message)
        if response.status_code >= 500:
            raise PersistenceFailure(message)
        raise KnowledgeBaseError(f"Unexpected status {response.status_code}: {message}")

    # ------------------------
    # Pages
    # ------------------------

    def list_pages(self) -> List[PageSummary]:
        return [PageSummary.from_json(item) for item in self._request("GET", "/pages")]

    def get_page(self, page_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/pages/{page_id}")

    def create_page(self, **fields: Any) -> Dict[str, Any]:
        return self._request("POST", "/pages", json=fields)

    def update_page(self, page_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("PUT", f"/pages/{page_id}", json=patch)

    def delete_page(self, page_id: str) -> None:
        self._request("DELETE", f"/pages/{page_id}")

    def reorder_pages(self, items: Iterable[Dict[str, Any]]) -> None:
        self._request("POST", "/pages/reorder", json={"pages": list(items)})

    def search_pages(self, query: str) -> List[Dict[str, Any]]:
        if not query.strip():
            return []
        return self._request("GET", "/pages/search", params={"q": query})

    # ------------------------
    # Versions
    # ------------------------

    def list_versions(self, page_id: str, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        params = {"limit": limit} if limit is not None else None
        return self._request("GET", f"/pages/{page_id}/versions", params=params)

    def get_version(self, page_id: str, version_id: int) -> Dict[str, Any]:
        return self._request("GET", f"/pages/{page_id}/versions/{version_id}")

    def restore_version(self, page_id: str, version_id: int) -> Dict[str, Any]:
        return self._request("POST", f"/pages/{page_id}/versions/{version_id}/restore")
