import json

import httpx
import pytest

from knowledge_base.client.api_client import KnowledgeBaseClient, PageSummary
from knowledge_base.client.autosave import AutosaveCoordinator
from knowledge_base.domain.lifecycle.autosave import SaveStatus
from knowledge_base.exceptions import (
    KnowledgeBaseError,
    NetworkFailure,
    NotFound,
    PersistenceFailure,
    ValidationError,
)


def _client(handler) -> KnowledgeBaseClient:
    return KnowledgeBaseClient("http://kb.test/api/v1", transport=httpx.MockTransport(handler))


def test_list_pages_returns_summaries() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/v1/pages"
        return httpx.Response(200, json=[
            {"id": "a", "title": "Alpha", "parent_id": None, "position": 0, "icon": "📄"},
            {"id": "b", "title": "Beta", "parent_id": "a", "position": 1, "icon": "📁"},
        ])

    with _client(handler) as client:
        pages = client.list_pages()

    assert pages == [
        PageSummary(id="a", title="Alpha", parent_id=None, position=0, icon="📄"),
        PageSummary(id="b", title="Beta", parent_id="a", position=1, icon="📁"),
    ]


def test_update_page_sends_sparse_patch_with_put() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"id": "p1", "title": "New"})

    result = _client(handler).update_page("p1", {"title": "New"})

    assert seen == {"method": "PUT", "path": "/api/v1/pages/p1", "body": {"title": "New"}}
    assert result["title"] == "New"


def test_reorder_wraps_items_in_pages_key() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"success": True, "count": 1})

    _client(handler).reorder_pages([{"id": "x", "parent_id": None, "position": 0}])

    assert seen["body"] == {"pages": [{"id": "x", "parent_id": None, "position": 0}]}


@pytest.mark.parametrize(
    "status, error_type",
    [
        (404, NotFound),
        (400, ValidationError),
        (500, PersistenceFailure),
        (503, PersistenceFailure),
        (409, KnowledgeBaseError),
    ],
)
def test_error_statuses_map_to_taxonomy(status, error_type) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json={"error": "x", "message": "went wrong"})

    with pytest.raises(error_type, match="went wrong"):
        _client(handler).get_page("p1")


def test_connection_error_becomes_network_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(NetworkFailure):
        _client(handler).update_page("p1", {"content": "<p>x</p>"})


def test_timeout_becomes_network_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(NetworkFailure, match="timed out"):
        _client(handler).list_pages()


def test_non_json_success_body_becomes_persistence_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>proxy</html>")

    with pytest.raises(PersistenceFailure, match="non-JSON"):
        _client(handler).update_page("p1", {"title": "x"})


def test_autosave_survives_non_json_response() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>proxy</html>")

    now = [0.0]
    client = _client(handler)
    session = AutosaveCoordinator("p1", client.update_page, delay=0.8, clock=lambda: now[0])

    session.edit("title", "Kept locally")
    now[0] += 1
    session.poll()

    assert session.status is SaveStatus.ERROR
    assert isinstance(session.last_error, PersistenceFailure)
    assert session.values["title"] == "Kept locally"


def test_blank_search_skips_the_request() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    assert _client(handler).search_pages("   ") == []


def test_search_passes_query_parameter() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["q"] == "roadmap"
        return httpx.Response(200, json=[{"id": "a", "title": "Roadmap", "snippet": ""}])

    results = _client(handler).search_pages("roadmap")

    assert [r["id"] for r in results] == ["a"]


def test_list_versions_forwards_limit() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/v1/pages/p1/versions"
        assert request.url.params["limit"] == "5"
        return httpx.Response(200, json=[])

    assert _client(handler).list_versions("p1", limit=5) == []
