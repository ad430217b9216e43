from datetime import datetime

from sqlalchemy.exc import OperationalError

from knowledge_base.extensions import db
from knowledge_base.models import Page, PageVersion


def _version_count(page_id: str) -> int:
    return PageVersion.query.filter_by(page_id=page_id).count()


def test_health(client) -> None:
    response = client.get("/api/v1/health")

    assert response.status_code == 200
    assert response.get_json()["status"] == "ok"


def test_openapi_document_is_served(client) -> None:
    response = client.get("/openapi/knowledge_base.yaml")

    assert response.status_code == 200
    assert b"/pages/reorder" in response.data


def test_list_pages_starts_empty(client) -> None:
    response = client.get("/api/v1/pages")

    assert response.status_code == 200
    assert response.get_json() == []


def test_create_page_applies_defaults(make_page) -> None:
    page = make_page()

    assert page["title"] == "Untitled"
    assert page["icon"] == "📄"
    assert page["content"] == ""
    assert page["parent_id"] is None
    assert page["position"] == 0
    assert page["id"]


def test_children_are_appended_after_existing_siblings(make_page) -> None:
    parent = make_page(title="Parent")

    first = make_page(title="First", parent_id=parent["id"])
    second = make_page(title="Second", parent_id=parent["id"])
    other_root = make_page(title="Root two")

    assert (first["position"], second["position"]) == (0, 1)
    assert other_root["position"] == 1


def test_create_under_unknown_parent_is_rejected(client) -> None:
    response = client.post("/api/v1/pages", json={"title": "Lost", "parent_id": "missing"})

    assert response.status_code == 400
    assert response.get_json()["error"] == "validation_error"
    assert Page.query.count() == 0


def test_create_rejects_wrong_field_types(client) -> None:
    assert client.post("/api/v1/pages", json={"title": 7}).status_code == 400
    assert client.post("/api/v1/pages", json=["not", "an", "object"]).status_code == 400


def test_get_page_returns_content(client, make_page) -> None:
    page = make_page(title="Doc", content="<p>body</p>")

    response = client.get(f"/api/v1/pages/{page['id']}")

    assert response.status_code == 200
    assert response.get_json()["content"] == "<p>body</p>"


def test_get_missing_page_is_404(client) -> None:
    response = client.get("/api/v1/pages/does-not-exist")

    assert response.status_code == 404
    assert response.get_json()["error"] == "not_found"


def test_content_update_snapshots_previous_values(client, make_page) -> None:
    page = make_page(title="Spec", content="<p>old</p>")

    response = client.put(f"/api/v1/pages/{page['id']}", json={"content": "<p>new</p>"})

    assert response.status_code == 200
    body = response.get_json()
    assert body["content"] == "<p>new</p>"
    assert body["title"] == "Spec"

    versions = PageVersion.query.filter_by(page_id=page["id"]).all()
    assert len(versions) == 1
    assert (versions[0].title, versions[0].content) == ("Spec", "<p>old</p>")


def test_updates_without_title_or_content_change_take_no_snapshot(client, make_page) -> None:
    page = make_page(title="Same", content="<p>same</p>")
    url = f"/api/v1/pages/{page['id']}"

    assert client.put(url, json={"icon": "🚀"}).status_code == 200
    assert client.put(url, json={"position": 4}).status_code == 200
    assert client.put(url, json={"title": "Same", "content": "<p>same</p>"}).status_code == 200

    assert _version_count(page["id"]) == 0
    assert client.get(url).get_json()["icon"] == "🚀"


def test_update_ignores_unknown_fields(client, make_page) -> None:
    page = make_page(title="Keep")

    response = client.put(f"/api/v1/pages/{page['id']}", json={"owner": "someone"})

    assert response.status_code == 200
    assert response.get_json()["title"] == "Keep"


def test_update_missing_page_is_404(client) -> None:
    response = client.put("/api/v1/pages/nope", json={"title": "x"})

    assert response.status_code == 404


def test_moving_a_page_under_its_descendant_is_rejected(client, make_page) -> None:
    a = make_page(title="A")
    b = make_page(title="B", parent_id=a["id"])

    response = client.put(f"/api/v1/pages/{a['id']}", json={"parent_id": b["id"]})

    assert response.status_code == 400
    assert response.get_json()["error"] == "invariant_violation"
    assert db.session.get(Page, a["id"]).parent_id is None


def test_delete_promotes_children_and_drops_history(client, make_page) -> None:
    a = make_page(title="A", content="v0")
    b = make_page(title="B", parent_id=a["id"])
    c = make_page(title="C", parent_id=a["id"])
    d = make_page(title="D", parent_id=b["id"])
    e = make_page(title="E")
    client.put(f"/api/v1/pages/{a['id']}", json={"content": "v1"})
    assert _version_count(a["id"]) == 1

    response = client.delete(f"/api/v1/pages/{a['id']}")

    assert response.status_code == 200
    assert response.get_json() == {"success": True}

    parents = {p["id"]: p["parent_id"] for p in client.get("/api/v1/pages").get_json()}
    assert a["id"] not in parents
    assert parents[b["id"]] is None
    assert parents[c["id"]] is None
    assert parents[d["id"]] == b["id"]
    assert parents[e["id"]] is None
    assert _version_count(a["id"]) == 0


def test_delete_missing_page_is_404(client) -> None:
    assert client.delete("/api/v1/pages/nope").status_code == 404


def test_tree_endpoint_nests_children(client, make_page) -> None:
    a = make_page(title="Alpha")
    b = make_page(title="Beta", parent_id=a["id"])
    make_page(title="Target", parent_id=b["id"])
    make_page(title="Gamma")

    full = client.get("/api/v1/pages/tree").get_json()
    filtered = client.get("/api/v1/pages/tree", query_string={"q": "targ"}).get_json()

    assert [node["title"] for node in full] == ["Alpha", "Gamma"]
    assert "content" not in full[0]
    assert [node["title"] for node in filtered] == ["Alpha"]
    assert filtered[0]["children"][0]["title"] == "Beta"
    assert filtered[0]["children"][0]["children"][0]["title"] == "Target"


def test_breadcrumbs_run_from_root(client, make_page) -> None:
    a = make_page(title="A")
    b = make_page(title="B", parent_id=a["id"])
    c = make_page(title="C", parent_id=b["id"])

    response = client.get(f"/api/v1/pages/{c['id']}/breadcrumbs")

    assert [crumb["title"] for crumb in response.get_json()] == ["A", "B", "C"]
    assert client.get("/api/v1/pages/nope/breadcrumbs").status_code == 404


def test_search_blank_or_unmatched_query_is_empty(client, make_page) -> None:
    make_page(title="Something")

    assert client.get("/api/v1/pages/search").get_json() == []
    assert client.get("/api/v1/pages/search", query_string={"q": "   "}).get_json() == []
    assert client.get("/api/v1/pages/search", query_string={"q": "zzz"}).get_json() == []


def test_search_matches_title_or_content_newest_first(client, make_page) -> None:
    older = make_page(title="Meeting notes")
    newer = make_page(title="Agenda", content="<p>weekly MEETING</p>")
    make_page(title="Unrelated")

    db.session.get(Page, older["id"]).updated_at = datetime(2024, 1, 1)
    db.session.get(Page, newer["id"]).updated_at = datetime(2024, 6, 1)
    db.session.commit()

    results = client.get("/api/v1/pages/search", query_string={"q": "meeting"}).get_json()

    assert [r["id"] for r in results] == [newer["id"], older["id"]]
    assert results[0]["snippet"] == "<p>weekly MEETING</p>"


def test_search_is_capped_and_snippets_are_bounded(app, client, make_page) -> None:
    app.config["SEARCH_RESULT_LIMIT"] = 2
    for i in range(4):
        make_page(title=f"Log {i}", content="x" * 500)

    results = client.get("/api/v1/pages/search", query_string={"q": "log"}).get_json()

    assert len(results) == 2
    assert all(len(r["snippet"]) == app.config["SEARCH_SNIPPET_LENGTH"] for r in results)


def test_search_treats_wildcards_literally(client, make_page) -> None:
    literal = make_page(title="100% done")
    make_page(title="1000 done")

    results = client.get("/api/v1/pages/search", query_string={"q": "100%"}).get_json()

    assert [r["id"] for r in results] == [literal["id"]]


def test_store_failure_surfaces_as_500(client, monkeypatch) -> None:
    def failing_commit(session):
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(type(db.session()), "commit", failing_commit)

    response = client.post("/api/v1/pages", json={"title": "Doomed"})

    assert response.status_code == 500
    assert response.get_json()["error"] == "persistence_failure"
    assert Page.query.count() == 0


def test_non_string_parent_id_is_rejected(client, make_page) -> None:
    parent = make_page(title="Parent")
    child = make_page(title="Child", parent_id=parent["id"])

    assert client.post("/api/v1/pages", json={"title": "Zero", "parent_id": 0}).status_code == 400

    response = client.put(f"/api/v1/pages/{child['id']}", json={"parent_id": 0})

    assert response.status_code == 400
    assert db.session.get(Page, child["id"]).parent_id == parent["id"]


def test_empty_parent_id_moves_page_to_root(client, make_page) -> None:
    parent = make_page(title="Parent")
    child = make_page(title="Child", parent_id=parent["id"])

    response = client.put(f"/api/v1/pages/{child['id']}", json={"parent_id": ""})

    assert response.status_code == 200
    assert response.get_json()["parent_id"] is None
