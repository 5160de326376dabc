"""HTTP-level tests for the comic library API."""
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app.crud.comic import comic_crud
from app.main import create_app


def _create(client, **fields):
    response = client.post("/api/comics", json=fields)
    assert response.status_code == 201, response.text
    return response.json()


def test_health_does_not_touch_store(down_client):
    response = down_client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "OK"
    assert "timestamp" in response.json()


def test_root_lists_endpoints(client):
    body = client.get("/").json()

    assert body["message"] == "Comic Library API"
    assert body["endpoints"]["comics"] == "/api/comics"


def test_unknown_route_returns_error_body(client):
    response = client.get("/api/nope")

    assert response.status_code == 404
    assert response.json() == {"error": "Not Found"}


def test_categories_endpoint(client):
    categories = client.get("/api/categories").json()

    assert len(categories) == 16
    assert {"category_id", "name", "code", "icon", "color", "created_at"} <= set(categories[0])


def test_categories_fall_back_when_store_is_down(down_client):
    response = down_client.get("/api/categories")

    assert response.status_code == 200
    categories = response.json()
    assert len(categories) == 16
    assert categories[0]["category_id"] == "hoc-duong"
    assert categories[0]["created_at"] is None


def test_comic_crud_round_trip(client):
    created = _create(
        client,
        title="Omniscient Reader",
        category_id="vo-han-luu",
        chapter=10,
        tags=["apocalypse"],
    )
    comic_id = created["comic_id"]
    assert created["chapter"] == "10"
    assert created["rating"] == "none"

    assert client.get(f"/api/comics/{comic_id}").json()["title"] == "Omniscient Reader"

    updated = client.put(f"/api/comics/{comic_id}", json={"rating": "great"}).json()
    assert updated["rating"] == "great"
    assert updated["chapter"] == "10"
    assert updated["tags"] == ["apocalypse"]

    patched = client.patch(f"/api/comics/{comic_id}/chapter", json={"chapter": "11"}).json()
    assert patched["chapter"] == "11"
    assert patched["rating"] == "great"

    deleted = client.delete(f"/api/comics/{comic_id}")
    assert deleted.status_code == 204
    assert deleted.content == b""

    missing = client.get(f"/api/comics/{comic_id}")
    assert missing.status_code == 404
    assert missing.json() == {"error": "Comic not found"}


def test_create_without_required_fields_is_400(client):
    response = client.post("/api/comics", json={"title": "Only title"})

    assert response.status_code == 400
    assert response.json() == {"error": "Title and category_id are required"}


def test_malformed_body_is_400(client):
    response = client.post("/api/comics", json={"title": "X", "category_id": "ngon", "tags": "oops"})

    assert response.status_code == 400
    assert "error" in response.json()


@pytest.mark.parametrize(
    "method, path, body",
    [
        ("put", "/api/comics/comic_missing", {"chapter": "1"}),
        ("patch", "/api/comics/comic_missing/chapter", {"chapter": "1"}),
        ("delete", "/api/comics/comic_missing", None),
    ],
)
def test_missing_comic_is_404(client, method, path, body):
    kwargs = {"json": body} if body is not None else {}
    response = getattr(client, method)(path, **kwargs)

    assert response.status_code == 404
    assert client.get("/api/stats").json()["totalItems"] == 0


def test_patch_chapter_requires_chapter(client):
    comic = _create(client, title="X", category_id="ngon")

    response = client.patch(f"/api/comics/{comic['comic_id']}/chapter", json={})

    assert response.status_code == 400


def test_list_filters_searches_and_paginates(client):
    _create(client, title="Tiên Nghịch", category_id="tu-tien", description="cultivation")
    _create(client, title="Phàm Nhân", category_id="tu-tien")
    _create(client, title="City Boss", category_id="do-thi", description="Cultivation in the city")

    by_category = client.get("/api/comics", params={"category": "tu-tien"}).json()
    assert {c["title"] for c in by_category} == {"Tiên Nghịch", "Phàm Nhân"}

    searched = client.get("/api/comics", params={"search": "CULTIVATION"}).json()
    assert {c["title"] for c in searched} == {"Tiên Nghịch", "City Boss"}

    page = client.get("/api/comics", params={"page": 2, "limit": 2}).json()
    assert len(page) == 1


def test_list_with_invalid_paging_falls_back_to_defaults(client):
    _create(client, title="Only", category_id="ngon")

    for params in ({"page": 0}, {"page": "abc"}, {"limit": "many"}, {"limit": -1}, {"limit": 10_000}):
        response = client.get("/api/comics", params=params)
        assert response.status_code == 200, params
        assert [c["title"] for c in response.json()] == ["Only"]


def test_list_is_empty_when_store_is_down(down_client):
    response = down_client.get("/api/comics")

    assert response.status_code == 200
    assert response.json() == []
    assert down_client.get("/api/comics/grouped").json() == {}


def test_grouped_endpoint(client):
    _create(client, title="B", category_id="ngon", subcategory="Hàn")
    _create(client, title="A", category_id="ngon", subcategory="Hàn", chapter="2")

    grouped = client.get("/api/comics/grouped").json()

    assert list(grouped) == ["ngon"]
    group = grouped["ngon"][0]
    assert group["subcategory"] == "Hàn"
    assert [item["title"] for item in group["items"]] == ["A", "B"]
    assert group["items"][0]["chapter"] == "2"
    assert "lastUpdated" in group["items"][0]


def test_import_upserts(client):
    payload = {"comics": [
        {"title": "A", "category_id": "ngon", "chapter": "1"},
        {"title": "A", "category_id": "ngon", "chapter": "2"},
    ]}
    first = client.post("/api/comics/import", json=payload).json()
    assert first["count"] == 2
    assert first["message"] == "Successfully imported 2 comics"
    assert [c["chapter"] for c in first["imported"]] == ["1", "2"]

    client.post("/api/comics/import", json={"comics": [{"title": "A", "category_id": "ngon", "chapter": "3"}]})

    rows = client.get("/api/comics", params={"category": "ngon"}).json()
    assert len(rows) == 1
    assert rows[0]["chapter"] == "3"


@pytest.mark.parametrize("body", [{"comics": "nope"}, {}, [1, 2]])
def test_import_rejects_non_list(client, body):
    response = client.post("/api/comics/import", json=body)

    assert response.status_code == 400


def test_import_failure_is_generic_500(settings, monkeypatch):
    async def broken_upsert(session, comic_id, values):
        raise RuntimeError("secret internal detail")

    monkeypatch.setattr(comic_crud, "upsert", broken_upsert)

    with TestClient(create_app(settings), raise_server_exceptions=False) as client:
        response = client.post("/api/comics/import", json={"comics": [{"title": "A", "category_id": "ngon"}]})

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}


def test_stats_endpoint(client):
    _create(client, title="Reading", category_id="ngon", chapter="4")
    _create(client, title="Not started", category_id="ngon", chapter="0")

    assert client.get("/api/stats").json() == {
        "totalItems": 2,
        "totalCategories": 16,
        "readingCount": 1,
    }


def test_stats_when_store_is_down(down_client):
    response = down_client.get("/api/stats")

    assert response.status_code == 200
    assert response.json() == {"totalItems": 0, "totalCategories": 16, "readingCount": 0}


def test_debug_endpoint_reports_tables(client):
    _create(client, title="One", category_id="ngon")

    response = client.get("/api/debug/db")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["time"]
    assert {"categories", "comics"} <= set(body["tables"])
    assert body["counts"]["categories"] == 16
    assert body["counts"]["comics"] == 1
    assert body["env"]["database_url_configured"] is True
    assert body["env"]["mode"] == "test"


def test_debug_endpoint_reports_unreachable_store(down_client):
    response = down_client.get("/api/debug/db")

    assert response.status_code == 500
    body = response.json()
    assert body["status"] == "error"
    assert body["error"]
    assert body["env"]["database_url_length"] > 0
