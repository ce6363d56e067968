"""Tests for the REST surface of the reading list service."""
from __future__ import annotations

import pytest  # type: ignore[import-not-found]
from fastapi.testclient import TestClient

from reading_list_api.app.core.errors import NOT_FOUND_MESSAGE
from reading_list_api.app.main import create_app
from reading_list_api.app.services.book_store import INVALID_STATUS_MESSAGE, NON_TEXT_FIELDS_MESSAGE

BOOKS = "/reading-list/books"


def _create(api, title="Dune", author="Herbert", status="to_read"):
    return api.post(BOOKS, json={"title": title, "author": author, "status": status})


def test_create_then_get_by_id(api):
    resp = _create(api)
    assert resp.status_code == 201
    body = resp.json()
    assert body["title"] == "Dune"
    assert body["author"] == "Herbert"
    assert body["status"] == "to_read"
    assert body["id"]

    fetched = api.get(f"{BOOKS}/{body['id']}")
    assert fetched.status_code == 200
    assert fetched.json() == body


def test_create_with_disallowed_status_is_rejected(api, store):
    resp = _create(api, status="finished")
    assert resp.status_code == 400
    assert resp.json() == {"error": INVALID_STATUS_MESSAGE}
    assert len(store) == 0
    assert api.get(BOOKS).json() == {}


def test_create_with_missing_fields_is_rejected(api, store):
    resp = api.post(BOOKS, json={"status": "read"})
    assert resp.status_code == 400
    assert "empty" in resp.json()["error"]
    assert len(store) == 0


@pytest.mark.parametrize("body", ["not json", "[1, 2]"])
def test_create_with_malformed_body_is_bad_request(api, body):
    resp = api.post(BOOKS, content=body, headers={"Content-Type": "application/json"})
    assert resp.status_code == 400
    assert "error" in resp.json()


def test_update_status_changes_only_status(api):
    book = _create(api).json()
    resp = api.put(f"{BOOKS}/{book['id']}", json={"status": "reading"})
    assert resp.status_code == 200
    assert resp.json() == {"id": book["id"], "status": "reading"}

    fetched = api.get(f"{BOOKS}/{book['id']}").json()
    assert fetched == {**book, "status": "reading"}


def test_update_unknown_id_is_not_found(api):
    resp = api.put(f"{BOOKS}/does-not-exist", json={"status": "read"})
    assert resp.status_code == 404
    assert "error" in resp.json()


def test_update_invalid_status_is_bad_request(api):
    book = _create(api).json()
    resp = api.put(f"{BOOKS}/{book['id']}", json={"status": "finished"})
    assert resp.status_code == 400
    assert api.get(f"{BOOKS}/{book['id']}").json()["status"] == "to_read"


def test_get_unknown_id_is_not_found(api):
    resp = api.get(f"{BOOKS}/nope")
    assert resp.status_code == 404


def test_delete_returns_id_and_removes_record(api):
    book = _create(api).json()
    resp = api.delete(f"{BOOKS}/{book['id']}")
    assert resp.status_code == 200
    assert resp.json() == {"id": book["id"]}
    assert api.get(f"{BOOKS}/{book['id']}").status_code == 404


def test_delete_unknown_id_leaves_collection_unchanged(api):
    _create(api)
    resp = api.delete(f"{BOOKS}/nope")
    assert resp.status_code == 404
    assert len(api.get(BOOKS).json()) == 1


def test_second_delete_of_same_id_is_not_found(api):
    book = _create(api).json()
    assert api.delete(f"{BOOKS}/{book['id']}").status_code == 200
    assert api.delete(f"{BOOKS}/{book['id']}").status_code == 404


def test_list_counts_after_creates_and_deletes(api):
    ids = [_create(api, title=f"Book {i}").json()["id"] for i in range(6)]
    for book_id in ids[:2]:
        assert api.delete(f"{BOOKS}/{book_id}").status_code == 200

    listing = api.get(BOOKS)
    assert listing.status_code == 200
    data = listing.json()
    assert list(data) == ids[2:]
    for book_id, record in data.items():
        assert record["id"] == book_id
        assert api.get(f"{BOOKS}/{book_id}").status_code == 200


def test_healthz_returns_empty_ok(api):
    resp = api.get("/healthz")
    assert resp.status_code == 200
    assert resp.content == b""


def test_unmatched_route_has_generic_error(api):
    resp = api.get("/nothing/here")
    assert resp.status_code == 404
    assert resp.json() == {"error": NOT_FOUND_MESSAGE}


def test_unhandled_error_is_500_with_message():
    class BrokenStore:
        def list(self):
            raise RuntimeError("store exploded")

    app = create_app(BrokenStore())  # type: ignore[arg-type]
    with TestClient(app, raise_server_exceptions=False) as client:
        resp = client.get(BOOKS)
    assert resp.status_code == 500
    assert resp.json() == {"error": "store exploded"}


def test_apps_do_not_share_books():
    with TestClient(create_app()) as first, TestClient(create_app()) as second:
        _create(first)
        assert len(first.get(BOOKS).json()) == 1
        assert second.get(BOOKS).json() == {}


@pytest.mark.parametrize(
    "method,path",
    [
        ("PATCH", f"{BOOKS}/some-id"),
        ("POST", "/healthz"),
        ("DELETE", BOOKS),
        ("PUT", BOOKS),
    ],
)
def test_wrong_method_has_generic_not_found(api, method, path):
    resp = api.request(method, path)
    assert resp.status_code == 404
    assert resp.json() == {"error": NOT_FOUND_MESSAGE}
    assert "allow" not in resp.headers


def test_create_with_numeric_status_is_rejected(api, store):
    resp = _create(api, status=1)
    assert resp.status_code == 400
    assert resp.json() == {"error": INVALID_STATUS_MESSAGE}
    assert len(store) == 0


def test_create_with_numeric_title_is_rejected(api, store):
    resp = _create(api, title=5)
    assert resp.status_code == 400
    assert resp.json() == {"error": NON_TEXT_FIELDS_MESSAGE}
    assert len(store) == 0


def test_update_with_numeric_status_is_bad_request(api):
    book = _create(api).json()
    resp = api.put(f"{BOOKS}/{book['id']}", json={"status": 1})
    assert resp.status_code == 400
    assert resp.json() == {"error": INVALID_STATUS_MESSAGE}
    assert api.get(f"{BOOKS}/{book['id']}").json()["status"] == "to_read"


def test_collection_answers_with_trailing_slash(api):
    created = api.post(f"{BOOKS}/", json={"title": "Emma", "author": "Austen", "status": "read"})
    assert created.status_code == 201

    resp = api.get(f"{BOOKS}/", follow_redirects=False)
    assert resp.status_code == 200
    assert resp.json() == {created.json()["id"]: created.json()}
