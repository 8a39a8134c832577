"""Integration tests for the /ProductReviews endpoints."""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from product_reviews import app
from product_reviews.db.cache import ReviewCache
from product_reviews.reviews.repository import ReviewRepository
from product_reviews.reviews.routes import get_review_service
from product_reviews.reviews.service import ReviewService
from tests.conftest import make_headers

HIDE = [{"op": "replace", "path": "/isHidden", "value": True}]


def _create(client, headers, **overrides):
    body = {"header": "Great", "content": "Loved it", "productId": 7}
    body.update(overrides)
    return client.post("/ProductReviews/Create", json=body, headers=headers)


class TestCreateProductReview:
    def test_create_returns_created_review_with_location(self, client, auth_headers):
        response = _create(client, auth_headers)

        assert response.status_code == 201
        data = response.json()
        assert data["id"] == 1
        assert data["header"] == "Great"
        assert data["content"] == "Loved it"
        assert data["productId"] == 7
        assert data["isHidden"] is False
        assert "date" in data
        assert response.headers["location"].endswith("/ProductReviews/1")

    def test_create_ignores_server_assigned_fields(self, client, auth_headers):
        response = _create(
            client,
            auth_headers,
            id=500,
            date="1999-01-01T00:00:00",
            isHidden=True,
        )

        assert response.status_code == 201
        data = response.json()
        assert data["id"] == 1
        assert data["isHidden"] is False
        assert not data["date"].startswith("1999")

    def test_create_without_body_is_bad_request(self, client, auth_headers):
        response = client.post("/ProductReviews/Create", headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["error_code"] == "invalid_argument"

    @pytest.mark.parametrize("field", ["header", "content"])
    def test_create_with_empty_text_is_rejected(self, client, auth_headers, field):
        response = _create(client, auth_headers, **{field: ""})

        assert response.status_code == 422

    def test_created_review_is_added_to_populated_cache(self, client, auth_headers, cache):
        cache.populate([])

        _create(client, auth_headers)

        assert [r.id for r in cache.get_all()] == [1]


class TestGetProductReviews:
    def test_list_all(self, client, auth_headers):
        _create(client, auth_headers)
        _create(client, auth_headers, productId=8)

        response = client.get("/ProductReviews", headers=auth_headers)

        assert response.status_code == 200
        assert [r["productId"] for r in response.json()] == [7, 8]

    def test_get_by_id(self, client, auth_headers):
        created = _create(client, auth_headers).json()

        response = client.get(f"/ProductReviews/{created['id']}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == created

    def test_get_unknown_is_not_found(self, client, auth_headers):
        response = client.get("/ProductReviews/99", headers=auth_headers)

        assert response.status_code == 404
        assert response.json()["error_code"] == "review_not_found"

    @pytest.mark.parametrize("path", ["/ProductReviews/0", "/ProductReviews/Visible/-3"])
    def test_ids_below_one_are_bad_requests(self, client, auth_headers, path):
        response = client.get(path, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["message"] == "IDs cannot be less than 1."


class TestUpdateProductReviewVisibility:
    def test_visibility_flow(self, client, auth_headers):
        created = _create(client, auth_headers).json()
        assert created["id"] == 1

        visible = client.get("/ProductReviews/Visible/7", headers=auth_headers)
        assert visible.json() == [created]

        response = client.patch("/ProductReviews/Visibility/1", json=HIDE, headers=auth_headers)
        assert response.status_code == 204
        assert response.content == b""

        visible = client.get("/ProductReviews/Visible/7", headers=auth_headers)
        assert visible.json() == []

        fetched = client.get("/ProductReviews/1", headers=auth_headers).json()
        assert fetched["isHidden"] is True

    def test_patch_unknown_is_not_found(self, client, auth_headers):
        response = client.patch("/ProductReviews/Visibility/5", json=HIDE, headers=auth_headers)

        assert response.status_code == 404

    def test_patch_without_body_is_bad_request(self, client, auth_headers):
        _create(client, auth_headers)

        response = client.patch("/ProductReviews/Visibility/1", headers=auth_headers)

        assert response.status_code == 400

    def test_patch_with_bad_value_reports_field_errors(self, client, auth_headers):
        _create(client, auth_headers)

        response = client.patch(
            "/ProductReviews/Visibility/1",
            json=[{"op": "replace", "path": "/isHidden", "value": "sometimes"}],
            headers=auth_headers,
        )

        assert response.status_code == 422
        body = response.json()
        assert body["error_code"] == "validation_failed"
        assert "isHidden" in body["errors"]

    def test_patch_cannot_change_header(self, client, auth_headers):
        _create(client, auth_headers)

        response = client.patch(
            "/ProductReviews/Visibility/1",
            json=[{"op": "add", "path": "/header", "value": "Edited"}],
            headers=auth_headers,
        )

        assert response.status_code == 422
        assert client.get("/ProductReviews/1", headers=auth_headers).json()["header"] == "Great"


class TestAuthorization:
    def test_missing_token_is_unauthorized(self, client):
        response = client.get("/ProductReviews")

        assert response.status_code == 401
        assert response.json()["error_code"] == "invalid_token"

    def test_garbage_token_is_unauthorized(self, client):
        response = client.get("/ProductReviews", headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == 401

    def test_missing_capability_is_forbidden(self, client):
        headers = make_headers("ReadReviews")

        assert client.get("/ProductReviews", headers=headers).status_code == 200
        response = _create(client, headers)
        assert response.status_code == 403
        assert response.json()["error_code"] == "insufficient_permission"


def test_store_failure_is_server_error(auth_headers):
    store = AsyncMock(spec=ReviewRepository)
    store.list_all.side_effect = OperationalError("SELECT", {}, Exception("database is down"))
    app.dependency_overrides[get_review_service] = lambda: ReviewService(store, ReviewCache())
    try:
        response = TestClient(app, raise_server_exceptions=False).get(
            "/ProductReviews", headers=auth_headers
        )
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json()["error_code"] == "server_error"


def test_health_reports_cache_state(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["review_cache"] == {"populated": False, "size": 0}
