"""
HTTP-level tests for the FastAPI routers.

The application lifespan is not started; each test puts a service container built on in-memory
collections onto `app.state.services`.
"""
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from blog_platform.main import app
from blog_platform.utils.errors import AuthError, DependencyError
from tests.factories import make_blog, make_user


@pytest.fixture
def client(services):
    app.state.services = services
    yield TestClient(app)
    del app.state.services


@pytest.fixture
def author(users_collection):
    user = make_user("ada")
    users_collection.documents.append(user)
    return user


@pytest.fixture
def auth_headers(author, credentials):
    return {"Authorization": f"Bearer {credentials.create_session_token(author['_id'])}"}


def _blog_body(**overrides):
    body = {
        "title": "Hello, World!",
        "banner": "https://img.example.com/banner.jpeg",
        "desc": "A first post",
        "tags": ["Python"],
        "content": {"blocks": [{"type": "paragraph", "data": {"text": "Hi"}}]},
        "draft": False,
    }
    body.update(overrides)
    return body


# ============================================================================
# Auth
# ============================================================================

def test_sign_up_returns_session_profile(client):
    response = client.post(
        "/sign-up", json={"fullname": "Ada Lovelace", "email": "ada@example.com", "password": "Secret12"}
    )

    assert response.status_code == 200
    data = response.json()
    assert set(data) == {"access_token", "profile_img", "username", "fullname"}
    assert data["username"] == "ada"


def test_sign_up_validation_error(client):
    response = client.post("/sign-up", json={"fullname": "Al", "email": "ada@example.com", "password": "Secret12"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Full Name must be at least 3 letters long"


def test_sign_up_duplicate_email_is_conflict(client, author):
    response = client.post(
        "/sign-up", json={"fullname": "Ada Again", "email": "ada@example.com", "password": "Secret12"}
    )

    assert response.status_code == 409
    assert response.json()["detail"] == "Email already exists"


def test_sign_in_wrong_password(client):
    client.post("/sign-up", json={"fullname": "Ada Lovelace", "email": "ada@example.com", "password": "Secret12"})

    response = client.post("/sign-in", json={"email": "ada@example.com", "password": "Wrong123"})

    assert response.status_code == 401


def test_sign_in_unknown_email(client):
    response = client.post("/sign-in", json={"email": "nobody@example.com", "password": "Secret12"})

    assert response.status_code == 404


def test_google_auth_with_bad_token(client, services):
    services.credentials.verify_federated_token = AsyncMock(side_effect=AuthError("Failed"))

    response = client.post("/google-auth", json={"access_token": "bad"})

    assert response.status_code == 401


# ============================================================================
# Authoring
# ============================================================================

def test_create_blog_without_token(client):
    response = client.post("/create-blog", json=_blog_body())

    assert response.status_code == 401
    assert response.json()["detail"] == "No access token"


def test_create_blog_with_invalid_token(client):
    response = client.post("/create-blog", json=_blog_body(), headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 403
    assert response.json()["detail"] == "Access token is invalid"


def test_create_blog_success(client, auth_headers, blogs_collection, users_collection):
    response = client.post("/create-blog", json=_blog_body(), headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert list(data) == ["id"]
    assert data["id"].startswith("Hello-World-")
    assert blogs_collection.documents[0]["blog_id"] == data["id"]
    assert users_collection.documents[0]["account_info"]["total_posts"] == 1


def test_create_blog_partial_failure_is_207(client, services, auth_headers, blogs_collection):
    services.identity_store.record_publication = AsyncMock(side_effect=DependencyError("Failed to update total posts number"))

    response = client.post("/create-blog", json=_blog_body(), headers=auth_headers)

    assert response.status_code == 207
    data = response.json()
    assert data["id"] == blogs_collection.documents[0]["blog_id"]
    assert data["warning"]


def test_create_blog_validation_error(client, auth_headers, blogs_collection):
    response = client.post("/create-blog", json=_blog_body(tags=[]), headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["detail"] == "Provide tags to publish it, max 10 tags"
    assert blogs_collection.documents == []


def test_create_blog_unexpected_error_is_500(client, services, auth_headers):
    services.publishing.publish = AsyncMock(side_effect=RuntimeError("boom"))

    response = client.post("/create-blog", json=_blog_body(), headers=auth_headers)

    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to create blog"


# ============================================================================
# Discovery
# ============================================================================

@pytest.fixture
def published(blogs_collection, author):
    for i in range(6):
        blogs_collection.documents.append(make_blog(author["_id"], f"blog-{i}", minutes=i, reads=i))
    return blogs_collection


def test_latest_blogs(client, published):
    response = client.post("/latest-blogs", json={"page": 2})

    assert response.status_code == 200
    assert [blog["blog_id"] for blog in response.json()["blogs"]] == ["blog-0"]


def test_all_latest_blogs_count(client, published):
    response = client.post("/all-latest-blogs-count")

    assert response.json() == {"totalDocs": 6}


def test_trending_blogs(client, published):
    response = client.get("/trending-blogs")

    assert [blog["blog_id"] for blog in response.json()["blogs"]] == ["blog-5", "blog-4", "blog-3", "blog-2", "blog-1"]


def test_search_blogs_and_count(client, published):
    response = client.post("/search-blogs", json={"tag": "python", "page": 1, "eliminate_blog": "blog-5"})
    count = client.post("/search-blogs-count", json={"tag": "python"})

    assert [blog["blog_id"] for blog in response.json()["blogs"]] == ["blog-4", "blog-3", "blog-2", "blog-1", "blog-0"]
    assert count.json() == {"totalDocs": 6}


def test_search_blogs_without_filter_is_400(client, published):
    response = client.post("/search-blogs", json={"page": 1})

    assert response.status_code == 400


def test_get_blog(client, published, author):
    response = client.post("/get-blog", json={"blog_id": "blog-3"})

    assert response.status_code == 200
    blog = response.json()["blog"]
    assert blog["activity"]["total_reads"] == 4
    assert blog["author"]["personal_info"]["username"] == "ada"


def test_get_blog_not_found(client, published):
    response = client.post("/get-blog", json={"blog_id": "missing"})

    assert response.status_code == 404


def test_search_users(client, author):
    response = client.post("/search-users", json={"query": "AD"})

    assert response.json()["users"][0]["personal_info"]["username"] == "ada"


def test_get_profile(client, author):
    response = client.post("/get-profile", json={"username": "ada"})

    assert response.status_code == 200
    assert "password" not in response.json()["personal_info"]


def test_get_profile_not_found(client):
    response = client.post("/get-profile", json={"username": "nobody"})

    assert response.status_code == 404


# ============================================================================
# Uploads and health
# ============================================================================

def test_get_upload_url(client, storage):
    response = client.get("/get-upload-url")

    assert response.status_code == 200
    assert response.json() == {"uploadURL": storage.generate_upload_url.return_value}


def test_get_upload_url_failure(client, storage):
    storage.generate_upload_url.side_effect = DependencyError("Failed to generate upload URL")

    response = client.get("/get-upload-url")

    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to generate upload URL"


def test_health_ok(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["database"] is True


def test_health_database_down(client, services):
    services.database.health_check = AsyncMock(return_value=False)

    response = client.get("/health")

    assert response.status_code == 503


def test_search_blogs_limit_zero_uses_default_page_size(client, published):
    response = client.post("/search-blogs", json={"tag": "python", "page": 1, "limit": 0})

    assert response.status_code == 200
    assert len(response.json()["blogs"]) == 5


def test_service_container_only_carries_request_services(services):
    assert not hasattr(services, "reconciliation")
