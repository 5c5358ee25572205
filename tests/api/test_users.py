"""Tests for the current-user endpoints and bearer token enforcement."""
from datetime import UTC, datetime, timedelta

import pytest
from httpx import AsyncClient

from core.config import Settings
from core.security import create_access_token


def _settings(**overrides: object) -> Settings:
    values = {
        "database_url": "sqlite+aiosqlite:///:memory:",
        "jwt_secret": "test-secret",
        **overrides,
    }
    return Settings(_env_file=None, **values)


@pytest.mark.parametrize(
    ("method", "path"),
    [
        ("GET", "/users/me"),
        ("PATCH", "/users/"),
        ("GET", "/bookmarks"),
        ("POST", "/bookmarks"),
        ("GET", "/bookmarks/1"),
        ("PATCH", "/bookmarks/1"),
        ("DELETE", "/bookmarks/1"),
    ],
)
async def test_protected_routes_require_token(
    client: AsyncClient, method: str, path: str,
) -> None:
    """Every protected route answers 401 without a bearer token."""
    response = await client.request(method, path, json={})
    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"
    assert response.json()["detail"] == "Not authenticated"


async def test_get_me_rejects_garbage_token(client: AsyncClient) -> None:
    """A token that isn't a JWT is rejected."""
    response = await client.get(
        "/users/me", headers={"Authorization": "Bearer not-a-jwt"},
    )
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid token"


async def test_get_me_rejects_non_bearer_scheme(client: AsyncClient) -> None:
    """Basic auth (or any other scheme) is treated as no credentials."""
    response = await client.get(
        "/users/me", headers={"Authorization": "Basic dXNlcjpwYXNz"},
    )
    assert response.status_code == 401


async def test_get_me_rejects_expired_token(
    client: AsyncClient, auth_headers: dict[str, str],
) -> None:
    """A correctly signed but expired token is rejected."""
    me = await client.get("/users/me", headers=auth_headers)
    user = me.json()

    token = create_access_token(
        user["id"],
        user["email"],
        _settings(),
        now=datetime.now(UTC) - timedelta(hours=1),
    )
    response = await client.get(
        "/users/me", headers={"Authorization": f"Bearer {token}"},
    )
    assert response.status_code == 401
    assert response.json()["detail"] == "Token has expired"


async def test_get_me_rejects_token_signed_with_other_secret(
    client: AsyncClient, auth_headers: dict[str, str],
) -> None:
    """A token signed with a different secret is rejected."""
    me = await client.get("/users/me", headers=auth_headers)
    user = me.json()

    token = create_access_token(
        user["id"], user["email"], _settings(jwt_secret="some-other-secret"),
    )
    response = await client.get(
        "/users/me", headers={"Authorization": f"Bearer {token}"},
    )
    assert response.status_code == 401


async def test_get_me_rejects_token_for_missing_user(client: AsyncClient) -> None:
    """A valid token whose subject doesn't exist is rejected."""
    token = create_access_token(424242, "ghost@example.com", _settings())
    response = await client.get(
        "/users/me", headers={"Authorization": f"Bearer {token}"},
    )
    assert response.status_code == 401
    assert response.json()["detail"] == "User not found"


async def test_get_me_returns_current_user(
    client: AsyncClient, auth_headers: dict[str, str],
) -> None:
    """Test that /users/me returns the signed-in user's profile."""
    response = await client.get("/users/me", headers=auth_headers)
    assert response.status_code == 200

    data = response.json()
    assert data["email"] == "pedro@santiago.com"
    assert set(data) == {"id", "email", "firstName", "lastName", "createdAt", "updatedAt"}


async def test_get_me_is_scoped_to_token_owner(
    client: AsyncClient,
    auth_headers: dict[str, str],
    other_auth_headers: dict[str, str],
) -> None:
    """Each token resolves to its own user."""
    me = await client.get("/users/me", headers=auth_headers)
    other = await client.get("/users/me", headers=other_auth_headers)

    assert me.json()["email"] == "pedro@santiago.com"
    assert other.json()["email"] == "someone@else.com"
    assert me.json()["id"] != other.json()["id"]


async def test_edit_me_updates_first_name_and_email(
    client: AsyncClient, auth_headers: dict[str, str],
) -> None:
    """Editing the profile returns the new values."""
    response = await client.patch(
        "/users/",
        json={"firstName": "Vladimir", "email": "santiago@bernabeu.com"},
        headers=auth_headers,
    )
    assert response.status_code == 200

    data = response.json()
    assert data["firstName"] == "Vladimir"
    assert data["email"] == "santiago@bernabeu.com"


async def test_edit_me_without_trailing_slash(
    client: AsyncClient, auth_headers: dict[str, str],
) -> None:
    """PATCH /users works the same as PATCH /users/."""
    response = await client.patch(
        "/users", json={"lastName": "Santiago"}, headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json()["lastName"] == "Santiago"


async def test_edit_me_only_touches_provided_fields(
    client: AsyncClient, auth_headers: dict[str, str],
) -> None:
    """Fields missing from the patch keep their values."""
    await client.patch(
        "/users/", json={"firstName": "Vladimir", "lastName": "Santiago"}, headers=auth_headers,
    )

    response = await client.patch(
        "/users/", json={"lastName": "Bernabeu"}, headers=auth_headers,
    )
    data = response.json()
    assert data["firstName"] == "Vladimir"
    assert data["lastName"] == "Bernabeu"
    assert data["email"] == "pedro@santiago.com"


async def test_edit_me_accepts_snake_case_fields(
    client: AsyncClient, auth_headers: dict[str, str],
) -> None:
    """Request bodies may use field names as well as camelCase aliases."""
    response = await client.patch(
        "/users/", json={"first_name": "Vladimir"}, headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json()["firstName"] == "Vladimir"


async def test_edit_me_persists_across_requests(
    client: AsyncClient, auth_headers: dict[str, str],
) -> None:
    """A subsequent GET /users/me sees the edit."""
    await client.patch("/users/", json={"firstName": "Vladimir"}, headers=auth_headers)

    response = await client.get("/users/me", headers=auth_headers)
    assert response.json()["firstName"] == "Vladimir"


async def test_edit_me_new_email_is_used_for_signin(
    client: AsyncClient, auth_headers: dict[str, str],
) -> None:
    """After changing email, signin works with the new one and not the old."""
    await client.patch(
        "/users/", json={"email": "santiago@bernabeu.com"}, headers=auth_headers,
    )

    new = await client.post(
        "/auth/signin", json={"email": "santiago@bernabeu.com", "password": "12345"},
    )
    old = await client.post(
        "/auth/signin", json={"email": "pedro@santiago.com", "password": "12345"},
    )
    assert new.status_code == 200
    assert old.status_code == 401


async def test_edit_me_rejects_email_of_other_user(
    client: AsyncClient,
    auth_headers: dict[str, str],
    other_auth_headers: dict[str, str],  # noqa: ARG001
) -> None:
    """Taking over another user's email is a conflict."""
    response = await client.patch(
        "/users/", json={"email": "someone@else.com"}, headers=auth_headers,
    )
    assert response.status_code == 409


async def test_edit_me_keeping_own_email_is_allowed(
    client: AsyncClient, auth_headers: dict[str, str],
) -> None:
    """Re-submitting the current email is not a conflict."""
    response = await client.patch(
        "/users/", json={"email": "pedro@santiago.com"}, headers=auth_headers,
    )
    assert response.status_code == 200


@pytest.mark.parametrize(
    "body",
    [{"email": "not-an-email"}, {"email": None}],
    ids=["malformed-email", "null-email"],
)
async def test_edit_me_rejects_invalid_email(
    client: AsyncClient, auth_headers: dict[str, str], body: dict,
) -> None:
    """Email must stay a valid address."""
    response = await client.patch("/users/", json=body, headers=auth_headers)
    assert response.status_code == 400
