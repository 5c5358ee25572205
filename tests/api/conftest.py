"""Shared fixtures for API tests."""
import pytest
from httpx import AsyncClient

DEFAULT_PASSWORD = "12345"  # noqa: S105


async def signup_and_signin(
    client: AsyncClient,
    email: str,
    password: str = DEFAULT_PASSWORD,
) -> dict[str, str]:
    """Register a user, sign in, and return Authorization headers for them."""
    response = await client.post("/auth/signup", json={"email": email, "password": password})
    assert response.status_code == 201, response.text

    response = await client.post("/auth/signin", json={"email": email, "password": password})
    assert response.status_code == 200, response.text

    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
async def auth_headers(client: AsyncClient) -> dict[str, str]:
    """Authorization headers for a freshly registered user."""
    return await signup_and_signin(client, "pedro@santiago.com")


@pytest.fixture
async def other_auth_headers(client: AsyncClient) -> dict[str, str]:
    """Authorization headers for a second, unrelated user."""
    return await signup_and_signin(client, "someone@else.com")
