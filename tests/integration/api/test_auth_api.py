"""HTTP tests for the authentication endpoints and error mapping."""

from unittest.mock import patch

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError

from warden.infrastructure.api.dependencies import get_token_service
from warden.infrastructure.auth import JWTService

REGISTER_PAYLOAD = {
    "first_name": "Ada",
    "last_name": "Lovelace",
    "email": "ada@example.com",
    "password": "engine-42",
}


async def _register(client: AsyncClient, **overrides):
    return await client.post("/api/v1/auth/register", json={**REGISTER_PAYLOAD, **overrides})


async def _login(client: AsyncClient, email="ada@example.com", password="engine-42"):
    return await client.post(
        "/api/v1/auth/login", json={"email": email, "password": password}
    )


@pytest.mark.asyncio
async def test_register(client: AsyncClient):
    res = await _register(client)

    assert res.status_code == 201
    assert res.json() == {"message": "User registered successfully"}


@pytest.mark.asyncio
async def test_register_duplicate_email(client: AsyncClient):
    await _register(client)

    res = await _register(client, first_name="Someone", password="else")

    assert res.status_code == 409
    assert res.json() == {"error": "User already exists"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {**REGISTER_PAYLOAD, "email": "not-an-email"},
        {k: v for k, v in REGISTER_PAYLOAD.items() if k != "last_name"},
        {**REGISTER_PAYLOAD, "password": ""},
    ],
)
async def test_register_invalid_input(client: AsyncClient, payload):
    res = await client.post("/api/v1/auth/register", json=payload)

    assert res.status_code == 400
    assert res.json() == {"error": "Invalid input"}


@pytest.mark.asyncio
async def test_login(client: AsyncClient, jwt_service):
    await _register(client)

    res = await _login(client)

    assert res.status_code == 200
    data = res.json()
    assert set(data) == {"token", "user"}
    assert set(data["user"]) == {"id", "first_name", "last_name", "email"}
    assert data["user"]["email"] == "ada@example.com"
    payload = jwt_service.decode_token(data["token"])
    assert payload["sub"] == str(data["user"]["id"])
    assert payload["exp"] - payload["iat"] == 86400


@pytest.mark.asyncio
async def test_login_failures_look_the_same(client: AsyncClient):
    await _register(client)

    wrong_password = await _login(client, password="wrong")
    unknown_email = await _login(client, email="nobody@example.com")

    assert wrong_password.status_code == unknown_email.status_code == 400
    assert wrong_password.json() == unknown_email.json() == {"error": "Invalid input"}


@pytest.mark.asyncio
async def test_login_without_signing_secret(app, client: AsyncClient):
    app.dependency_overrides[get_token_service] = lambda: JWTService(None)
    await _register(client)

    res = await _login(client)

    assert res.status_code == 500
    assert res.json() == {"error": "Internal server error"}


@pytest.mark.asyncio
async def test_storage_failure_does_not_leak(client: AsyncClient):
    with patch(
        "warden.infrastructure.persistence.repositories.user_repository."
        "UserRepository.email_exists",
        side_effect=OperationalError("SELECT", {}, Exception("disk I/O error")),
    ):
        res = await _register(client)

    assert res.status_code == 500
    assert res.json() == {"error": "Internal server error"}
    assert "disk" not in res.text


@pytest.mark.asyncio
async def test_me(client: AsyncClient, authz_service):
    await _register(client)
    token = (await _login(client)).json()["token"]
    user_id = (await _login(client)).json()["user"]["id"]
    role = await authz_service.create_role("editor")
    permission = await authz_service.create_permission("article.publish", "publish", "article")
    await authz_service.grant_permissions_to_role(role.id, [permission.id])
    await authz_service.grant_roles_to_user(user_id, [role.id])

    res = await client.get(
        "/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"}
    )

    assert res.status_code == 200
    assert res.json() == {
        "user": {
            "id": user_id,
            "first_name": "Ada",
            "last_name": "Lovelace",
            "email": "ada@example.com",
        },
        "permissions": [
            {
                "id": permission.id,
                "name": "article.publish",
                "resource": "article",
                "action": "publish",
            }
        ],
    }


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "headers",
    [{}, {"Authorization": "Bearer not-a-token"}, {"Authorization": "Basic abc"}],
)
async def test_me_requires_valid_token(client: AsyncClient, headers):
    res = await client.get("/api/v1/auth/me", headers=headers)

    assert res.status_code == 401
    assert "error" in res.json()
    assert res.headers["WWW-Authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_me_for_deleted_account(client: AsyncClient, jwt_service):
    token = jwt_service.create_session_token(999, "ghost@example.com")

    res = await client.get(
        "/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"}
    )

    assert res.status_code == 404
    assert res.json() == {"error": "Not found"}
