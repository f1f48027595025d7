"""
tests.test_api

HTTP-level tests for the token endpoints.

Responsibilities:
- Ensure core failures map to 403 and successful issuance to the payload shape.
"""

from __future__ import annotations

import base64

import httpx
import pytest

from tests.conftest import MEMBER_EMAIL, MEMBER_PASSWORD, FakeClock
from tokenkeeper.api.app import create_app
from tokenkeeper.auth.resolver import MemberDirectory
from tokenkeeper.settings import Settings


def _basic(identifier: str, password: str) -> dict[str, str]:
    raw = base64.b64encode(f"{identifier}:{password}".encode()).decode()
    return {"Authorization": f"Basic {raw}"}


def _client(app) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test")


@pytest.fixture
def app(settings: Settings, directory: MemberDirectory, clock: FakeClock):
    return create_app(settings=settings, resolver=directory, clock=clock)


@pytest.mark.asyncio
async def test_health_endpoints(app) -> None:
    async with _client(app) as client:
        r = await client.get("/healthz")
        assert r.status_code == 200
        assert r.json()["status"] == "ok"

        r = await client.get("/readyz")
        assert r.status_code == 200
        assert r.json()["status"] == "ready"


@pytest.mark.asyncio
async def test_successful_token_request(app) -> None:
    async with _client(app) as client:
        r = await client.post("/v1/token", headers=_basic(MEMBER_EMAIL, MEMBER_PASSWORD))

    assert r.status_code == 200
    body = r.json()
    assert list(body) == ["token", "member"]
    assert body["member"]["email"] == MEMBER_EMAIL
    assert "x-request-id" in r.headers


@pytest.mark.asyncio
async def test_token_request_without_member(app) -> None:
    async with _client(app) as client:
        r = await client.post(
            "/v1/token",
            params={"include_member": "false"},
            headers=_basic(MEMBER_EMAIL, MEMBER_PASSWORD),
        )

    assert r.status_code == 200
    assert list(r.json()) == ["token"]


@pytest.mark.asyncio
async def test_failed_token_request_due_to_credentials(app) -> None:
    async with _client(app) as client:
        r = await client.post("/v1/token", headers=_basic(MEMBER_EMAIL, "my-wrong-test-password"))
        assert r.status_code == 403

        r = await client.post("/v1/token")
        assert r.status_code == 403


@pytest.mark.asyncio
async def test_failed_token_request_due_to_missing_secret(directory: MemberDirectory) -> None:
    app = create_app(settings=Settings(env="test", jwt_secret=None), resolver=directory)

    async with _client(app) as client:
        r = await client.post("/v1/token", headers=_basic(MEMBER_EMAIL, MEMBER_PASSWORD))
        assert r.status_code == 403
        assert "secret" in r.json()["detail"]

        r = await client.get("/readyz")
        assert r.status_code == 503


@pytest.mark.asyncio
async def test_login_renew_and_check(app, clock: FakeClock) -> None:
    async with _client(app) as client:
        r = await client.post(
            "/v1/token/login",
            json={"identifier": MEMBER_EMAIL, "password": MEMBER_PASSWORD, "include_member": False},
        )
        assert r.status_code == 200
        token = r.json()["token"]

        r = await client.post("/v1/token/check", json={"token": token})
        assert r.json() == {"valid": True}

        r = await client.post("/v1/token/renew", json={"token": token})
        assert r.json() == {"token": token, "renewed": False}

        clock.advance(hours=2)
        r = await client.post("/v1/token/renew", json={"token": token})
        assert r.status_code == 200
        assert r.json()["renewed"] is True
        assert r.json()["token"] != token


@pytest.mark.asyncio
async def test_renew_invalid_token_is_forbidden(app) -> None:
    async with _client(app) as client:
        r = await client.post("/v1/token/renew", json={"token": "not.a.token"})
        assert r.status_code == 403

        r = await client.post("/v1/token/check", json={"token": "not.a.token"})
        assert r.json() == {"valid": False}
