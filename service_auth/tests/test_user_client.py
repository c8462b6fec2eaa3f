"""
Unit tests for the Auth service's User client and the RPC transport.
"""

import json

import httpx
import pytest

from service_auth.app.adapters.user_client import UserClient
from shared.errors import AlreadyExistsError, NotFoundError, ServiceError, UnavailableError
from shared.rpc import CallContext, RpcClient


USER_JSON = {
    "id": "3f0c4a5e-0000-4000-8000-000000000001",
    "email": "a@example.com",
    "created_at": "2024-01-01 00:00:00+00:00",
}


def make_client(handler) -> UserClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://user1:50053")
    rpc = RpcClient("user.UserService", "http://user1:50053", timeout=5.0, client=http_client)
    return UserClient("http://user1:50053", rpc=rpc)


@pytest.mark.asyncio
async def test_get_profile_request_shape():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        seen["timeout"] = request.headers.get("x-rpc-timeout")
        return httpx.Response(200, json={"user": USER_JSON})

    client = make_client(handler)
    user = await client.get_profile("a@example.com", "secret")

    assert user.id == USER_JSON["id"]
    assert seen["path"] == "/user.UserService/GetProfile"
    assert seen["body"] == {"email": "a@example.com", "password": "secret"}
    assert float(seen["timeout"]) == pytest.approx(5.0)


@pytest.mark.asyncio
async def test_error_code_is_rebuilt():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"code": "NOT_FOUND", "message": "user not found", "details": {}})

    client = make_client(handler)

    with pytest.raises(NotFoundError) as exc_info:
        await client.get_profile("missing@example.com")
    assert exc_info.value.message == "user not found"


@pytest.mark.asyncio
async def test_already_exists_on_create():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(409, json={"code": "ALREADY_EXISTS", "message": "user already exists"})

    client = make_client(handler)

    with pytest.raises(AlreadyExistsError):
        await client.create_user("a@example.com", "secret")


@pytest.mark.asyncio
async def test_non_json_error_is_internal():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="bad gateway")

    client = make_client(handler)

    with pytest.raises(ServiceError):
        await client.get_profile("a@example.com")


@pytest.mark.asyncio
async def test_transport_failure_is_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = make_client(handler)

    with pytest.raises(UnavailableError):
        await client.get_profile("a@example.com")


@pytest.mark.asyncio
async def test_deadline_budget_is_forwarded():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["timeout"] = float(request.headers["x-rpc-timeout"])
        return httpx.Response(200, json={"user": USER_JSON})

    client = make_client(handler)
    await client.get_profile("a@example.com", ctx=CallContext.with_timeout(1.0))

    assert 0 < seen["timeout"] <= 1.0


@pytest.mark.asyncio
async def test_expired_deadline_fails_without_calling():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={"user": USER_JSON})

    client = make_client(handler)

    with pytest.raises(UnavailableError) as exc_info:
        await client.get_profile("a@example.com", ctx=CallContext.with_timeout(0.0))
    assert exc_info.value.message == "deadline exceeded"
    assert calls == []
