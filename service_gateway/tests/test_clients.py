"""
Unit tests for Gateway RPC clients.
"""

import json

import httpx
import pytest

from service_gateway.app.adapters import GeoClient, UserClient
from shared.errors import AuthenticationError
from shared.rpc import CallContext, RpcClient


def make_rpc(service, handler):
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://backend")
    return RpcClient(service, "http://backend", timeout=5.0, client=http_client)


@pytest.mark.asyncio
async def test_geocode_forwards_metadata():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        seen["authorization"] = request.headers.get("authorization")
        return httpx.Response(200, json={"addresses": []})

    client = GeoClient("http://backend", rpc=make_rpc("geo.GeoService", handler))
    ctx = CallContext.with_timeout(5.0, authorization="Bearer abc")

    response = await client.geocode("55.7558,37.6173", ctx)

    assert response.addresses == []
    assert seen["path"] == "/geo.GeoService/Geocode"
    assert seen["body"] == {"address": "55.7558,37.6173"}
    assert seen["authorization"] == "Bearer abc"


@pytest.mark.asyncio
async def test_geo_error_is_rebuilt():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"code": "UNAUTHENTICATED", "message": "no token provided"})

    client = GeoClient("http://backend", rpc=make_rpc("geo.GeoService", handler))

    with pytest.raises(AuthenticationError) as exc_info:
        await client.search_address("x", CallContext())
    assert exc_info.value.message == "no token provided"


@pytest.mark.asyncio
async def test_list_users_request():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={
            "users": [{"id": "1", "email": "a@example.com", "created_at": "2024-01-01 00:00:00+00:00"}],
            "total": 1,
        })

    client = UserClient("http://backend", rpc=make_rpc("user.UserService", handler))

    response = await client.list_users(1, 10, CallContext())

    assert seen["path"] == "/user.UserService/ListUsers"
    assert seen["body"] == {"page": 1, "per_page": 10}
    assert response.total == 1
    assert response.users[0].email == "a@example.com"


@pytest.mark.asyncio
async def test_non_ascii_authorization_forwarded_as_raw_bytes():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["authorization"] = dict(request.headers.raw)[b"authorization"]
        return httpx.Response(401, json={"code": "UNAUTHENTICATED", "message": "token is not valid"})

    client = GeoClient("http://backend", rpc=make_rpc("geo.GeoService", handler))
    ctx = CallContext.with_timeout(5.0, authorization="Bearer \xe9t\xe9")

    with pytest.raises(AuthenticationError):
        await client.search_address("x", ctx)
    assert seen["authorization"] == b"Bearer \xe9t\xe9"
