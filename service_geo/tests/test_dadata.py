"""
Unit tests for the DaData provider.
"""

import json

import httpx
import pytest

from service_geo.app.providers.base import ProviderError
from service_geo.app.providers.dadata import DaDataProvider, parse_suggestions
from shared.circuit_breaker import CircuitBreaker
from shared.contracts import Address
from shared.test_helpers import TestDataFactory


ADDRESS = TestDataFactory.sukharevskaya()


def make_provider(handler, circuit_breaker=None) -> DaDataProvider:
    client = httpx.AsyncClient(
        transport=httpx.MockTransport(handler),
        base_url="https://suggestions.dadata.ru"
    )
    return DaDataProvider(
        "https://suggestions.dadata.ru",
        "api-key",
        "secret-key",
        client=client,
        circuit_breaker=circuit_breaker,
    )


def suggestions(*items):
    return {"suggestions": list(items)}


@pytest.mark.asyncio
async def test_address_search_request():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["headers"] = request.headers
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=suggestions(TestDataFactory.dadata_suggestion(ADDRESS)))

    provider = make_provider(handler)
    addresses = await provider.address_search("сухаревская 11")

    assert addresses == [ADDRESS]
    assert seen["method"] == "POST"
    assert seen["path"] == "/suggestions/api/4_1/rs/suggest/address"
    assert seen["body"] == {"query": "сухаревская 11"}
    assert seen["headers"]["Authorization"] == "Token api-key"
    assert seen["headers"]["X-Secret"] == "secret-key"
    assert seen["headers"]["Accept"] == "application/json"
    assert seen["headers"]["Content-Type"] == "application/json"


@pytest.mark.asyncio
async def test_geocode_sends_numbers():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=suggestions(TestDataFactory.dadata_suggestion(ADDRESS)))

    provider = make_provider(handler)
    addresses = await provider.geocode("55.77412", "37.624065")

    assert addresses == [ADDRESS]
    assert seen["path"] == "/suggestions/api/4_1/rs/geolocate/address"
    assert seen["body"] == {"lat": 55.77412, "lon": 37.624065}


@pytest.mark.asyncio
@pytest.mark.parametrize("lat, lon", [("abc", "37.6"), ("55.7", ""), ("nan", "37.6"), ("inf", "1")])
async def test_geocode_rejects_non_numeric_coordinates(lat, lon):
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json=suggestions())

    provider = make_provider(handler)

    with pytest.raises(ProviderError):
        await provider.geocode(lat, lon)
    assert calls == []


@pytest.mark.asyncio
async def test_error_status():
    provider = make_provider(lambda request: httpx.Response(403, json={"message": "Forbidden"}))

    with pytest.raises(ProviderError) as exc_info:
        await provider.address_search("москва")
    assert "403" in str(exc_info.value)


@pytest.mark.asyncio
async def test_malformed_body():
    provider = make_provider(lambda request: httpx.Response(200, text="<html>"))

    with pytest.raises(ProviderError):
        await provider.address_search("москва")


@pytest.mark.asyncio
async def test_transport_error_does_not_leak_credentials():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    provider = make_provider(handler)

    with pytest.raises(ProviderError) as exc_info:
        await provider.address_search("москва")
    assert "api-key" not in str(exc_info.value)
    assert "secret-key" not in str(exc_info.value)


@pytest.mark.asyncio
async def test_breaker_opens_after_repeated_failures():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(500)

    breaker = CircuitBreaker(failure_threshold=2, recovery_timeout=60.0, name="dadata-test")
    provider = make_provider(handler, circuit_breaker=breaker)

    for _ in range(2):
        with pytest.raises(ProviderError):
            await provider.address_search("москва")

    with pytest.raises(ProviderError) as exc_info:
        await provider.address_search("москва")

    assert "open" in str(exc_info.value)
    assert len(calls) == 2
    assert breaker.is_open()


def test_parse_settlement_fallback_and_nulls():
    body = suggestions({
        "value": "Московская обл, деревня Ивановка",
        "data": {
            "city": None,
            "settlement": "Ивановка",
            "street": None,
            "house": None,
            "geo_lat": "55.1",
            "geo_lon": None,
        },
    })

    assert parse_suggestions(body) == [
        Address(city="Ивановка", street="", house="", lat="55.1", lon="")
    ]


def test_parse_missing_data():
    assert parse_suggestions(suggestions({"value": "x"})) == [Address()]


def test_parse_empty():
    assert parse_suggestions({"suggestions": []}) == []
    assert parse_suggestions({}) == []


@pytest.mark.parametrize("body", [[], "text", {"suggestions": "x"}, {"suggestions": [1]}])
def test_parse_malformed(body):
    with pytest.raises(ProviderError):
        parse_suggestions(body)
