"""
Unit tests for shared building blocks.
"""

import asyncio

import pytest

from shared.circuit_breaker import CircuitBreaker, CircuitBreakerOpenException
from shared.config import ServiceConfig, get_config
from shared.errors import (
    AuthenticationError,
    NotFoundError,
    ServiceError,
    UnavailableError,
    error_from_code,
)
from shared.rpc import CallContext, run_with_deadline


class TestConfig:

    def test_defaults(self, monkeypatch):
        for name in ("REDIS_ADDR", "AUTH_SERVICE", "GRPC_PORT", "HTTP_PORT"):
            monkeypatch.delenv(name, raising=False)

        config = ServiceConfig(service_name="geo", port=50052)

        assert config.redis_url == "redis://redis:6379/0"
        assert config.auth_service_url == "http://auth1:50051"

    def test_addresses_from_environment(self, monkeypatch):
        monkeypatch.setenv("REDIS_ADDR", "localhost:6380")
        monkeypatch.setenv("USER_SERVICE", ":50053")
        monkeypatch.setenv("GEO_SERVICE", "http://geo.internal:9000")

        config = ServiceConfig(service_name="auth", port=50051)

        assert config.redis_url == "redis://localhost:6380/0"
        assert config.user_service_url == "http://localhost:50053"
        assert config.geo_service_url == "http://geo.internal:9000"

    def test_internal_port(self, monkeypatch):
        monkeypatch.setenv("GRPC_PORT", ":50061")

        assert get_config("auth", 50051).port == 50061

    def test_public_port(self, monkeypatch):
        monkeypatch.setenv("HTTP_PORT", "0.0.0.0:8080")
        monkeypatch.setenv("GRPC_PORT", ":50061")

        assert get_config("gateway", 8000, public=True).port == 8080

    def test_port_fallback(self, monkeypatch):
        monkeypatch.delenv("GRPC_PORT", raising=False)

        assert get_config("user", 50053).port == 50053


class TestErrors:

    def test_error_from_code(self):
        error = error_from_code("UNAUTHENTICATED", "token is not valid")

        assert isinstance(error, AuthenticationError)
        assert error.status_code == 401
        assert error.message == "token is not valid"

    def test_unknown_code_is_internal(self):
        error = error_from_code("SOMETHING_ELSE", "boom")

        assert isinstance(error, ServiceError)
        assert error.status_code == 500

    def test_response_shape(self):
        response = NotFoundError("user not found").to_response()

        assert response.code == "NOT_FOUND"
        assert response.message == "user not found"
        assert response.details == {}


class TestCallContext:

    def test_child_keeps_deadline(self):
        ctx = CallContext.with_timeout(5.0, authorization="Bearer abc")

        child = ctx.child()

        assert child.deadline == ctx.deadline
        assert child.get("authorization") is None

    def test_unbounded(self):
        assert CallContext().remaining() is None

    @pytest.mark.asyncio
    async def test_run_with_deadline_expires(self):
        ctx = CallContext.with_timeout(0.01)

        with pytest.raises(UnavailableError) as exc_info:
            await run_with_deadline(ctx, asyncio.sleep(1))
        assert exc_info.value.message == "deadline exceeded"

    @pytest.mark.asyncio
    async def test_run_with_deadline_returns_result(self):
        async def answer():
            return 42

        assert await run_with_deadline(CallContext.with_timeout(1.0), answer()) == 42


class TestCircuitBreaker:

    @pytest.mark.asyncio
    async def test_opens_after_threshold(self):
        breaker = CircuitBreaker(failure_threshold=2, recovery_timeout=60.0, name="test")

        async def fail():
            raise RuntimeError("down")

        for _ in range(2):
            with pytest.raises(RuntimeError):
                await breaker.call(fail)

        assert breaker.is_open()
        with pytest.raises(CircuitBreakerOpenException):
            await breaker.call(fail)

    @pytest.mark.asyncio
    async def test_half_open_success_closes(self):
        breaker = CircuitBreaker(failure_threshold=1, recovery_timeout=0.0, name="test")

        async def fail():
            raise RuntimeError("down")

        async def ok():
            return "ok"

        with pytest.raises(RuntimeError):
            await breaker.call(fail)
        assert breaker.is_open()

        assert await breaker.call(ok) == "ok"
        assert breaker.get_state()["state"] == "closed"
        assert breaker.get_state()["failure_count"] == 0
