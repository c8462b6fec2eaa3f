"""
API Gateway service for the address lookup access layer.
"""

from datetime import datetime, timezone
from typing import Awaitable, Optional, TypeVar

from fastapi import Request
from fastapi.responses import PlainTextResponse

from shared.base_service import BaseService
from shared.config import ServiceConfig
from shared.errors import AccessLayerException, AuthenticationError, InvalidArgumentError
from shared.rpc import AUTHORIZATION_METADATA, CallContext
from .adapters import AuthClient, GeoClient, UserClient
from .domain import parse_json_object, parse_page_param, require_authorization, require_string


DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 10

T = TypeVar("T")


class GatewayService(BaseService):
    """API Gateway service implementation.

    Public HTTP+JSON routes under ``/api`` are translated into internal RPC
    calls. Backend errors come back to the client as plain text with the
    backend message verbatim.
    """

    def __init__(self, config: Optional[ServiceConfig] = None,
                 auth_client: Optional[AuthClient] = None,
                 geo_client: Optional[GeoClient] = None,
                 user_client: Optional[UserClient] = None):
        super().__init__("gateway", 8000, public=True, config=config)
        timeout = self.config.rpc_timeout_seconds
        self.auth_client = auth_client or AuthClient(self.config.auth_service_url, timeout=timeout)
        self.geo_client = geo_client or GeoClient(self.config.geo_service_url, timeout=timeout)
        self.user_client = user_client or UserClient(self.config.user_service_url, timeout=timeout)

        self._setup_error_handlers()
        self._setup_gateway_routes()

        # Expose service instance via app state for introspection/testing
        self.app.state.gateway_service = self

    def _context(self, authorization: Optional[str] = None) -> CallContext:
        """Outgoing call context bounded by the gateway's RPC timeout."""
        metadata = {}
        if authorization is not None:
            metadata[AUTHORIZATION_METADATA] = authorization
        return CallContext.with_timeout(self.config.rpc_timeout_seconds, **metadata)

    async def _call_backend(self, service: str, call: Awaitable[T]) -> T:
        try:
            return await call
        except AccessLayerException as e:
            self.metrics.increment_counter("backend_errors_total", service=service, code=e.code)
            raise

    def _setup_error_handlers(self):
        """Render errors as plain text."""

        @self.app.exception_handler(AccessLayerException)
        async def access_layer_exception_handler(request: Request, exc: AccessLayerException):
            log = self.logger.error if exc.status_code >= 500 else self.logger.warning
            log(
                "Request failed",
                path=request.url.path,
                code=exc.code,
                status_code=exc.status_code,
                message=exc.message
            )
            self.metrics.record_error(exc.code)
            return PlainTextResponse(exc.message, status_code=exc.status_code)

        @self.app.exception_handler(Exception)
        async def general_exception_handler(request: Request, exc: Exception):
            self.logger.error("Unhandled exception", error=str(exc), exc_info=True)
            self.metrics.record_error("INTERNAL")
            return PlainTextResponse("Internal server error", status_code=500)

    def _setup_gateway_routes(self):
        """Set up gateway-specific routes."""

        @self.app.get("/healthz")
        async def healthz():
            """Liveness endpoint with backend reachability."""
            dependencies = await self._check_dependencies()
            status = "ok" if all(value == "ok" for value in dependencies.values()) else "error"
            return {
                "service": "gateway",
                "status": status,
                "dependencies": dependencies,
                "timestamp": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            }

        @self.app.post("/api/auth/register")
        async def register(request: Request):
            """Register an account and return its token."""
            payload = await parse_json_object(request)
            email = require_string(payload, "email")
            password = require_string(payload, "password")
            if not email or not password:
                raise InvalidArgumentError("Email and password are required")

            response = await self._call_backend(
                "auth",
                self.auth_client.register(email, password, self._context())
            )
            return response.model_dump()

        @self.app.post("/api/auth/login")
        async def login(request: Request):
            """Exchange credentials for a token."""
            payload = await parse_json_object(request)
            email = require_string(payload, "email")
            password = require_string(payload, "password")
            if not email or not password:
                raise InvalidArgumentError("Email and password are required")

            try:
                response = await self._call_backend(
                    "auth",
                    self.auth_client.login(email, password, self._context())
                )
            except AccessLayerException as e:
                self.logger.warning("Login failed", code=e.code)
                raise AuthenticationError("Login failed")
            return response.model_dump()

        @self.app.post("/api/address/search")
        async def search_address(request: Request):
            """Free-text address search."""
            authorization = require_authorization(request)
            payload = await parse_json_object(request)
            query = require_string(payload, "query")
            if query is None:
                raise InvalidArgumentError("query is required")

            response = await self._call_backend(
                "geo",
                self.geo_client.search_address(query, self._context(authorization))
            )
            return response.model_dump()

        @self.app.post("/api/address/geocode")
        async def geocode(request: Request):
            """Reverse geocode a coordinate pair."""
            authorization = require_authorization(request)
            payload = await parse_json_object(request)
            lat = require_string(payload, "lat")
            lng = require_string(payload, "lng")
            if not lat or not lng:
                raise InvalidArgumentError("lat and lng are required")

            response = await self._call_backend(
                "geo",
                self.geo_client.geocode(f"{lat},{lng}", self._context(authorization))
            )
            return response.model_dump()

        @self.app.get("/api/user/profile")
        async def get_profile(request: Request):
            """Look up an account by email."""
            authorization = require_authorization(request)
            email = request.query_params.get("email")
            if not email:
                raise InvalidArgumentError("email is required")

            response = await self._call_backend(
                "user",
                self.user_client.get_profile(email, self._context(authorization))
            )
            return response.model_dump()

        @self.app.get("/api/user/list")
        async def list_users(request: Request):
            """Paginated account listing, newest first."""
            authorization = require_authorization(request)
            page = parse_page_param(request.query_params.get("page"), DEFAULT_PAGE)
            per_page = parse_page_param(request.query_params.get("per_page"), DEFAULT_PER_PAGE)

            response = await self._call_backend(
                "user",
                self.user_client.list_users(page, per_page, self._context(authorization))
            )
            return response.model_dump()

    async def shutdown(self):
        await self.auth_client.close()
        await self.geo_client.close()
        await self.user_client.close()

    async def _check_dependencies(self):
        """Check gateway dependencies."""
        return {
            "auth": "ok" if await self.auth_client.ping() else "error",
            "geo": "ok" if await self.geo_client.ping() else "error",
            "user": "ok" if await self.user_client.ping() else "error",
        }


def create_app(**kwargs):
    """Create FastAPI application."""
    service = GatewayService(**kwargs)
    return service.app


if __name__ == "__main__":
    service = GatewayService()
    service.run()
