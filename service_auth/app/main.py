"""
Auth service for the address lookup access layer.
"""

from typing import Optional

from fastapi import Request

from shared.base_service import BaseService
from shared.config import ServiceConfig
from shared.contracts import (
    AUTH_SERVICE,
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    ValidateTokenRequest,
    ValidateTokenResponse,
    rpc_path,
)
from shared.errors import (
    AccessLayerException,
    AlreadyExistsError,
    AuthenticationError,
    InvalidArgumentError,
    NotFoundError,
)
from shared.rpc import CallContext, run_with_deadline
from shared.tracing import trace_operation
from .adapters.user_client import UserClient
from .validation.token_validator import TokenValidator


class AuthService(BaseService):
    """Auth service implementation."""

    def __init__(self, config: Optional[ServiceConfig] = None,
                 user_client: Optional[UserClient] = None,
                 token_validator: Optional[TokenValidator] = None):
        super().__init__("auth", 50051, config=config)
        self.token_validator = token_validator or TokenValidator(
            self.config.jwt_secret,
            self.config.token_ttl_seconds
        )
        self.user_client = user_client or UserClient(
            self.config.user_service_url,
            timeout=self.config.rpc_timeout_seconds
        )

        self._setup_auth_routes()

    async def register(self, request: RegisterRequest, ctx: CallContext) -> TokenResponse:
        """Create an account and issue its first token."""
        if not request.email or not request.password:
            raise InvalidArgumentError("email and password are required")

        with trace_operation("auth.register"):
            try:
                await self.user_client.get_profile(request.email, ctx=ctx.child())
            except NotFoundError:
                pass
            else:
                raise AlreadyExistsError("user already exists")

            user = await self.user_client.create_user(request.email, request.password, ctx.child())

        token = self.token_validator.issue(user.id, user.email)
        self.metrics.increment_counter("tokens_issued_total", reason="register")
        self.observability.log_business_event("user_registered", user_id=user.id)
        return TokenResponse(token=token)

    async def login(self, request: LoginRequest, ctx: CallContext) -> TokenResponse:
        """Check credentials with the User service and issue a token."""
        if not request.email or not request.password:
            raise InvalidArgumentError("email and password are required")

        with trace_operation("auth.login"):
            try:
                user = await self.user_client.get_profile(request.email, request.password, ctx.child())
            except AccessLayerException as e:
                self.logger.warning("Login rejected", code=e.code)
                raise AuthenticationError("authentication failed")

        token = self.token_validator.issue(user.id, user.email)
        self.metrics.increment_counter("tokens_issued_total", reason="login")
        self.observability.log_business_event("user_logged_in", user_id=user.id)
        return TokenResponse(token=token)

    def validate_token(self, request: ValidateTokenRequest) -> ValidateTokenResponse:
        result = self.token_validator.validate(request.token)
        self.metrics.increment_counter(
            "token_validations_total",
            status="valid" if result.valid else "invalid"
        )
        if result.valid:
            self.observability.trace_request(user_id=result.user_id)
        return result

    def _setup_auth_routes(self):
        """Set up auth-specific routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "auth",
                "message": "Address lookup access layer - Auth Service",
                "version": "1.0.0"
            }

        @self.app.post(rpc_path(AUTH_SERVICE, "Register"), response_model=TokenResponse)
        async def register(payload: RegisterRequest, request: Request):
            ctx = CallContext.from_request(request)
            return await run_with_deadline(ctx, self.register(payload, ctx))

        @self.app.post(rpc_path(AUTH_SERVICE, "Login"), response_model=TokenResponse)
        async def login(payload: LoginRequest, request: Request):
            ctx = CallContext.from_request(request)
            return await run_with_deadline(ctx, self.login(payload, ctx))

        @self.app.post(rpc_path(AUTH_SERVICE, "ValidateToken"), response_model=ValidateTokenResponse)
        async def validate_token(payload: ValidateTokenRequest):
            return self.validate_token(payload)

    async def shutdown(self):
        await self.user_client.close()

    async def _check_dependencies(self):
        """Check auth dependencies."""
        return {"user": "ok" if await self.user_client.ping() else "error"}


def create_app(**kwargs):
    """Create FastAPI application."""
    service = AuthService(**kwargs)
    return service.app


if __name__ == "__main__":
    service = AuthService()
    service.run()
