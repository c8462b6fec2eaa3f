"""
User service for the address lookup access layer.
"""

from typing import Optional

from fastapi import Request

from shared.base_service import BaseService
from shared.config import ServiceConfig
from shared.contracts import (
    USER_SERVICE,
    CreateUserRequest,
    GetProfileRequest,
    ListUsersRequest,
    ListUsersResponse,
    UserResponse,
    rpc_path,
)
from shared.errors import AuthenticationError, InvalidArgumentError, NotFoundError
from shared.rpc import CallContext, run_with_deadline
from shared.tracing import trace_operation
from .passwords import MAX_PASSWORD_BYTES, PasswordHasher
from .persistence import PostgresUserRepository, UserRepository


DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 10


class UserService(BaseService):
    """User service implementation."""

    def __init__(self, config: Optional[ServiceConfig] = None,
                 repository: Optional[UserRepository] = None,
                 hasher: Optional[PasswordHasher] = None):
        super().__init__("user", 50053, config=config)
        self.repository = repository or PostgresUserRepository(self.config.database_url)
        self.hasher = hasher or PasswordHasher()

        self._setup_user_routes()

    async def create_user(self, request: CreateUserRequest) -> UserResponse:
        if not request.email or not request.password:
            raise InvalidArgumentError("email and password are required")
        if len(request.password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise InvalidArgumentError("password is too long")

        with trace_operation("user.create"):
            with self.metrics.time_operation("password_hash_duration_seconds", operation="hash"):
                password_hash = await self.hasher.hash(request.password)
            user = await self.repository.create(request.email, password_hash)

        self.observability.log_business_event("user_created", user_id=user.id)
        return UserResponse(user=user)

    async def get_profile(self, request: GetProfileRequest) -> UserResponse:
        """Look up an account by email.

        When a password is supplied it must match the stored hash.
        """
        if not request.email:
            raise InvalidArgumentError("email is required")

        record = await self.repository.get_by_email(request.email)
        if record is None:
            raise NotFoundError("user not found")

        if request.password:
            with self.metrics.time_operation("password_hash_duration_seconds", operation="verify"):
                matches = await self.hasher.verify(request.password, record.password_hash)
            self.metrics.increment_counter("credential_checks_total", result="ok" if matches else "mismatch")
            if not matches:
                raise AuthenticationError("invalid credentials")

        return UserResponse(user=record.user)

    async def list_users(self, request: ListUsersRequest) -> ListUsersResponse:
        page = request.page if request.page >= 1 else DEFAULT_PAGE
        per_page = request.per_page if request.per_page >= 1 else DEFAULT_PER_PAGE

        users, total = await self.repository.list_users(per_page, (page - 1) * per_page)
        return ListUsersResponse(users=users, total=total)

    def _setup_user_routes(self):
        """Set up user-specific routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "user",
                "message": "Address lookup access layer - User Service",
                "version": "1.0.0"
            }

        @self.app.post(rpc_path(USER_SERVICE, "CreateUser"), response_model=UserResponse)
        async def create_user(payload: CreateUserRequest, request: Request):
            ctx = CallContext.from_request(request)
            return await run_with_deadline(ctx, self.create_user(payload))

        @self.app.post(rpc_path(USER_SERVICE, "GetProfile"), response_model=UserResponse)
        async def get_profile(payload: GetProfileRequest, request: Request):
            ctx = CallContext.from_request(request)
            return await run_with_deadline(ctx, self.get_profile(payload))

        @self.app.post(rpc_path(USER_SERVICE, "ListUsers"), response_model=ListUsersResponse)
        async def list_users(payload: ListUsersRequest, request: Request):
            ctx = CallContext.from_request(request)
            return await run_with_deadline(ctx, self.list_users(payload))

    async def startup(self):
        await self.repository.start()

    async def shutdown(self):
        await self.repository.stop()

    async def _check_dependencies(self):
        """Check user dependencies."""
        return {"postgres": "ok" if await self.repository.ping() else "error"}


def create_app(**kwargs):
    """Create FastAPI application."""
    service = UserService(**kwargs)
    return service.app


if __name__ == "__main__":
    service = UserService()
    service.run()
