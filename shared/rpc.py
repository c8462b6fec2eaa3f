"""
Internal RPC transport between services.

Unary calls are carried as ``POST /<package>.<Service>/<Method>`` with a JSON
body. Call metadata travels as HTTP headers: ``authorization`` carries the
caller's bearer token verbatim and ``x-rpc-timeout`` the caller's remaining
time budget in seconds. Failures come back as an ``ErrorResponse`` whose
``code`` is rebuilt into the matching exception on the client side.
"""

import asyncio
import time
from dataclasses import dataclass, field
from typing import Awaitable, Dict, Optional, Type, TypeVar

import httpx
from fastapi import Request
from pydantic import BaseModel

from shared.contracts import rpc_path
from shared.errors import (
    AccessLayerException,
    ErrorResponse,
    ServiceError,
    UnavailableError,
    error_from_code,
)
from shared.logging import get_logger, get_request_id


AUTHORIZATION_METADATA = "authorization"
TIMEOUT_METADATA = "x-rpc-timeout"
REQUEST_ID_METADATA = "x-request-id"

T = TypeVar("T", bound=BaseModel)


@dataclass
class CallContext:
    """Metadata and deadline of one inbound or outbound call."""

    metadata: Dict[str, str] = field(default_factory=dict)
    deadline: Optional[float] = None

    @classmethod
    def from_request(cls, request: Request) -> "CallContext":
        metadata = {}
        authorization = request.headers.get(AUTHORIZATION_METADATA)
        if authorization is not None:
            metadata[AUTHORIZATION_METADATA] = authorization

        deadline = None
        raw_timeout = request.headers.get(TIMEOUT_METADATA)
        if raw_timeout:
            try:
                deadline = time.monotonic() + max(0.0, float(raw_timeout))
            except ValueError:
                deadline = None
        return cls(metadata=metadata, deadline=deadline)

    @classmethod
    def with_timeout(cls, timeout: Optional[float], **metadata: str) -> "CallContext":
        deadline = time.monotonic() + timeout if timeout is not None else None
        return cls(metadata=dict(metadata), deadline=deadline)

    def get(self, key: str) -> Optional[str]:
        return self.metadata.get(key)

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, or None when unbounded."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def child(self, **metadata: str) -> "CallContext":
        """Context for a downstream call: same deadline, fresh metadata."""
        return CallContext(metadata=dict(metadata), deadline=self.deadline)


def encode_metadata(value: str) -> bytes:
    """Raw header bytes for a metadata value.

    Inbound headers are decoded as latin-1, so encoding them back the same way
    forwards the caller's bytes unchanged. Values outside latin-1 go as UTF-8.
    """
    try:
        return value.encode("latin-1")
    except UnicodeEncodeError:
        return value.encode("utf-8")


async def run_with_deadline(ctx: CallContext, awaitable: Awaitable[T]) -> T:
    """Await ``awaitable`` bounded by the context deadline.

    On expiry the awaitable is cancelled and ``UnavailableError`` is raised.
    """
    remaining = ctx.remaining()
    if remaining is None:
        return await awaitable
    try:
        return await asyncio.wait_for(awaitable, timeout=remaining)
    except asyncio.TimeoutError:
        raise UnavailableError("deadline exceeded")


class RpcClient:
    """Client stub for one internal service.

    A single ``httpx.AsyncClient`` is shared by all calls and is safe under
    concurrent use.
    """

    def __init__(self, service: str, base_url: str, *, timeout: float = 10.0,
                 client: Optional[httpx.AsyncClient] = None):
        self.service = service
        self.base_url = base_url
        self.timeout = timeout
        self.logger = get_logger(f"rpc.{service}")
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def close(self) -> None:
        await self._client.aclose()

    async def ping(self) -> bool:
        """Probe the service health endpoint."""
        try:
            response = await self._client.get("/health", timeout=min(self.timeout, 5.0))
        except httpx.HTTPError:
            return False
        return response.status_code == 200

    async def call(self, method: str, request: BaseModel, response_model: Type[T],
                   ctx: Optional[CallContext] = None) -> T:
        """Invoke ``method`` and decode its response or re-raise its error."""
        headers: Dict[str, bytes] = {}
        timeout = self.timeout
        if ctx is not None:
            headers.update((key, encode_metadata(value)) for key, value in ctx.metadata.items())
            remaining = ctx.remaining()
            if remaining is not None:
                if remaining <= 0:
                    raise UnavailableError("deadline exceeded")
                timeout = min(timeout, remaining)
        headers[TIMEOUT_METADATA] = f"{timeout:.3f}".encode("ascii")
        request_id = get_request_id()
        if request_id:
            headers[REQUEST_ID_METADATA] = encode_metadata(request_id)

        try:
            response = await self._client.post(
                rpc_path(self.service, method),
                json=request.model_dump(),
                headers=headers,
                timeout=timeout,
            )
        except httpx.TimeoutException as exc:
            self.logger.warning("RPC deadline exceeded", method=method)
            raise UnavailableError(
                "deadline exceeded",
                details={"service": self.service, "method": method}
            ) from exc
        except httpx.TransportError as exc:
            self.logger.error("RPC transport error", method=method, error=str(exc))
            raise UnavailableError(
                f"{self.service} unavailable",
                details={"service": self.service, "method": method}
            ) from exc

        if response.status_code == 200:
            try:
                return response_model.model_validate(response.json())
            except ValueError as exc:
                raise ServiceError(
                    f"malformed response from {self.service}/{method}"
                ) from exc

        raise self._error_from_response(response)

    def _error_from_response(self, response: httpx.Response) -> AccessLayerException:
        try:
            error = ErrorResponse.model_validate(response.json())
        except ValueError:
            return ServiceError(
                f"{self.service} returned HTTP {response.status_code}",
                details={"status_code": response.status_code}
            )
        return error_from_code(error.code, error.message, error.details)
