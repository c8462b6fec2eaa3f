"""
Authorization header handling for Gateway.
"""

from fastapi import Request

from shared.errors import AuthenticationError
from shared.logging import get_logger


AUTHORIZATION_HEADER = "Authorization"

logger = get_logger("gateway.auth_middleware")


def require_authorization(request: Request) -> str:
    """Return the raw ``Authorization`` header value.

    The value is forwarded verbatim; validation happens in the backends.
    A missing or empty header is rejected before anything else is read.
    """
    authorization = request.headers.get(AUTHORIZATION_HEADER)
    if not authorization:
        logger.warning("Request without authorization", path=request.url.path)
        raise AuthenticationError("Unauthorized")
    return authorization
