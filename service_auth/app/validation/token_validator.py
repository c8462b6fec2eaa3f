"""
Token issuing and validation for the Auth service.
"""

import time
from typing import Any, Dict

from jose import jwt
from jose.exceptions import JOSEError

from shared.contracts import ValidateTokenResponse
from shared.logging import get_logger


ALGORITHM = "HS256"
BEARER_PREFIX = "Bearer "


class TokenValidator:
    """Signs and validates HS256 bearer tokens.

    Tokens carry ``user_id``, ``email`` and ``exp`` claims. There is no
    revocation list: a token stays valid until its embedded expiry.
    """

    def __init__(self, secret: str, ttl_seconds: int = 24 * 60 * 60):
        self._secret = secret
        self.ttl_seconds = ttl_seconds
        self.logger = get_logger("auth.validator")

    def issue(self, user_id: str, email: str) -> str:
        """Issue a signed token for an account."""
        claims = {
            "user_id": user_id,
            "email": email,
            "exp": int(time.time()) + self.ttl_seconds,
        }
        return jwt.encode(claims, self._secret, algorithm=ALGORITHM)

    def validate(self, token: str) -> ValidateTokenResponse:
        """Validate a token; never raises.

        A leading ``Bearer `` prefix is tolerated. Any parse, signature or
        expiry failure, or a missing or blank ``user_id`` claim, yields
        ``valid=False``.
        """
        if token.startswith(BEARER_PREFIX):
            token = token[len(BEARER_PREFIX):]

        try:
            claims: Dict[str, Any] = jwt.decode(token, self._secret, algorithms=[ALGORITHM])
        except JOSEError as e:
            self.logger.warning("Token verification failed", error_type=type(e).__name__)
            return ValidateTokenResponse(valid=False, user_id="")

        user_id = claims.get("user_id")
        if not isinstance(user_id, str) or not user_id.strip():
            self.logger.warning("Token verification failed", error_type="missing_user_id")
            return ValidateTokenResponse(valid=False, user_id="")

        return ValidateTokenResponse(valid=True, user_id=user_id)
