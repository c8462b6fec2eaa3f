"""
Request body and query parsing for Gateway routes.
"""

import json
import re
from typing import Any, Dict, Optional

from fastapi import Request

from shared.errors import InvalidArgumentError


INVALID_BODY = "Invalid request body"

PAGE_PARAM_PATTERN = re.compile(r"[+-]?[0-9]+")
MAX_PAGE_PARAM = 2 ** 63 - 1


async def parse_json_object(request: Request) -> Dict[str, Any]:
    """Decode the body as a JSON object, else ``InvalidArgumentError``."""
    body = await request.body()
    try:
        payload = json.loads(body)
    except ValueError:
        raise InvalidArgumentError(INVALID_BODY)
    if not isinstance(payload, dict):
        raise InvalidArgumentError(INVALID_BODY)
    return payload


def require_string(payload: Dict[str, Any], field: str) -> Optional[str]:
    """Return a string field; a present non-string value is a malformed body."""
    value = payload.get(field)
    if value is not None and not isinstance(value, str):
        raise InvalidArgumentError(INVALID_BODY)
    return value


def parse_page_param(raw: Optional[str], default: int) -> int:
    """Positive integer query parameter; anything else yields ``default``."""
    if raw is None or not PAGE_PARAM_PATTERN.fullmatch(raw):
        return default
    value = int(raw)
    return value if 0 < value <= MAX_PAGE_PARAM else default
