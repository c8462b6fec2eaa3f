"""
Domain utilities for the Gateway Service.

Request processing helpers that do not belong to adapters or
transport-specific layers.
"""

from .auth_middleware import require_authorization
from .requests import parse_json_object, parse_page_param, require_string

__all__ = [
    "require_authorization",
    "parse_json_object",
    "parse_page_param",
    "require_string",
]
