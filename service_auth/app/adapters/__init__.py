"""
Adapters package for the Auth Service.

RPC client wrappers for internal dependencies (User).
"""

from .user_client import UserClient

__all__ = ["UserClient"]
