from .auth_client import AuthClient

__all__ = ["AuthClient"]
