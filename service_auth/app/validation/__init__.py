from .token_validator import TokenValidator

__all__ = ["TokenValidator"]
