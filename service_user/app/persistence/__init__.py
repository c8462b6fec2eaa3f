from .base import UserRecord, UserRepository
from .memory import InMemoryUserRepository
from .postgres import PostgresUserRepository

__all__ = [
    "UserRecord",
    "UserRepository",
    "InMemoryUserRepository",
    "PostgresUserRepository",
]
