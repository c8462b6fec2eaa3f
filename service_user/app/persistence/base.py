"""
Account storage interface.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Tuple

from shared.contracts import User


@dataclass
class UserRecord:
    """A stored account: the public user plus its password hash."""
    user: User
    password_hash: str


class UserRepository(ABC):
    """Storage for accounts. Emails are unique."""

    async def start(self):
        """Open connections and prepare the schema."""

    async def stop(self):
        """Release connections."""

    @abstractmethod
    async def create(self, email: str, password_hash: str) -> User:
        """Insert an account; raises ``AlreadyExistsError`` on a taken email."""

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[UserRecord]:
        pass

    @abstractmethod
    async def list_users(self, limit: int, offset: int) -> Tuple[List[User], int]:
        """Newest first. Returns the page and the total account count."""

    async def ping(self) -> bool:
        return True
