"""
In-memory account store for local runs and tests.
"""

import asyncio
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from shared.contracts import User
from shared.errors import AlreadyExistsError
from .base import UserRecord, UserRepository


class InMemoryUserRepository(UserRepository):
    """Account store held in a dict, keyed by email."""

    def __init__(self):
        self._records: Dict[str, UserRecord] = {}
        self._created: Dict[str, datetime] = {}
        self._lock = asyncio.Lock()

    async def create(self, email: str, password_hash: str) -> User:
        async with self._lock:
            if email in self._records:
                raise AlreadyExistsError("user already exists")
            created_at = datetime.now(timezone.utc)
            user = User(id=str(uuid.uuid4()), email=email, created_at=str(created_at))
            self._records[email] = UserRecord(user=user, password_hash=password_hash)
            self._created[email] = created_at
            return user

    async def get_by_email(self, email: str) -> Optional[UserRecord]:
        return self._records.get(email)

    async def list_users(self, limit: int, offset: int) -> Tuple[List[User], int]:
        # Insertion order breaks ties between equal timestamps.
        emails = list(self._records)
        ordered = sorted(
            reversed(emails),
            key=lambda email: self._created[email],
            reverse=True
        )
        page = [self._records[email].user for email in ordered[offset:offset + limit]]
        return page, len(emails)
