"""
PostgreSQL persistence layer for the User service.
"""

from typing import List, Optional, Tuple

import asyncpg

from shared.contracts import User
from shared.errors import AlreadyExistsError, ServiceError
from shared.logging import get_logger
from .base import UserRecord, UserRepository


class PostgresUserRepository(UserRepository):
    """PostgreSQL account store backed by an asyncpg pool."""

    def __init__(self, dsn: str):
        self.dsn = dsn
        self.logger = get_logger("user.persistence.postgres")
        self.pool: Optional[asyncpg.Pool] = None

    async def start(self):
        """Start the persistence layer."""
        try:
            self.pool = await asyncpg.create_pool(
                self.dsn,
                min_size=2,
                max_size=10,
                command_timeout=30
            )
            await self._create_tables()
        except (OSError, asyncpg.PostgresError) as e:
            self.logger.error("Failed to start PostgreSQL persistence", error=str(e))
            raise ServiceError("database unavailable")

        self.logger.info("PostgreSQL persistence started")

    async def stop(self):
        """Stop the persistence layer."""
        if self.pool:
            await self.pool.close()
            self.logger.info("PostgreSQL persistence stopped")

    async def _create_tables(self):
        async with self.pool.acquire() as conn:
            await conn.execute("""
                CREATE TABLE IF NOT EXISTS users (
                    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
                    email VARCHAR(255) UNIQUE NOT NULL,
                    password_hash VARCHAR(255) NOT NULL,
                    created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()
                );
            """)
            await conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_users_email ON users(email);
            """)

    @staticmethod
    def _row_to_user(row: asyncpg.Record) -> User:
        return User(
            id=str(row["id"]),
            email=row["email"],
            created_at=str(row["created_at"]),
        )

    async def create(self, email: str, password_hash: str) -> User:
        try:
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow("""
                    INSERT INTO users (email, password_hash)
                    VALUES ($1, $2)
                    RETURNING id, email, created_at
                """, email, password_hash)
        except asyncpg.UniqueViolationError:
            raise AlreadyExistsError("user already exists")
        except asyncpg.PostgresError as e:
            self.logger.error("Error creating user", error=str(e))
            raise ServiceError("failed to create user")

        return self._row_to_user(row)

    async def get_by_email(self, email: str) -> Optional[UserRecord]:
        try:
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow("""
                    SELECT id, email, password_hash, created_at
                    FROM users WHERE email = $1
                """, email)
        except asyncpg.PostgresError as e:
            self.logger.error("Error loading user", error=str(e))
            raise ServiceError("failed to get user")

        if not row:
            return None
        return UserRecord(user=self._row_to_user(row), password_hash=row["password_hash"])

    async def list_users(self, limit: int, offset: int) -> Tuple[List[User], int]:
        try:
            async with self.pool.acquire() as conn:
                rows = await conn.fetch("""
                    SELECT id, email, created_at FROM users
                    ORDER BY created_at DESC
                    LIMIT $1 OFFSET $2
                """, limit, offset)
                total = await conn.fetchval("SELECT COUNT(*) FROM users")
        except asyncpg.PostgresError as e:
            self.logger.error("Error listing users", error=str(e))
            raise ServiceError("failed to list users")

        return [self._row_to_user(row) for row in rows], total

    async def ping(self) -> bool:
        if not self.pool:
            return False
        try:
            async with self.pool.acquire() as conn:
                await conn.fetchval("SELECT 1")
        except (OSError, asyncpg.PostgresError):
            return False
        return True
