"""
Test helper functions and factory methods for the address lookup access layer.
"""

import time
import uuid
from typing import Any, Dict, List, Optional

from jose import jwt

from shared.contracts import Address, User


TEST_JWT_SECRET = "test-secret-key"


class TestDataFactory:
    """Factory for creating test data."""
    __test__ = False

    @staticmethod
    def sukharevskaya() -> Address:
        """The address used throughout the geo scenarios."""
        return Address(
            city="Москва",
            street="Сухаревская",
            house="11",
            lat="55.77412",
            lon="37.624065",
        )

    @staticmethod
    def create_addresses(count: int = 3) -> List[Address]:
        return [
            Address(
                city="Москва",
                street=f"Улица {index}",
                house=str(index),
                lat=f"55.{index:05d}",
                lon=f"37.{index:05d}",
            )
            for index in range(1, count + 1)
        ]

    @staticmethod
    def dadata_suggestion(address: Address, settlement: Optional[str] = None) -> Dict[str, Any]:
        """Build one DaData suggestion as returned by the suggestions API."""
        return {
            "value": f"г {address.city}, ул {address.street}, д {address.house}",
            "data": {
                "city": address.city or None,
                "settlement": settlement,
                "street": address.street or None,
                "house": address.house or None,
                "geo_lat": address.lat or None,
                "geo_lon": address.lon or None,
            },
        }

    @staticmethod
    def create_user(email: str = "user@example.com") -> User:
        return User(
            id=str(uuid.uuid4()),
            email=email,
            created_at="2024-01-01 00:00:00+00:00",
        )


class TokenFactory:
    """Factory for signed bearer tokens."""
    __test__ = False

    def __init__(self, secret: str = TEST_JWT_SECRET):
        self.secret = secret

    def create(self, user_id: Any = "user-1", email: str = "user@example.com",
               expires_in: int = 3600, **extra_claims) -> str:
        claims = {
            "user_id": user_id,
            "email": email,
            "exp": int(time.time()) + expires_in,
        }
        claims.update(extra_claims)
        return jwt.encode(claims, self.secret, algorithm="HS256")

    def create_expired(self, user_id: str = "user-1") -> str:
        return self.create(user_id=user_id, expires_in=-3600)

    def create_foreign(self, user_id: str = "user-1") -> str:
        """Token signed with a different secret."""
        return TokenFactory("some-other-secret").create(user_id=user_id)

    @staticmethod
    def bearer(token: str) -> Dict[str, str]:
        return {"Authorization": f"Bearer {token}"}
