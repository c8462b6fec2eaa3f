"""
Wire contracts for the internal RPC surface.

Request and response models shared by the services and their clients.
Method paths follow the ``/<package>.<Service>/<Method>`` convention.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field


AUTH_SERVICE = "auth.AuthService"
GEO_SERVICE = "geo.GeoService"
USER_SERVICE = "user.UserService"


def rpc_path(service: str, method: str) -> str:
    return f"/{service}/{method}"


# Geo

class Address(BaseModel):
    """Normalised address record. Coordinates stay decimal-degree strings."""

    model_config = ConfigDict(frozen=True)

    city: str = ""
    street: str = ""
    house: str = ""
    lat: str = ""
    lon: str = ""


class SearchAddressRequest(BaseModel):
    query: str


class SearchAddressResponse(BaseModel):
    addresses: List[Address] = Field(default_factory=list)


class GeocodeRequest(BaseModel):
    address: str


class GeocodeResponse(BaseModel):
    addresses: List[Address] = Field(default_factory=list)


# Auth

class RegisterRequest(BaseModel):
    email: str = ""
    password: str = ""


class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""


class TokenResponse(BaseModel):
    token: str


class ValidateTokenRequest(BaseModel):
    token: str = ""


class ValidateTokenResponse(BaseModel):
    valid: bool
    user_id: str = ""


# User

class User(BaseModel):
    id: str
    email: str
    created_at: str


class CreateUserRequest(BaseModel):
    email: str = ""
    password: str = ""


class GetProfileRequest(BaseModel):
    email: str = ""
    password: str = ""


class UserResponse(BaseModel):
    user: User


class ListUsersRequest(BaseModel):
    page: int = 1
    per_page: int = 10


class ListUsersResponse(BaseModel):
    users: List[User] = Field(default_factory=list)
    total: int = 0
