"""Pydantic schemas for registration and login."""
from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    """Schema for registering a new account."""

    username: str = Field(min_length=1, max_length=150)
    password: str = Field(min_length=1, max_length=1024)
    verification_code: str = Field(min_length=1)


class LoginRequest(BaseModel):
    """Schema for logging in."""

    username: str = Field(min_length=1, max_length=150)
    password: str = Field(min_length=1, max_length=1024)


class UserResponse(BaseModel):
    """Public account info - never includes the password verifier."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str


class LoginResponse(BaseModel):
    """Session token plus the account it was issued for."""

    token: str
    user: UserResponse


class MessageResponse(BaseModel):
    """Plain acknowledgement body."""

    message: str
