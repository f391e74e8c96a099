"""
Auth API schemas (request/response models).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic.networks import validate_email


class Credentials(BaseModel):
    email: str
    password: str = Field(..., min_length=6)

    @field_validator("email")
    @classmethod
    def _email_shape(cls, value: str) -> str:
        # Shape check only. The lookup uses the value exactly as typed, so
        # no case folding and no "Name <addr>" unwrapping.
        if "<" in value or ">" in value:
            raise ValueError("Expected a bare email address.")
        validate_email(value)
        return value


class LoginRequest(BaseModel):
    # Untyped on purpose: `service.authorize` does the shape check, so any
    # malformed field gets the same 401 as a wrong password.
    email: Any = None
    password: Any = None


class UserResponse(BaseModel):
    id: str
    name: str
    email: str


class LoginResponse(BaseModel):
    user: UserResponse
    access_token: str
    token_type: str = "bearer"
