"""Pydantic request/response schemas for the Identity API."""

from __future__ import annotations

from pydantic import BaseModel, Field

from shared.web import ID_PATTERN

# --- Request Schemas ---


class RegisterUserRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "first_name": "Jane",
                    "last_name": "Doe",
                    "email": "jane.doe@example.com",
                    "password": "correct horse battery",
                    "address1": "1 Main Street",
                    "address2": "Apt 4",
                    "city": "Springfield",
                    "state": "IL",
                    "postal_code": "62701",
                }
            ]
        }
    }

    first_name: str = Field(..., max_length=100)
    last_name: str = Field(..., max_length=100)
    email: str = Field(..., max_length=254)
    password: str = Field(..., max_length=128)
    address1: str = Field(..., max_length=255)
    address2: str = Field("", max_length=255)
    city: str = Field(..., max_length=100)
    state: str = Field(..., max_length=100)
    postal_code: str = Field(..., max_length=20)


class UpdateUserRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"last_name": "Smith", "city": "Shelbyville"}]}}

    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    email: str | None = Field(None, max_length=254)
    password: str | None = Field(None, max_length=128)
    address1: str | None = Field(None, max_length=255)
    address2: str | None = Field(None, max_length=255)
    city: str | None = Field(None, max_length=100)
    state: str | None = Field(None, max_length=100)
    postal_code: str | None = Field(None, max_length=20)


class IssueTokenRequest(BaseModel):
    user_id: str = Field(..., pattern=ID_PATTERN)
    password: str = Field(..., max_length=128)


class ExtendTokenRequest(BaseModel):
    id: str = Field(..., pattern=ID_PATTERN)
    extend: bool


# --- Response Schemas ---


class UserResponse(BaseModel):
    id: str
    first_name: str
    last_name: str
    email: str
    address1: str
    address2: str = ""
    city: str
    state: str
    postal_code: str


class TokenResponse(BaseModel):
    id: str
    user_id: str
    expires: int


class StatusResponse(BaseModel):
    status: str = "ok"
