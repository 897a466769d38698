from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CredentialsRequest(BaseModel):
    # Emptiness is checked by the identity service so it can answer 400.
    username: Optional[str] = None
    password: Optional[str] = None

    model_config = {
        "json_schema_extra": {
            "example": {"username": "alice", "password": "correct horse battery staple"}
        },
    }


class UserRecord(BaseModel):
    """User as persisted in the ``users`` collection."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    username: str
    password_hash: str


class UserOut(BaseModel):
    id: str
    username: str


class AuthResponse(BaseModel):
    user: UserOut

    model_config = {
        "json_schema_extra": {
            "example": {"user": {"id": "V1StGXR8_Z5jdHi6B-myT", "username": "alice"}}
        }
    }


class LogoutResponse(BaseModel):
    status: str = "logged_out"
