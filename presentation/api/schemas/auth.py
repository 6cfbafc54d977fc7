"""Auth request/response schemas."""

from datetime import datetime

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1, max_length=1024)


class LoginResponse(BaseModel):
    token: str  # "<scheme> <token>"
    expires: datetime
    userid: str


class IdentityResponse(BaseModel):
    id: str
    username: str


class MessageResponse(BaseModel):
    message: str
