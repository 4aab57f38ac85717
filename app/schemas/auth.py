"""Request/response schemas for auth endpoints."""

from pydantic import BaseModel, Field

from app.schemas.users import UserOut


class LoginRequest(BaseModel):
    """
    Credentials for login. Both fields are optional at the schema level so the
    route can answer a missing field with its own 400 message.
    """

    email: str | None = Field(default=None, description="Account email (case-insensitive)")
    password: str | None = Field(default=None, description="Password")


class LoginResponse(BaseModel):
    """Successful login: the account (without password hash) and its session token."""

    success: bool = True
    user: UserOut
    token: str = Field(..., description="JWT session token; also set as the 'token' cookie")


class MessageResponse(BaseModel):
    success: bool = True
    message: str
