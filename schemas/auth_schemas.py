from datetime import datetime
from pydantic import BaseModel, EmailStr, Field, field_validator
from schemas.base import CamelModel
import re

USERNAME_PATTERN = re.compile(r'^[A-Za-z0-9_.-]+$')


# Token payloads keep the OAuth2 (RFC 6749) field names
class Token(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str


class CreateUserRequest(BaseModel):
    username: str = Field(min_length=3, max_length=50)
    email: EmailStr
    password: str

    @field_validator('username')
    @classmethod
    def validate_username(cls, value):
        value = value.strip()
        if not USERNAME_PATTERN.match(value):
            raise ValueError('Username may only contain letters, digits, ".", "_" and "-"')
        return value

    @field_validator('password')
    @classmethod
    def validate_password(cls, value):
        """
        Password must be at least 8 characters and contain:
        - At least one letter
        - At least one digit
        """
        if len(value) < 8:
            raise ValueError('Password must be at least 8 characters')

        if not re.search(r'[A-Za-z]', value):
            raise ValueError('Password must contain at least one letter')

        if not re.search(r'\d', value):
            raise ValueError('Password must contain at least one digit')

        return value


class RefreshTokenRequest(BaseModel):
    refresh_token: str

    @field_validator('refresh_token')
    @classmethod
    def validate_token(cls, value):
        if not value or not value.strip():
            raise ValueError('Refresh token cannot be empty')
        return value


class UserResponse(CamelModel):
    id: int
    username: str
    email: str
    is_admin: bool
    created_at: datetime


class AuthResponse(Token):
    user: UserResponse


class CurrentUser(BaseModel):
    """
    Identity resolved from the bearer token, passed explicitly to every
    handler that needs one.
    """
    id: int
    username: str
    email: str
    is_admin: bool = False
