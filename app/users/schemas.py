from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field, field_validator

from app.schemas import CamelModel


# -------- USERS --------
class UserRegistration(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    first_name: str = Field(..., min_length=1)
    last_name: Optional[str] = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower()


class UserLogin(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower()


class UserUpsert(CamelModel):
    """Identity mirrored from an external provider."""

    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    auth_provider: str = "external"


class UserOut(CamelModel):
    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    auth_provider: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RegistrationResponse(CamelModel):
    message: str
    user_id: str


class UserClaims(CamelModel):
    sub: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    provider: str


class LoginResponse(CamelModel):
    message: str
    user: UserClaims
    access_token: str
    token_type: str = "bearer"
