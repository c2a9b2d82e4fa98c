from pydantic import BaseModel, EmailStr, Field, field_validator
from datetime import datetime

from config.settings import settings
from schemas.common import CamelModel


class RegisterIn(BaseModel):
    email: EmailStr
    password: str
    name: str | None = Field(None, max_length=120)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        """Trim + minúsculas antes de validar formato"""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if len(v) < settings.PASSWORD_MIN_LENGTH:
            raise ValueError(
                f"La contraseña debe tener al menos {settings.PASSWORD_MIN_LENGTH} caracteres."
            )
        return v

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        if v is not None:
            v = v.strip()
            return v or None
        return None


class LoginIn(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class UserOut(CamelModel):
    id: int
    email: str
    name: str | None = None
    created_at: datetime


class UserEnvelope(BaseModel):
    user: UserOut


class LoginOut(BaseModel):
    token: str
    user: UserOut


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
