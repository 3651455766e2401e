"""Pydantic request/response schemas for merchant auth."""

import re

from pydantic import BaseModel, EmailStr, Field, field_validator

_PHONE_RE = re.compile(r"^\+?[0-9 ]{8,20}$")


class RegisterRequest(BaseModel):
    phone: str = Field(..., min_length=8, max_length=20)
    password: str = Field(..., min_length=8, max_length=128)
    business_name: str = Field(..., min_length=1, max_length=200)
    business_type: str | None = Field(None, max_length=100)
    email: EmailStr | None = None

    @field_validator("phone")
    @classmethod
    def phone_format(cls, v: str) -> str:
        v = v.strip()
        if not _PHONE_RE.match(v):
            raise ValueError("Phone number must contain 8 to 20 digits")
        return v.replace(" ", "")

    @field_validator("password")
    @classmethod
    def password_complexity(cls, v: str) -> str:
        if not re.search(r"[A-Za-z]", v):
            raise ValueError("Password must contain at least one letter")
        if not re.search(r"\d", v):
            raise ValueError("Password must contain at least one digit")
        return v


class LoginRequest(BaseModel):
    phone: str
    password: str

    @field_validator("phone")
    @classmethod
    def strip_spaces(cls, v: str) -> str:
        return v.strip().replace(" ", "")


class RefreshRequest(BaseModel):
    refresh_token: str


class MerchantInfo(BaseModel):
    merchant_id: str
    phone: str
    business_name: str
    email: str | None


class RegisterResponse(BaseModel):
    merchant: MerchantInfo
    trial_end: str
    created_at: str


class LoginResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int = 1800
    merchant: MerchantInfo


class RefreshResponse(BaseModel):
    access_token: str
    expires_in: int = 1800
