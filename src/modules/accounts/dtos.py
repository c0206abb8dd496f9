"""Account DTOs for the Service Layer (Pydantic v2, immutable)."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator


class AddressDTO(BaseModel):
    """Delivery address; also used as an order-level override."""

    model_config = ConfigDict(frozen=True)

    street: str
    city: str = ""
    state: str = ""
    zip_code: str = ""
    phone: str = ""

    @field_validator("street")
    @classmethod
    def street_must_not_be_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Street must not be empty.")
        return v.strip()


class RegisterUserDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    username: str
    email: EmailStr
    password: str
    name: str = ""
    phone: str = ""
    address: Optional[AddressDTO] = None

    @field_validator("username")
    @classmethod
    def username_must_not_be_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Username must not be empty.")
        return v.strip()

    @field_validator("password")
    @classmethod
    def password_min_length(cls, v: str) -> str:
        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters.")
        return v


class UpdateProfileDTO(BaseModel):
    """Partial profile update; only supplied fields are applied."""

    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[AddressDTO] = None
