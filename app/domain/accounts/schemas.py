"""Account schemas - registration, login and profile payloads"""

from typing import Optional

from pydantic import field_validator

from ...schemas import CamelModel, UserResponse
from ...shared.validators import validate_email, validate_phone
from ..doctors.schemas import DoctorResponse

MIN_PASSWORD_LENGTH = 6


def _check_password(v: Optional[str]) -> Optional[str]:
    if v is not None and len(v) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    return v


def _check_name(v: Optional[str]) -> Optional[str]:
    if v is not None:
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        if len(v) > 255:
            raise ValueError("Name must be 255 characters or less")
    return v


class RegisterRequest(CamelModel):
    name: str
    email: str
    password: str
    phone: str
    is_doctor: bool = False

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return _check_name(v)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        if not v or not v.strip():
            raise ValueError("Email is required")
        return validate_email(v)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        if not v or not v.strip():
            raise ValueError("Phone number is required")
        return validate_phone(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        return _check_password(v)


class LoginRequest(CamelModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower()


class ProfileUpdateRequest(CamelModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    password: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return _check_name(v)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        return validate_phone(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        return _check_password(v or None)


class AuthData(UserResponse):
    """Account fields plus a fresh token"""

    token: str
    doctor_status: Optional[str] = None


class ProfileData(CamelModel):
    user: UserResponse
    doctor: Optional[DoctorResponse] = None
