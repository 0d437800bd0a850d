"""Pydantic schemas for authentication and registration."""

from typing import Optional

from pydantic import EmailStr, Field

from caarvo.domain.models.booking import ServiceType
from caarvo.domain.models.user import UserRole
from caarvo.domain.schemas.common import CamelModel, Phone
from caarvo.domain.schemas.user import PostalAddress

PASSWORD_MIN_LENGTH = 6


class SendOtpRequest(CamelModel):
    phone: Phone


class VerifyOtpRequest(CamelModel):
    phone: Phone
    otp: str = Field(pattern=r"^\d{4,8}$")
    access_token: Optional[str] = None


class LoginPhoneRequest(CamelModel):
    phone: Phone
    otp: str = Field(pattern=r"^\d{4,8}$")


class LoginRequest(CamelModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class LoginPasswordRequest(CamelModel):
    phone: Phone
    password: str = Field(min_length=1)


class RegisterRequest(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(default=None, min_length=PASSWORD_MIN_LENGTH)
    phone: Phone
    role: UserRole = UserRole.USER
    address: Optional[PostalAddress] = None


class RegisterUserRequest(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    phone: Phone
    password: str = Field(min_length=PASSWORD_MIN_LENGTH)


class StaffRegisterRequest(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    email: EmailStr
    password: str = Field(min_length=PASSWORD_MIN_LENGTH)
    phone: Phone
    address: Optional[PostalAddress] = None


class WorkerRegisterRequest(StaffRegisterRequest):
    specialties: list[ServiceType] = []


class ChangePasswordRequest(CamelModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=PASSWORD_MIN_LENGTH)
