"""Auth API routes: phone OTP, password login, registration and the caller's profile."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from caarvo.application.services import auth_service, otp_service
from caarvo.core.exceptions import ForbiddenException
from caarvo.domain.models.user import User, UserRole
from caarvo.domain.schemas.auth import (
    ChangePasswordRequest,
    LoginPasswordRequest,
    LoginPhoneRequest,
    LoginRequest,
    RegisterRequest,
    RegisterUserRequest,
    SendOtpRequest,
    VerifyOtpRequest,
)
from caarvo.domain.schemas.common import envelope
from caarvo.domain.schemas.user import ProfileUpdate, UserRead
from caarvo.infrastructure.database import get_db
from caarvo.interfaces.api.deps import get_current_user
from caarvo.interfaces.deps import get_sms_client

router = APIRouter(prefix="/api/auth", tags=["Auth"])


def _session(user: User, token: str, message: str) -> dict:
    return envelope({"user": UserRead.model_validate(user), "token": token}, message)


@router.post("/send-otp")
async def send_otp(
    body: SendOtpRequest,
    db: Session = Depends(get_db),
    sms_client=Depends(get_sms_client),
):
    """Generate an OTP for the phone and try to deliver it by SMS."""
    message, data = await otp_service.issue_otp(db, body.phone, sms_client)
    return envelope(data, message)


@router.post("/verify-otp")
async def verify_otp(
    body: VerifyOtpRequest,
    db: Session = Depends(get_db),
    sms_client=Depends(get_sms_client),
):
    """Verify an OTP and sign in, creating the customer account on first login."""
    user, token = await otp_service.login_with_otp(
        db, body.phone, body.otp, sms_client, access_token=body.access_token
    )
    return _session(user, token, "Authentication successful")


@router.post("/login-phone")
async def login_phone(
    body: LoginPhoneRequest,
    db: Session = Depends(get_db),
    sms_client=Depends(get_sms_client),
):
    user, token = await otp_service.login_with_otp(db, body.phone, body.otp, sms_client)
    return _session(user, token, "Login successful")


@router.post("/login")
def login(body: LoginRequest, db: Session = Depends(get_db)):
    """Staff login with email and password."""
    user = auth_service.authenticate_user(db, body.email, body.password)
    return _session(user, auth_service.create_access_token(user), "Login successful")


@router.post("/login-password")
def login_password(body: LoginPasswordRequest, db: Session = Depends(get_db)):
    user = auth_service.authenticate_by_phone(db, body.phone, body.password)
    return _session(user, auth_service.create_access_token(user), "Login successful")


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(body: RegisterRequest, db: Session = Depends(get_db)):
    """Public registration creates customer accounts only."""
    if body.role != UserRole.USER.value:
        raise ForbiddenException("Staff accounts can only be created by an admin")
    user = auth_service.create_user(
        db,
        name=body.name,
        phone=body.phone,
        password=body.password,
        email=body.email,
        address=body.address.model_dump() if body.address else None,
    )
    return _session(user, auth_service.create_access_token(user), "User registered successfully")


@router.post("/register-user", status_code=status.HTTP_201_CREATED)
def register_user(body: RegisterUserRequest, db: Session = Depends(get_db)):
    user = auth_service.create_user(db, name=body.name, phone=body.phone, password=body.password)
    return _session(user, auth_service.create_access_token(user), "User registered successfully")


@router.get("/me")
def me(user: User = Depends(get_current_user)):
    return envelope(UserRead.model_validate(user))


@router.put("/me")
def update_me(
    body: ProfileUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    user = auth_service.update_profile(
        db,
        user,
        name=body.name,
        phone=body.phone,
        address=body.address.model_dump() if body.address else None,
    )
    return envelope(UserRead.model_validate(user), "Profile updated successfully")


@router.put("/change-password")
def change_password(
    body: ChangePasswordRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    auth_service.change_password(db, user, body.current_password, body.new_password)
    return envelope(message="Password changed successfully")
