"""Auth service: JWT token management, password hashing and account creation."""

from datetime import datetime, timedelta, timezone
from typing import Optional

import structlog
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import func
from sqlalchemy.orm import Session

from caarvo.config import get_settings
from caarvo.core.exceptions import (
    ConflictException,
    InvalidCredentialsException,
    UnauthorizedException,
    ValidationException,
)
from caarvo.domain.models.user import User, UserRole

settings = get_settings()
logger = structlog.get_logger(__name__)
pwd_context = CryptContext(
    schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.BCRYPT_ROUNDS
)

DEFAULT_CUSTOMER_NAME = "Customer"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.JWT_EXPIRATION_MINUTES)
    )
    to_encode = {"sub": str(user.id), "role": user.role, "exp": expire}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[dict]:
    try:
        payload = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM]
        )
        return payload
    except JWTError:
        return None


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(func.lower(User.email) == email.strip().lower()).first()


def get_user_by_phone(db: Session, phone: str) -> Optional[User]:
    return db.query(User).filter(User.phone == phone).first()


def _check_login(user: Optional[User], password: str) -> User:
    # Unknown account, password-less account and wrong password look the same
    if not user or not verify_password(password, user.password_hash):
        raise InvalidCredentialsException()
    if not user.is_active:
        raise InvalidCredentialsException()
    return user


def authenticate_user(db: Session, email: str, password: str) -> User:
    return _check_login(get_user_by_email(db, email), password)


def authenticate_by_phone(db: Session, phone: str, password: str) -> User:
    return _check_login(get_user_by_phone(db, phone), password)


def check_identity_rules(role: str, email: Optional[str]) -> None:
    """Staff are identified by email; customer accounts must not carry one."""
    if role == UserRole.USER.value and email:
        raise ValidationException("Email is not allowed for customer accounts")
    if role != UserRole.USER.value and not email:
        raise ValidationException("Email is required for staff accounts")


def ensure_unique(db: Session, phone: Optional[str] = None, email: Optional[str] = None, exclude_id: Optional[int] = None) -> None:
    if phone:
        existing = get_user_by_phone(db, phone)
        if existing and existing.id != exclude_id:
            raise ConflictException("User with this phone number already exists")
    if email:
        existing = get_user_by_email(db, email)
        if existing and existing.id != exclude_id:
            raise ConflictException("User with this email already exists")


def create_user(
    db: Session,
    name: str,
    phone: str,
    password: Optional[str] = None,
    email: Optional[str] = None,
    role: str = UserRole.USER.value,
    address: Optional[dict] = None,
    specialties: Optional[list[str]] = None,
) -> User:
    role = UserRole(role).value
    email = email.strip().lower() if email else None
    check_identity_rules(role, email)
    ensure_unique(db, phone=phone, email=email)

    user = User(
        name=name,
        email=email,
        phone=phone,
        password_hash=hash_password(password) if password else None,
        role=role,
        address=address,
        specialties=specialties if role == UserRole.WORKER.value else None,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("User created", user_id=user.id, role=role)
    return user


def find_or_create_by_phone(db: Session, phone: str) -> User:
    user = get_user_by_phone(db, phone)
    if user:
        return user
    return create_user(db, name=DEFAULT_CUSTOMER_NAME, phone=phone)


def ensure_active(user: User) -> User:
    if not user.is_active:
        raise UnauthorizedException("Account is deactivated")
    return user


def update_profile(db: Session, user: User, name: Optional[str] = None, phone: Optional[str] = None, address: Optional[dict] = None) -> User:
    if phone and phone != user.phone:
        ensure_unique(db, phone=phone, exclude_id=user.id)
        user.phone = phone
    if name:
        user.name = name
    if address is not None:
        user.address = address
    db.commit()
    db.refresh(user)
    return user


def change_password(db: Session, user: User, current_password: str, new_password: str) -> None:
    if not user.password_hash:
        raise ValidationException("No password is set for this account")
    if not verify_password(current_password, user.password_hash):
        raise ValidationException("Current password is incorrect")
    user.password_hash = hash_password(new_password)
    db.commit()
    logger.info("Password changed", user_id=user.id)


def ensure_default_admin(db: Session) -> Optional[User]:
    """Create the DEFAULT_ADMIN_* account when configured and absent."""
    if not all(
        (
            settings.DEFAULT_ADMIN_NAME,
            settings.DEFAULT_ADMIN_EMAIL,
            settings.DEFAULT_ADMIN_PASSWORD,
            settings.DEFAULT_ADMIN_PHONE,
        )
    ):
        return None
    existing = get_user_by_email(db, settings.DEFAULT_ADMIN_EMAIL)
    if existing:
        return existing
    admin = create_user(
        db,
        name=settings.DEFAULT_ADMIN_NAME,
        email=settings.DEFAULT_ADMIN_EMAIL,
        password=settings.DEFAULT_ADMIN_PASSWORD,
        phone=settings.DEFAULT_ADMIN_PHONE,
        role=UserRole.ADMIN.value,
    )
    logger.info("Default admin user created", email=admin.email)
    return admin
