"""Create a worker or admin account from the command line.

Usage:
    python scripts/create_staff.py --role admin --name "Ops" --email ops@example.com --phone +919800000001
Missing values are prompted for; the password is always prompted for unless --password is given.
"""

import argparse
import getpass
import os
import sys

from pydantic import ValidationError

# Add parent dir to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from caarvo.infrastructure.database import Base, SessionLocal, engine
from caarvo.application.services.auth_service import create_user
from caarvo.core.exceptions import AppError
from caarvo.domain.models.user import UserRole
from caarvo.domain.models.vehicle import Vehicle  # noqa: F401
from caarvo.domain.models.address import Address  # noqa: F401
from caarvo.domain.models.booking import Booking  # noqa: F401
from caarvo.domain.models.otp import OTP  # noqa: F401
from caarvo.domain.schemas.auth import StaffRegisterRequest


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Create a staff account")
    parser.add_argument("--role", choices=[UserRole.WORKER.value, UserRole.ADMIN.value], default=UserRole.WORKER.value)
    parser.add_argument("--name")
    parser.add_argument("--email")
    parser.add_argument("--phone")
    parser.add_argument("--password")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    name = args.name or input("Name: ").strip()
    email = args.email or input("Email: ").strip()
    phone = args.phone or input("Phone (+91XXXXXXXXXX): ").strip()
    password = args.password or getpass.getpass("Password: ")

    # Same field rules as the admin registration endpoint
    try:
        data = StaffRegisterRequest(name=name, email=email, phone=phone, password=password)
    except ValidationError as e:
        print(f"Invalid input:\n{e}")
        return 1

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        user = create_user(
            db,
            name=data.name,
            email=data.email,
            password=data.password,
            phone=data.phone,
            role=args.role,
        )
    except AppError as e:
        print(f"Could not create {args.role}: {e.message}")
        return 1
    finally:
        db.close()

    print(f"Created {user.role} #{user.id} ({user.email})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
