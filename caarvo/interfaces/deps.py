"""
API Dependencies: repositories and external clients.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from caarvo.domain.models.address import Address
from caarvo.domain.models.booking import Booking
from caarvo.domain.models.vehicle import Vehicle
from caarvo.domain.repositories.address_repository import AddressRepository
from caarvo.domain.repositories.booking_repository import BookingRepository
from caarvo.domain.repositories.vehicle_repository import VehicleRepository
from caarvo.infrastructure.clients.msg91_api import Msg91Client
from caarvo.infrastructure.clients.razorpay_api import RazorpayClient
from caarvo.infrastructure.database import get_db
from caarvo.infrastructure.repositories.address_repository import SQLAlchemyAddressRepository
from caarvo.infrastructure.repositories.booking_repository import SQLAlchemyBookingRepository
from caarvo.infrastructure.repositories.vehicle_repository import SQLAlchemyVehicleRepository


def get_vehicle_repository(db: Session = Depends(get_db)) -> VehicleRepository:
    """Get vehicle repository instance."""
    return SQLAlchemyVehicleRepository(db, Vehicle)


def get_address_repository(db: Session = Depends(get_db)) -> AddressRepository:
    """Get address repository instance."""
    return SQLAlchemyAddressRepository(db, Address)


def get_booking_repository(db: Session = Depends(get_db)) -> BookingRepository:
    """Get booking repository instance."""
    return SQLAlchemyBookingRepository(db, Booking)


def get_sms_client() -> Msg91Client:
    return Msg91Client()


def get_payment_gateway() -> RazorpayClient:
    return RazorpayClient()
