"""Pydantic schemas for saved addresses."""

from typing import Optional

from pydantic import Field

from caarvo.domain.schemas.common import CamelModel, UtcDatetime


class Coordinates(CamelModel):
    lat: Optional[float] = Field(default=None, ge=-90, le=90)
    lng: Optional[float] = Field(default=None, ge=-180, le=180)


class AddressCreate(CamelModel):
    street: str = Field(min_length=1, max_length=300)
    city: str = Field(min_length=1, max_length=100)
    state: str = Field(min_length=1, max_length=100)
    zip_code: str = Field(min_length=1, max_length=20)
    country: str = Field(default="India", max_length=100)
    coordinates: Optional[Coordinates] = None
    is_default: bool = False
    nickname: Optional[str] = Field(default=None, max_length=50)
    notes: Optional[str] = Field(default=None, max_length=200)


class AddressUpdate(CamelModel):
    street: Optional[str] = Field(default=None, min_length=1, max_length=300)
    city: Optional[str] = Field(default=None, min_length=1, max_length=100)
    state: Optional[str] = Field(default=None, min_length=1, max_length=100)
    zip_code: Optional[str] = Field(default=None, min_length=1, max_length=20)
    country: Optional[str] = Field(default=None, max_length=100)
    coordinates: Optional[Coordinates] = None
    is_default: Optional[bool] = None
    nickname: Optional[str] = Field(default=None, max_length=50)
    notes: Optional[str] = Field(default=None, max_length=200)


class AddressRead(CamelModel):
    id: int
    owner_id: int
    street: str
    city: str
    state: str
    zip_code: str
    country: str
    coordinates: Optional[Coordinates] = None
    is_default: bool
    is_active: bool
    nickname: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[UtcDatetime] = None
    updated_at: Optional[UtcDatetime] = None
