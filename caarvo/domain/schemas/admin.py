"""Pydantic schemas for the admin dashboard."""

from enum import Enum

from caarvo.domain.schemas.common import CamelModel, UtcDatetime


class AnalyticsPeriod(str, Enum):
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class StatusCount(CamelModel):
    status: str
    count: int


class Analytics(CamelModel):
    period: AnalyticsPeriod
    start_date: UtcDatetime
    total_bookings: int
    completed_bookings: int
    pending_bookings: int
    cancelled_bookings: int
    total_revenue: float
    average_rating: float
    total_users: int
    total_workers: int
    total_admins: int
    status_distribution: list[StatusCount]
