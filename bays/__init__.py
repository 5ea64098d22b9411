"""Simulator bay status models and the live status manager."""

from .models import ActiveBooking, BayStatus, UpcomingBooking, VenueLocation, new_booking_id
from .mock_data import build_mock_bays
from .bay_status_manager import BayStatusManager

__all__ = [
    "ActiveBooking",
    "BayStatus",
    "UpcomingBooking",
    "VenueLocation",
    "new_booking_id",
    "build_mock_bays",
    "BayStatusManager",
]
