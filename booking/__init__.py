"""Booking wizard orchestration."""

from .booking_manager import BookingManager, BookingStep, MembershipFlowStep

__all__ = ["BookingManager", "BookingStep", "MembershipFlowStep"]
