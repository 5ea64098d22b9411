"""
Constants Module - Centralized business values
==============================================

PURPOSE: Single source of truth for pricing, scheduling and simulation values
PATTERN: Modular constants organized by category
SCOPE: Application-wide configuration values
"""
from tracking import t

# Venue
DEFAULT_TIMEZONE = "America/Los_Angeles"
VENUE_HOURS_TEXT = "8:00 AM - 7:00 PM"

# Pricing tiers: hourly base rate and half-open [start, end) hour ranges.
# Night wraps midnight and is resolved as the fallback tier.
TIER_BASE_PRICES = {
    "morning": 36.0,
    "afternoon": 48.0,
    "evening": 60.0,
    "night": 30.0,
}

TIER_HOUR_RANGES = {
    "morning": (6, 12),
    "afternoon": (12, 17),
    "evening": (17, 22),
}

TIER_MEMBER_DISCOUNT = 0.15
TIER_SESSION_MINUTES = 60

# Deposit and cancellation rules
DEPOSIT_RATE = 0.25
DEPOSIT_REQUIRED_FROM_PRICE = 50.0
CANCELLATION_DEADLINE_HOURS = 2
STARTING_SOON_MINUTES = 30

# Booking wizard
MIN_PLAYERS = 1
MAX_PLAYERS = 6
DEFAULT_PLAYER_COUNT = 2
WIZARD_TIME_SLOTS = ["9:15 AM", "9:30 AM", "9:45 AM", "10:00 AM", "10:15 AM"]
TIME_SLOT_LABEL_FORMAT = "%I:%M %p"

# Sessions
DEFAULT_SESSION_MINUTES = 60
SESSION_POLL_INTERVAL_SECONDS = 30.0
ACTIVE_SESSION_POLL_INTERVAL_SECONDS = 60.0
MOCK_UPCOMING_START_MINUTES = 25
DEFAULT_CUSTOMER_NAME = "Guest User"

# Bay simulation
BAY_UPDATE_INTERVAL_SECONDS = 30.0
BAY_FLIP_PROBABILITY = 0.1
CONNECTION_DROP_PROBABILITY = 0.05
RECONNECT_DELAY_SECONDS = 2.0
SIMULATED_BOOKING_MINUTES = 60
MOCK_CUSTOMER_NAMES = ["John Doe", "Jane Smith", "Guest User", "Mike Wilson"]

# Venue locations: display name, subtitle, address
VENUE_LOCATIONS = {
    "redmond": ("Redmond", "Premier Indoor Golf", "14603 NE 87th ST, Redmond, WA 98052"),
    "tacoma": ("Tacoma", "Indoor Golf Club", "2101 Mildred St W, Tacoma, WA 98466"),
}

# Periodic task back-off
MIN_ERROR_BACKOFF_SECONDS = 30.0

# Logging
DEFAULT_LOG_DIRECTORY = "logs/latest_log"


def tier_for_hour_name(hour: int) -> str:
    """Return the tier name whose hour range contains ``hour`` (0-23)."""
    t('infrastructure.constants.tier_for_hour_name')
    if not 0 <= hour <= 23:
        raise ValueError(f"Hour must be between 0 and 23, got {hour}")
    for name, (start, end) in TIER_HOUR_RANGES.items():
        if start <= hour < end:
            return name
    return "night"
