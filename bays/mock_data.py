"""Mock venue floor: 13 Tacoma bays and 8 Redmond bays."""

from __future__ import annotations
from tracking import t

from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from bays.models import ActiveBooking, BayStatus, UpcomingBooking, VenueLocation
from pricing.membership import Membership

# (name, available, cleaned_seconds_ago, current, upcoming, maintenance, estimated_in_seconds)
# current = (member, started_seconds_ago, ends_in_seconds, tier)
# upcoming = (member, starts_in_seconds, tier)
_TACOMA = [
    ("Woods", True, 900, None, None, False, None),
    ("Mickelson", False, 3600, ("John Smith", 1800, 1800, Membership.BASIC), None, False, None),
    ("Palmer", True, 600, None, ("Sarah Johnson", 3600, Membership.PREMIUM), False, None),
    ("Nicklaus", False, 0, None, None, False, 900),
    ("Ochoa", True, 300, None, None, False, None),
    ("Garcia", False, 4500, ("Mike Wilson", 2700, 900, Membership.PLATINUM), None, False, None),
    ("McIlroy", True, 1200, None, None, False, None),
    ("Spieth", True, 800, None, ("Guest User", 7200, None), False, None),
    ("Day", False, 2100, ("Jennifer Lee", 900, 2700, Membership.BASIC), None, False, None),
    ("Fowler", True, 450, None, None, False, None),
    ("Thomas", True, 1800, None, None, False, None),
    ("Koepka", False, 0, None, None, True, 1800),
    ("Rahm", True, 750, None, ("Robert Chen", 1800, Membership.PREMIUM), False, None),
]

_REDMOND = [
    ("Watson", True, 600, None, None, False, None),
    ("Hogan", False, 3000, ("Lisa Wang", 2400, 1200, Membership.PLATINUM), None, False, None),
    ("Snead", True, 900, None, ("David Park", 2700, Membership.BASIC), False, None),
    ("Nelson", True, 300, None, None, False, None),
    ("Player", False, 2700, ("Guest Walk-in", 1200, 2400, None), None, False, None),
    ("Trevino", True, 1500, None, None, False, None),
    ("Couples", False, 0, None, None, False, 600),
    ("Singh", True, 1050, None, ("Team Building Event", 5400, Membership.PREMIUM), False, None),
]


def _bay_id(location: VenueLocation, name: str) -> str:
    return f"{location.value}-{name.lower()}"


def _build(location: VenueLocation, rows: List[Tuple], now: datetime) -> List[BayStatus]:
    bays = []
    for name, available, cleaned_ago, current, upcoming, maintenance, estimated_in in rows:
        bay_id = _bay_id(location, name)
        current_booking: Optional[ActiveBooking] = None
        next_booking: Optional[UpcomingBooking] = None

        if current is not None:
            member, started_ago, ends_in, tier = current
            current_booking = ActiveBooking(
                booking_id=f"{bay_id}-current",
                member_name=member,
                start_time=now - timedelta(seconds=started_ago),
                end_time=now + timedelta(seconds=ends_in),
                member_tier=tier,
            )
        if upcoming is not None:
            member, starts_in, tier = upcoming
            next_booking = UpcomingBooking(
                booking_id=f"{bay_id}-next",
                member_name=member,
                start_time=now + timedelta(seconds=starts_in),
                member_tier=tier,
            )

        bays.append(
            BayStatus(
                bay_id=bay_id,
                name=f"{name} - {location.display_name}",
                location=location,
                is_available=available,
                last_cleaning_time=now - timedelta(seconds=cleaned_ago),
                current_booking=current_booking,
                next_booking=next_booking,
                is_under_maintenance=maintenance,
                estimated_available=(
                    now + timedelta(seconds=estimated_in) if estimated_in is not None else None
                ),
            )
        )
    return bays


def build_mock_bays(now: datetime) -> List[BayStatus]:
    """Return a fresh copy of the mock floor relative to ``now``."""
    t('bays.mock_data.build_mock_bays')
    return _build(VenueLocation.TACOMA, _TACOMA, now) + _build(VenueLocation.REDMOND, _REDMOND, now)
