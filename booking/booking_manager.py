"""
Booking Manager Module

Collects the customer's choices while they walk through the booking wizard
and turns a finished wizard into a scheduled customer session. Navigation is
driven by explicit UI actions; nothing here advances on its own.
"""
from tracking import t

import logging
from datetime import date, datetime, timedelta
from enum import Enum
from typing import List, Optional

from bays.models import BayStatus, VenueLocation
from infrastructure.clock import Clock, venue_clock
from infrastructure.constants import (
    DEFAULT_PLAYER_COUNT,
    MAX_PLAYERS,
    MIN_PLAYERS,
    TIME_SLOT_LABEL_FORMAT,
    WIZARD_TIME_SLOTS,
)
from infrastructure.settings import AppSettings, get_settings
from pricing.calculator import PriceQuote, deposit_for, effective_price, quote
from pricing.membership import Membership
from pricing.tiers import PricingTier
from sessions.session_manager import CustomerSessionManager


class BookingStep(Enum):
    """Wizard screens in the order they are shown"""
    MEMBERSHIP_CHECK = "membership_check"
    PLAYER_SELECTION = "player_selection"
    DATE_TIME_SELECTION = "date_time_selection"
    PRICING_SELECTION = "pricing_selection"
    PHONE_VERIFICATION = "phone_verification"
    CONFIRMATION = "confirmation"


class MembershipFlowStep(Enum):
    """Sub-steps of the membership check screen"""
    AGE_VERIFICATION = "age_verification"
    PHONE_ENTRY = "phone_entry"
    PHONE_VERIFICATION = "phone_verification"
    MEMBERSHIP_WELCOME = "membership_welcome"


def _step_after(current: Enum, offset: int) -> Optional[Enum]:
    members = list(type(current))
    index = members.index(current) + offset
    if 0 <= index < len(members):
        return members[index]
    return None


class BookingManager:
    """
    Booking wizard state.

    Attributes:
        player_count (int): Players on the bay, always within 1..6
        selected_date (date): Day being booked
        selected_time_slot (str): Offered slot label such as ``"9:15 AM"``; empty until chosen
        selected_pricing (Optional[PricingTier]): Tier chosen on the pricing screen
        membership (Membership): Customer's membership, used for the discount
        current_step (BookingStep): Screen currently shown
    """

    def __init__(
        self,
        *,
        settings: Optional[AppSettings] = None,
        clock: Optional[Clock] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        t('booking.booking_manager.BookingManager.__init__')
        self.settings = settings or get_settings()
        self.clock = clock or venue_clock(self.settings)
        self.logger = logger or logging.getLogger('BookingManager')
        self.reset()

    def reset(self) -> None:
        """Restore every wizard field to its default."""
        t('booking.booking_manager.BookingManager.reset')
        self.player_count = DEFAULT_PLAYER_COUNT
        self.selected_date: date = self.clock().date()
        self.selected_time_slot = ""
        self.selected_pricing: Optional[PricingTier] = None
        self.phone_number = ""
        self.location = VenueLocation.REDMOND
        self.membership = Membership.GUEST
        self.is_existing_member = False
        self.membership_step = MembershipFlowStep.AGE_VERIFICATION
        self.current_step = BookingStep.MEMBERSHIP_CHECK

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def advance(self) -> bool:
        t('booking.booking_manager.BookingManager.advance')
        next_step = _step_after(self.current_step, 1)
        if next_step is None:
            self.logger.warning("Booking wizard is already on the confirmation step")
            return False
        self.logger.debug(f"Booking step {self.current_step.value} -> {next_step.value}")
        self.current_step = next_step
        return True

    def go_back(self) -> bool:
        t('booking.booking_manager.BookingManager.go_back')
        previous_step = _step_after(self.current_step, -1)
        if previous_step is None:
            self.logger.warning("Booking wizard is already on the first step")
            return False
        self.logger.debug(f"Booking step {self.current_step.value} -> {previous_step.value}")
        self.current_step = previous_step
        return True

    def advance_membership_step(self) -> bool:
        t('booking.booking_manager.BookingManager.advance_membership_step')
        next_step = _step_after(self.membership_step, 1)
        if next_step is None:
            return False
        self.membership_step = next_step
        return True

    # ------------------------------------------------------------------
    # Selections
    # ------------------------------------------------------------------
    def set_player_count(self, count: int) -> int:
        """Set the player count, clamped to the allowed range."""
        t('booking.booking_manager.BookingManager.set_player_count')
        self.player_count = max(MIN_PLAYERS, min(MAX_PLAYERS, int(count)))
        return self.player_count

    def increment_players(self) -> bool:
        t('booking.booking_manager.BookingManager.increment_players')
        if self.player_count >= MAX_PLAYERS:
            return False
        self.player_count += 1
        return True

    def decrement_players(self) -> bool:
        t('booking.booking_manager.BookingManager.decrement_players')
        if self.player_count <= MIN_PLAYERS:
            return False
        self.player_count -= 1
        return True

    def select_time_slot(self, label: str) -> bool:
        t('booking.booking_manager.BookingManager.select_time_slot')
        if label not in self.available_time_slots:
            self.logger.warning(f"Time slot {label!r} is not offered")
            return False
        self.selected_time_slot = label
        return True

    def select_pricing(self, tier: PricingTier) -> None:
        t('booking.booking_manager.BookingManager.select_pricing')
        self.selected_pricing = tier

    def set_membership(self, membership: Membership, *, existing: bool = True) -> None:
        t('booking.booking_manager.BookingManager.set_membership')
        self.membership = membership
        self.is_existing_member = existing

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------
    @property
    def available_time_slots(self) -> List[str]:
        t('booking.booking_manager.BookingManager.available_time_slots')
        return list(WIZARD_TIME_SLOTS)

    @property
    def total_price(self) -> float:
        t('booking.booking_manager.BookingManager.total_price')
        if self.selected_pricing is None:
            return 0.0
        return effective_price(self.selected_pricing, self.membership)

    @property
    def member_discount(self) -> float:
        t('booking.booking_manager.BookingManager.member_discount')
        if self.selected_pricing is None:
            return 0.0
        return self.selected_pricing.base_price - self.total_price

    @property
    def deposit_amount(self) -> float:
        t('booking.booking_manager.BookingManager.deposit_amount')
        return deposit_for(self.total_price)

    @property
    def session_duration(self) -> int:
        """Session length in minutes."""
        t('booking.booking_manager.BookingManager.session_duration')
        if self.selected_pricing is None:
            return self.settings.default_session_minutes
        return self.selected_pricing.session_duration_minutes

    @property
    def can_send_code(self) -> bool:
        t('booking.booking_manager.BookingManager.can_send_code')
        return bool(self.phone_number.strip())

    def quote(self) -> Optional[PriceQuote]:
        t('booking.booking_manager.BookingManager.quote')
        if self.selected_pricing is None:
            return None
        return quote(self.selected_pricing, self.membership)

    def planned_start(self) -> Optional[datetime]:
        """Selected date and slot label as an aware venue-time datetime."""
        t('booking.booking_manager.BookingManager.planned_start')
        if self.selected_date is None or not self.selected_time_slot:
            return None
        try:
            slot_time = datetime.strptime(self.selected_time_slot.strip(), TIME_SLOT_LABEL_FORMAT).time()
        except ValueError:
            self.logger.warning(f"Unparseable time slot label {self.selected_time_slot!r}")
            return None
        tz = self.settings.get_timezone()
        return tz.localize(datetime.combine(self.selected_date, slot_time))

    # ------------------------------------------------------------------
    # Completion
    # ------------------------------------------------------------------
    def complete_booking(self, session_manager: CustomerSessionManager, bay: Optional[BayStatus]) -> bool:
        """
        Schedule the customer session described by the wizard.

        Args:
            session_manager: Manager that will own the new session
            bay: Bay the customer picked

        Returns:
            bool: True if the session was scheduled
        """
        t('booking.booking_manager.BookingManager.complete_booking')
        if bay is None:
            self.logger.warning("Cannot complete booking without a bay")
            return False

        start_time = self.planned_start()
        if start_time is None:
            self.logger.warning("Cannot complete booking without a date and time slot")
            return False

        scheduled = session_manager.schedule_upcoming_session(
            bay.bay_id,
            bay.name,
            bay.location,
            start_time,
            duration=timedelta(minutes=self.session_duration),
            total_cost=self.total_price,
            membership=self.membership,
        )
        if not scheduled:
            return False

        self.logger.info(f"""BOOKING COMPLETED
        Bay: {bay.name}
        Start: {start_time.isoformat()}
        Players: {self.player_count}
        Tier: {self.selected_pricing.value if self.selected_pricing else 'none'}
        Membership: {self.membership.value}
        Total: {self.total_price:.2f}
        Deposit: {self.deposit_amount:.2f}
        """)
        return True
