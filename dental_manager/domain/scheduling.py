"""
Scheduling rules for the clinic: business calendar, date/time validation,
double-booking checks and available slot enumeration.

The rules here are pure apart from the conflict lookups, which go through
an IAppointmentReader so they can be exercised against any store.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Iterator, List, NamedTuple, Optional, Union

from .entities import AppointmentStatus
from .interfaces import IAppointmentReader

logger = logging.getLogger(__name__)

SATURDAY = 5
SUNDAY = 6


class ValidationResult(NamedTuple):
    is_valid: bool
    message: str = ""


@dataclass(frozen=True)
class BusinessCalendar:
    """Opening hours and slot size of the clinic (single timezone)."""

    opening_time: time = time(8, 0)
    closing_time: time = time(18, 0)
    slot_minutes: int = 30
    closed_weekdays: frozenset = frozenset({SATURDAY, SUNDAY})

    @property
    def slot_length(self) -> timedelta:
        return timedelta(minutes=self.slot_minutes)

    def is_business_day(self, value: Union[date, datetime]) -> bool:
        return value.weekday() not in self.closed_weekdays

    def is_within_hours(self, value: datetime) -> bool:
        """Opening time inclusive, closing time exclusive."""
        return self.opening_time <= value.time() < self.closing_time

    def iter_business_slots(
        self, start_date: Union[date, datetime], end_date: Union[date, datetime]
    ) -> Iterator[datetime]:
        """Yield every slot start from start_date's opening to end_date's closing.

        Only the date part of the bounds is used. Weekends are skipped.
        Each call returns a fresh generator.
        """
        current_day = _as_date(start_date)
        last_day = _as_date(end_date)
        while current_day <= last_day:
            if self.is_business_day(current_day):
                slot = datetime.combine(current_day, self.opening_time)
                closing = datetime.combine(current_day, self.closing_time)
                while slot < closing:
                    yield slot
                    slot += self.slot_length
            current_day += timedelta(days=1)


DEFAULT_CALENDAR = BusinessCalendar()


def _as_date(value: Union[date, datetime]) -> date:
    return value.date() if isinstance(value, datetime) else value


def validate_appointment_datetime(
    appointment_datetime: datetime,
    now: Optional[datetime] = None,
    calendar: BusinessCalendar = DEFAULT_CALENDAR,
) -> ValidationResult:
    """Check that an appointment time is bookable.

    Rules, reported in this order (first failure wins):
    1. naive clinic-local time (no UTC offset)
    2. strictly after ``now``
    3. time of day in [opening, closing)
    4. not on a weekend
    """
    if appointment_datetime.tzinfo is not None:
        return ValidationResult(
            False, "Appointment time must not include a timezone offset."
        )

    current = now or datetime.now()

    if appointment_datetime <= current:
        return ValidationResult(False, "Cannot schedule appointments in the past.")

    if not calendar.is_within_hours(appointment_datetime):
        return ValidationResult(
            False,
            "Appointments can only be scheduled between "
            f"{calendar.opening_time:%H:%M} and {calendar.closing_time:%H:%M}.",
        )

    if not calendar.is_business_day(appointment_datetime):
        return ValidationResult(False, "Appointments cannot be scheduled on weekends.")

    return ValidationResult(True, "")


class ConflictEngine:
    """Double-booking detection and availability queries over a store."""

    def __init__(
        self,
        appointment_repo: IAppointmentReader,
        calendar: BusinessCalendar = DEFAULT_CALENDAR,
        clock=datetime.now,
    ):
        self.appointment_repo = appointment_repo
        self.calendar = calendar
        self.clock = clock

    def validate_datetime(self, appointment_datetime: datetime) -> ValidationResult:
        return validate_appointment_datetime(
            appointment_datetime, now=self.clock(), calendar=self.calendar
        )

    def has_customer_conflict(
        self,
        customer_id: int,
        appointment_datetime: datetime,
        exclude_id: Optional[int] = None,
    ) -> bool:
        return self.appointment_repo.has_customer_conflict(
            customer_id, appointment_datetime, exclude_id
        )

    def has_dentist_conflict(
        self,
        dentist_id: int,
        appointment_datetime: datetime,
        exclude_id: Optional[int] = None,
    ) -> bool:
        return self.appointment_repo.has_dentist_conflict(
            dentist_id, appointment_datetime, exclude_id
        )

    def enumerate_available_slots(
        self,
        dentist_id: int,
        start_date: Union[date, datetime],
        end_date: Union[date, datetime],
    ) -> List[datetime]:
        """Free slots for a dentist between two dates (inclusive).

        Loads the bookings inside the date window once and checks each
        candidate slot against that set, giving the same answer as calling
        has_dentist_conflict per slot.
        """
        occupied = self._occupied_slots(dentist_id, start_date, end_date)
        slots = [
            slot
            for slot in self.calendar.iter_business_slots(start_date, end_date)
            if slot not in occupied
        ]
        logger.debug(
            "Enumerated available slots",
            extra={
                "context": {
                    "dentist_id": dentist_id,
                    "start_date": str(start_date),
                    "end_date": str(end_date),
                    "occupied": len(occupied),
                    "available": len(slots),
                }
            },
        )
        return slots

    def is_slot_available(self, dentist_id: int, appointment_datetime: datetime) -> bool:
        if not self.validate_datetime(appointment_datetime).is_valid:
            return False
        return not self.has_dentist_conflict(dentist_id, appointment_datetime)

    def _occupied_slots(
        self,
        dentist_id: int,
        start_date: Union[date, datetime],
        end_date: Union[date, datetime],
    ) -> set:
        window_start = datetime.combine(_as_date(start_date), time.min)
        window_end = datetime.combine(_as_date(end_date), time.max)
        return {
            appointment.appointment_datetime
            for appointment in self.appointment_repo.get_by_date_range(
                window_start, window_end
            )
            if appointment.dentist_id == dentist_id
            and appointment.status != AppointmentStatus.CANCELLED
        }
