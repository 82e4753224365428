"""
Domain entities - Pure business logic, no framework dependencies.

Following SOLID principles:
- Single Responsibility: Each entity represents one business concept
- Open/Closed: Entities can be extended without modification
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Dict, FrozenSet, Optional, Union


class AppointmentStatus(str, Enum):
    """Lifecycle state of an appointment.

    Stored by name. ``description`` is the human-facing label used in API
    responses.
    """

    SCHEDULED = "Scheduled"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"
    CANCELLATION_REQUESTED = "CancellationRequested"

    @property
    def description(self) -> str:
        return _STATUS_DESCRIPTIONS[self]

    @property
    def is_terminal(self) -> bool:
        return not ALLOWED_TRANSITIONS[self]

    def can_transition_to(self, target: "AppointmentStatus") -> bool:
        """Check the transition table for ``self -> target``."""
        return target in ALLOWED_TRANSITIONS[self]

    @classmethod
    def parse(cls, value: Union["AppointmentStatus", str]) -> "AppointmentStatus":
        """Resolve a status from a member, its value, name or description.

        Matching ignores case, spaces and underscores, so "Scheduled",
        "CANCELLATION_REQUESTED" and "Cancellation Requested" all resolve.
        """
        if isinstance(value, cls):
            return value
        key = str(value or "").replace(" ", "").replace("_", "").lower()
        for member in cls:
            candidates = (member.value, member.name, member.description)
            if key in {c.replace(" ", "").replace("_", "").lower() for c in candidates}:
                return member
        raise ValueError(f"Invalid appointment status: {value!r}")

    def __str__(self) -> str:
        return self.value


_STATUS_DESCRIPTIONS: Dict[AppointmentStatus, str] = {
    AppointmentStatus.SCHEDULED: "Scheduled",
    AppointmentStatus.COMPLETED: "Completed",
    AppointmentStatus.CANCELLED: "Cancelled",
    AppointmentStatus.CANCELLATION_REQUESTED: "Cancellation Requested",
}

# Completed and Cancelled are terminal.
ALLOWED_TRANSITIONS: Dict[AppointmentStatus, FrozenSet[AppointmentStatus]] = {
    AppointmentStatus.SCHEDULED: frozenset(
        {
            AppointmentStatus.COMPLETED,
            AppointmentStatus.CANCELLED,
            AppointmentStatus.CANCELLATION_REQUESTED,
        }
    ),
    AppointmentStatus.CANCELLATION_REQUESTED: frozenset(
        {AppointmentStatus.CANCELLED, AppointmentStatus.SCHEDULED}
    ),
    AppointmentStatus.COMPLETED: frozenset(),
    AppointmentStatus.CANCELLED: frozenset(),
}


@dataclass
class Appointment:
    """Domain entity for Appointment business logic.

    Appointments are fixed 30-minute slots identified by their exact start
    time; two appointments conflict only when they share ``appointment_datetime``.
    """

    id: Optional[int] = None
    customer_id: int = 0
    dentist_id: int = 0
    appointment_datetime: Optional[datetime] = None
    procedure_type: str = ""
    notes: str = ""
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate business rules."""
        if self.customer_id <= 0:
            raise ValueError("Valid customer_id is required")
        if self.dentist_id <= 0:
            raise ValueError("Valid dentist_id is required")
        self.status = AppointmentStatus.parse(self.status)
        if self.notes is None:
            self.notes = ""

    @property
    def is_active(self) -> bool:
        """Non-cancelled appointments occupy their slot."""
        return self.status != AppointmentStatus.CANCELLED


@dataclass
class Customer:
    """Domain entity representing a clinic customer (patient)."""

    id: Optional[int] = None
    name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    date_of_birth: Optional[date] = None
    is_active: bool = True
    user_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        if not self.name:
            raise ValueError("Name is required")
        if self.email and "@" not in self.email:
            raise ValueError("Invalid email format")


@dataclass
class Dentist:
    """Domain entity representing a dentist."""

    id: Optional[int] = None
    name: str = ""
    email: str = ""
    phone: str = ""
    license_number: str = ""
    specialization: str = ""
    is_active: bool = True
    user_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        if not self.name:
            raise ValueError("Name is required")
        if self.email and "@" not in self.email:
            raise ValueError("Invalid email format")
