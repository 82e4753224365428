"""
Data Transfer Objects (DTOs) and validation schemas.

Following SOLID principles:
- Single Responsibility: Each schema validates one specific data contract
- Open/Closed: Schemas can be extended without modification

Request DTOs only check the shape of the payload. Business rules
(opening hours, conflicts, status lifecycle) belong to the service.
"""

from dataclasses import asdict, dataclass
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from dental_manager.core.api_utils import parse_iso_date, parse_iso_datetime
from dental_manager.domain.entities import AppointmentStatus

MAX_PROCEDURE_LENGTH = 200
MAX_NOTES_LENGTH = 1000
MAX_REASON_LENGTH = 500
SLOT_DURATION_MINUTES = 30

# Match the column sizes in db.base
MAX_NAME_LENGTH = 200
MAX_EMAIL_LENGTH = 200
MAX_PHONE_LENGTH = 30
MAX_ADDRESS_LENGTH = 300
MAX_LICENSE_LENGTH = 50
MAX_SPECIALIZATION_LENGTH = 100


def _required_int(payload: Dict[str, Any], field: str) -> int:
    value = payload.get(field)
    if value is None or isinstance(value, bool):
        raise ValueError(f"{field} is required")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{field} must be an integer")


def _isoformat(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass
class AppointmentCreateRequest:
    """DTO for appointment creation requests."""

    customer_id: int
    dentist_id: int
    appointment_datetime: datetime
    procedure_type: str
    notes: str = ""

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "AppointmentCreateRequest":
        return cls(
            customer_id=_required_int(payload, "customer_id"),
            dentist_id=_required_int(payload, "dentist_id"),
            appointment_datetime=parse_iso_datetime(
                payload.get("appointment_datetime"), "appointment_datetime"
            ),
            procedure_type=str(payload.get("procedure_type") or ""),
            notes=str(payload.get("notes") or ""),
        )

    def validate(self) -> None:
        """Validate the request data."""
        if len(self.procedure_type) > MAX_PROCEDURE_LENGTH:
            raise ValueError(
                f"procedure_type cannot exceed {MAX_PROCEDURE_LENGTH} characters"
            )
        if len(self.notes) > MAX_NOTES_LENGTH:
            raise ValueError(f"notes cannot exceed {MAX_NOTES_LENGTH} characters")


@dataclass
class AppointmentUpdateRequest(AppointmentCreateRequest):
    """DTO for appointment update requests (full replacement of editable fields)."""

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "AppointmentUpdateRequest":
        base = AppointmentCreateRequest.from_dict(payload)
        return cls(**asdict(base))


@dataclass
class AppointmentStatusUpdateRequest:
    """DTO for status change requests."""

    status: AppointmentStatus
    reason: str = ""

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "AppointmentStatusUpdateRequest":
        raw = payload.get("status")
        if raw is None or raw == "":
            raise ValueError("status is required")
        return cls(
            status=AppointmentStatus.parse(raw),
            reason=str(payload.get("reason") or ""),
        )

    def validate(self) -> None:
        if len(self.reason) > MAX_REASON_LENGTH:
            raise ValueError(f"reason cannot exceed {MAX_REASON_LENGTH} characters")


@dataclass
class CancellationRequest:
    """DTO for a customer asking to cancel their appointment."""

    customer_id: int
    reason: str = ""

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "CancellationRequest":
        return cls(
            customer_id=_required_int(payload, "customer_id"),
            reason=str(payload.get("reason") or ""),
        )

    def validate(self) -> None:
        if self.customer_id <= 0:
            raise ValueError("customer_id must be a positive integer")
        if len(self.reason) > MAX_REASON_LENGTH:
            raise ValueError(f"reason cannot exceed {MAX_REASON_LENGTH} characters")


@dataclass
class AppointmentResponse:
    """DTO for appointment API responses."""

    id: int
    customer_id: int
    dentist_id: int
    appointment_datetime: datetime
    procedure_type: str
    notes: str
    status: str
    status_description: str
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    @classmethod
    def from_domain(cls, appointment) -> "AppointmentResponse":
        """Create response from domain entity."""
        return cls(
            id=appointment.id,
            customer_id=appointment.customer_id,
            dentist_id=appointment.dentist_id,
            appointment_datetime=appointment.appointment_datetime,
            procedure_type=appointment.procedure_type,
            notes=appointment.notes,
            status=appointment.status.value,
            status_description=appointment.status.description,
            created_at=appointment.created_at,
            updated_at=appointment.updated_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        for key in ("appointment_datetime", "created_at", "updated_at"):
            data[key] = _isoformat(data[key])
        return data


@dataclass
class AvailableSlotResponse:
    """DTO for one free slot of a dentist."""

    dentist_id: int
    appointment_datetime: datetime
    dentist_name: str = ""
    duration_minutes: int = SLOT_DURATION_MINUTES
    is_available: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dentist_id": self.dentist_id,
            "dentist_name": self.dentist_name,
            "appointment_datetime": self.appointment_datetime.isoformat(),
            "duration_minutes": self.duration_minutes,
            "is_available": self.is_available,
        }


def _text(payload: Dict[str, Any], field: str) -> str:
    return str(payload.get(field) or "").strip()


def _flag(payload: Dict[str, Any], field: str, default: bool = True) -> bool:
    value = payload.get(field, default)
    if not isinstance(value, bool):
        raise ValueError(f"{field} must be a boolean")
    return value


def _check_lengths(limits: Dict[str, int], values: Dict[str, str]) -> None:
    for field, limit in limits.items():
        if len(values[field]) > limit:
            raise ValueError(f"{field} cannot exceed {limit} characters")


def _check_name_and_email(name: str, email: str) -> None:
    if not name:
        raise ValueError("name is required")
    if not email:
        raise ValueError("email is required")
    if "@" not in email:
        raise ValueError("email must be a valid email address")


@dataclass
class CustomerCreateRequest:
    """DTO for customer creation requests."""

    name: str
    email: str
    phone: str = ""
    address: str = ""
    date_of_birth: Optional[date] = None

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "CustomerCreateRequest":
        return cls(
            name=_text(payload, "name"),
            email=_text(payload, "email"),
            phone=_text(payload, "phone"),
            address=_text(payload, "address"),
            date_of_birth=parse_iso_date(payload.get("date_of_birth"), "date_of_birth"),
        )

    def validate(self) -> None:
        _check_name_and_email(self.name, self.email)
        _check_lengths(
            {
                "name": MAX_NAME_LENGTH,
                "email": MAX_EMAIL_LENGTH,
                "phone": MAX_PHONE_LENGTH,
                "address": MAX_ADDRESS_LENGTH,
            },
            asdict(self),
        )
        if self.date_of_birth and self.date_of_birth > date.today():
            raise ValueError("date_of_birth cannot be in the future")


@dataclass
class CustomerUpdateRequest(CustomerCreateRequest):
    """DTO for customer update requests; may also toggle ``is_active``."""

    is_active: bool = True

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "CustomerUpdateRequest":
        base = CustomerCreateRequest.from_dict(payload)
        return cls(**asdict(base), is_active=_flag(payload, "is_active"))


@dataclass
class DentistCreateRequest:
    """DTO for dentist creation requests."""

    name: str
    email: str
    phone: str = ""
    license_number: str = ""
    specialization: str = ""

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "DentistCreateRequest":
        return cls(
            name=_text(payload, "name"),
            email=_text(payload, "email"),
            phone=_text(payload, "phone"),
            license_number=_text(payload, "license_number"),
            specialization=_text(payload, "specialization"),
        )

    def validate(self) -> None:
        _check_name_and_email(self.name, self.email)
        _check_lengths(
            {
                "name": MAX_NAME_LENGTH,
                "email": MAX_EMAIL_LENGTH,
                "phone": MAX_PHONE_LENGTH,
                "license_number": MAX_LICENSE_LENGTH,
                "specialization": MAX_SPECIALIZATION_LENGTH,
            },
            asdict(self),
        )


@dataclass
class DentistUpdateRequest(DentistCreateRequest):
    """DTO for dentist update requests; may also toggle ``is_active``."""

    is_active: bool = True

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "DentistUpdateRequest":
        base = DentistCreateRequest.from_dict(payload)
        return cls(**asdict(base), is_active=_flag(payload, "is_active"))


@dataclass
class CustomerResponse:
    """DTO for customer API responses."""

    id: int
    name: str
    email: str
    phone: str
    address: str
    date_of_birth: Optional[date]
    is_active: bool
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    @classmethod
    def from_domain(cls, customer) -> "CustomerResponse":
        return cls(
            id=customer.id,
            name=customer.name,
            email=customer.email,
            phone=customer.phone,
            address=customer.address,
            date_of_birth=customer.date_of_birth,
            is_active=customer.is_active,
            created_at=customer.created_at,
            updated_at=customer.updated_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        for key in ("date_of_birth", "created_at", "updated_at"):
            data[key] = _isoformat(data[key])
        return data


@dataclass
class DentistResponse:
    """DTO for dentist API responses."""

    id: int
    name: str
    email: str
    phone: str
    license_number: str
    specialization: str
    is_active: bool
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    @classmethod
    def from_domain(cls, dentist) -> "DentistResponse":
        return cls(
            id=dentist.id,
            name=dentist.name,
            email=dentist.email,
            phone=dentist.phone,
            license_number=dentist.license_number,
            specialization=dentist.specialization,
            is_active=dentist.is_active,
            created_at=dentist.created_at,
            updated_at=dentist.updated_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        for key in ("created_at", "updated_at"):
            data[key] = _isoformat(data[key])
        return data


@dataclass
class PagedResponse:
    """DTO for one page of a listing plus its paging metadata."""

    data: List[Dict[str, Any]]
    page: int
    page_size: int
    total: int
    total_pages: int
    has_previous_page: bool
    has_next_page: bool

    @classmethod
    def from_result(cls, result, serialize) -> "PagedResponse":
        return cls(
            data=[serialize(item) for item in result.items],
            page=result.page,
            page_size=result.page_size,
            total=result.total_count,
            total_pages=result.total_pages,
            has_previous_page=result.has_previous_page,
            has_next_page=result.has_next_page,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
