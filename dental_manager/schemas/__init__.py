"""
Schemas package - Data Transfer Objects and validation.

This package contains DTOs that define the API contracts
and handle validation following SOLID principles.
"""

from .dtos import (
    AppointmentCreateRequest,
    AppointmentResponse,
    AppointmentStatusUpdateRequest,
    AppointmentUpdateRequest,
    AvailableSlotResponse,
    CancellationRequest,
    CustomerCreateRequest,
    CustomerResponse,
    CustomerUpdateRequest,
    DentistCreateRequest,
    DentistResponse,
    DentistUpdateRequest,
    PagedResponse,
)

__all__ = [
    # Appointment DTOs
    "AppointmentCreateRequest",
    "AppointmentUpdateRequest",
    "AppointmentStatusUpdateRequest",
    "CancellationRequest",
    "AppointmentResponse",
    "AvailableSlotResponse",
    # Customer DTOs
    "CustomerCreateRequest",
    "CustomerUpdateRequest",
    "CustomerResponse",
    # Dentist DTOs
    "DentistCreateRequest",
    "DentistUpdateRequest",
    "DentistResponse",
    # Common DTOs
    "PagedResponse",
]
