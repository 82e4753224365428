"""
Domain package - Pure business logic layer.

This package contains:
- entities.py: Domain entities and the appointment status model
- interfaces.py: Repository and service contracts
- scheduling.py: Business calendar, conflict checks and slot enumeration

Following SOLID principles:
- Single Responsibility: Each module has one purpose
- Open/Closed: Extensible without modification
- Dependency Inversion: Interfaces define contracts
"""

from .entities import (
    ALLOWED_TRANSITIONS,
    Appointment,
    AppointmentStatus,
    Customer,
    Dentist,
)
from .interfaces import (
    IAppointmentReader,
    IAppointmentRepository,
    IAppointmentWriter,
    ICustomerReader,
    ICustomerRepository,
    ICustomerWriter,
    IDentistReader,
    IDentistRepository,
    IDentistWriter,
    IEmailService,
)

__all__ = [
    # Domain entities
    "Appointment",
    "AppointmentStatus",
    "ALLOWED_TRANSITIONS",
    "Customer",
    "Dentist",
    # Repository interfaces
    "IAppointmentRepository",
    "ICustomerRepository",
    "IDentistRepository",
    # Segregated interfaces
    "IAppointmentReader",
    "IAppointmentWriter",
    "ICustomerReader",
    "ICustomerWriter",
    "IDentistReader",
    "IDentistWriter",
    # Service interfaces
    "IEmailService",
]
