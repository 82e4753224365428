"""
Abstract interfaces for repositories and services following Interface
Segregation Principle.

These interfaces define contracts without implementation details,
enabling dependency injection and easier testing.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from .entities import Appointment, AppointmentStatus, Customer, Dentist


class IAppointmentReader(ABC):
    """Interface for appointment read operations."""

    @abstractmethod
    def get_by_id(self, appointment_id: int) -> Optional[Appointment]:
        """Get appointment by ID."""
        pass

    @abstractmethod
    def get_by_customer_id(self, customer_id: int) -> List[Appointment]:
        """Get all appointments for a customer, ordered by date/time."""
        pass

    @abstractmethod
    def get_by_dentist_id(self, dentist_id: int) -> List[Appointment]:
        """Get all appointments for a dentist, ordered by date/time."""
        pass

    @abstractmethod
    def get_by_date_range(
        self, start_date: datetime, end_date: datetime
    ) -> List[Appointment]:
        """Get appointments with start_date <= date/time <= end_date."""
        pass

    @abstractmethod
    def has_customer_conflict(
        self,
        customer_id: int,
        appointment_datetime: datetime,
        exclude_appointment_id: Optional[int] = None,
    ) -> bool:
        """True if a non-cancelled appointment exists for the customer at exactly this time."""
        pass

    @abstractmethod
    def has_dentist_conflict(
        self,
        dentist_id: int,
        appointment_datetime: datetime,
        exclude_appointment_id: Optional[int] = None,
    ) -> bool:
        """True if a non-cancelled appointment exists for the dentist at exactly this time."""
        pass

    @abstractmethod
    def get_all(
        self,
        page: int = 1,
        page_size: int = 10,
        customer_id: Optional[int] = None,
        dentist_id: Optional[int] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        status: Optional[AppointmentStatus] = None,
    ) -> List[Appointment]:
        """Filtered, date-ordered, paginated listing."""
        pass


class IAppointmentWriter(ABC):
    """Interface for appointment write operations."""

    @abstractmethod
    def create(self, appointment: Appointment) -> Appointment:
        """Persist a new appointment, assigning id and timestamps."""
        pass

    @abstractmethod
    def update(self, appointment: Appointment) -> Appointment:
        """Update an existing appointment.

        Raises AppointmentNotFoundError if the id does not exist.
        """
        pass

    @abstractmethod
    def delete(self, appointment_id: int) -> bool:
        """Delete an appointment. Returns whether a record was removed."""
        pass


class IAppointmentRepository(IAppointmentReader, IAppointmentWriter):
    """Complete appointment repository interface."""

    pass


class ICustomerReader(ABC):
    """Interface for customer read operations."""

    @abstractmethod
    def get_by_id(self, customer_id: int) -> Optional[Customer]:
        """Get customer by ID."""
        pass

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[Customer]:
        """Get customer by email (case-insensitive)."""
        pass

    @abstractmethod
    def get_all(
        self, page: int = 1, page_size: int = 10, search: Optional[str] = None
    ) -> List[Customer]:
        """Name-ordered page of customers, optionally filtered by a search term
        matched against name, email and phone."""
        pass

    @abstractmethod
    def count(self, search: Optional[str] = None) -> int:
        """Number of customers matching the search term."""
        pass


class ICustomerWriter(ABC):
    """Interface for customer write operations."""

    @abstractmethod
    def create(self, customer: Customer) -> Customer:
        """Create a new customer."""
        pass

    @abstractmethod
    def update(self, customer: Customer) -> Optional[Customer]:
        """Update an existing customer. Returns None if the id does not exist."""
        pass

    @abstractmethod
    def delete(self, customer_id: int) -> bool:
        """Delete a customer. Returns whether a record was removed."""
        pass

    @abstractmethod
    def update_user_id(self, customer_id: int, user_id: int) -> bool:
        """Link the customer to an identity in the auth service."""
        pass


class ICustomerRepository(ICustomerReader, ICustomerWriter):
    """Complete customer repository interface."""

    pass


class IDentistReader(ABC):
    """Interface for dentist read operations."""

    @abstractmethod
    def get_by_id(self, dentist_id: int) -> Optional[Dentist]:
        """Get dentist by ID."""
        pass

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[Dentist]:
        """Get dentist by email (case-insensitive)."""
        pass

    @abstractmethod
    def get_all(
        self, page: int = 1, page_size: int = 10, search: Optional[str] = None
    ) -> List[Dentist]:
        """Name-ordered page of dentists, optionally filtered by a search term
        matched against name, email and specialization."""
        pass

    @abstractmethod
    def count(self, search: Optional[str] = None) -> int:
        """Number of dentists matching the search term."""
        pass

    @abstractmethod
    def get_active(self) -> List[Dentist]:
        """Get active dentists ordered by id."""
        pass


class IDentistWriter(ABC):
    """Interface for dentist write operations."""

    @abstractmethod
    def create(self, dentist: Dentist) -> Dentist:
        """Create a new dentist."""
        pass

    @abstractmethod
    def update(self, dentist: Dentist) -> Optional[Dentist]:
        """Update an existing dentist. Returns None if the id does not exist."""
        pass

    @abstractmethod
    def delete(self, dentist_id: int) -> bool:
        """Delete a dentist. Returns whether a record was removed."""
        pass

    @abstractmethod
    def update_user_id(self, dentist_id: int, user_id: int) -> bool:
        """Link the dentist to an identity in the auth service."""
        pass


class IDentistRepository(IDentistReader, IDentistWriter):
    """Complete dentist repository interface."""

    pass


class IEmailService(ABC):
    """
    Outbound notification contract.
    Return values are advisory; callers treat delivery as best-effort.
    """

    @abstractmethod
    def send_appointment_confirmation(
        self,
        email: str,
        customer_name: str,
        dentist_name: str,
        appointment_datetime: datetime,
        procedure_type: str,
    ) -> bool:
        """Notify the customer that an appointment was booked."""
        pass

    @abstractmethod
    def send_appointment_cancellation(
        self,
        email: str,
        customer_name: str,
        appointment_datetime: datetime,
        procedure_type: str,
    ) -> bool:
        """Notify the customer that an appointment was cancelled."""
        pass
