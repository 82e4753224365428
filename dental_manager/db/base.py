from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .session import Base

# Partial-index predicate shared by the double-booking constraints
ACTIVE_APPOINTMENT_PREDICATE = text("status != 'Cancelled'")


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalise an audit timestamp read back from the database to aware UTC.

    SQLite drops the offset of DateTime(timezone=True) columns; stored
    values are always UTC, so a naive value is tagged rather than shifted.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Customer(Base):
    """Customer (patient) of the clinic"""

    __tablename__ = "customers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(200), unique=True, nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(String(300), nullable=True)
    date_of_birth: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    # Identity in the external auth service, linked asynchronously
    user_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    created_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    appointments = relationship("Appointment", back_populates="customer")

    def __repr__(self):
        return f"<Customer(id={self.id}, email='{self.email}')>"


class Dentist(Base):
    """Dentist working at the clinic"""

    __tablename__ = "dentists"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(200), unique=True, nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    license_number: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    specialization: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    user_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    created_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    appointments = relationship("Appointment", back_populates="dentist")

    def __repr__(self):
        return f"<Dentist(id={self.id}, name='{self.name}')>"


class Appointment(Base):
    """Appointment occupying one 30-minute slot"""

    __tablename__ = "appointments"
    __table_args__ = (
        # At most one non-cancelled appointment per customer/dentist and time
        Index(
            "uq_appointments_customer_slot",
            "customer_id",
            "appointment_datetime",
            unique=True,
            sqlite_where=ACTIVE_APPOINTMENT_PREDICATE,
            postgresql_where=ACTIVE_APPOINTMENT_PREDICATE,
        ),
        Index(
            "uq_appointments_dentist_slot",
            "dentist_id",
            "appointment_datetime",
            unique=True,
            sqlite_where=ACTIVE_APPOINTMENT_PREDICATE,
            postgresql_where=ACTIVE_APPOINTMENT_PREDICATE,
        ),
        Index("ix_appointments_datetime", "appointment_datetime"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    customer_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("customers.id"), nullable=False, index=True
    )
    dentist_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("dentists.id"), nullable=False, index=True
    )
    appointment_datetime: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    procedure_type: Mapped[str] = mapped_column(String(200), nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(30), nullable=False, default="Scheduled"
    )  # Scheduled, Completed, Cancelled, CancellationRequested
    created_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    customer = relationship("Customer", back_populates="appointments")
    dentist = relationship("Dentist", back_populates="appointments")

    def __repr__(self):
        return (
            f"<Appointment(id={self.id}, customer_id={self.customer_id}, "
            f"dentist_id={self.dentist_id}, at={self.appointment_datetime}, "
            f"status='{self.status}')>"
        )
