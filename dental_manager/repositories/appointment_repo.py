"""
Appointment repository implementation following SOLID principles.

Durable store backed by SQLAlchemy. Double-booking is additionally
guarded by partial unique indexes (see db.base.Appointment), so two
concurrent requests that both pass the service-level conflict check
cannot both commit.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.exc import IntegrityError

from dental_manager.core.exceptions import AppointmentNotFoundError, SlotConflictError
from dental_manager.db.base import Appointment as DbAppointment
from dental_manager.db.base import as_utc
from dental_manager.domain.entities import Appointment as DomainAppointment
from dental_manager.domain.entities import AppointmentStatus
from dental_manager.domain.interfaces import IAppointmentRepository

logger = logging.getLogger(__name__)

CANCELLED = AppointmentStatus.CANCELLED.value


class AppointmentRepository(IAppointmentRepository):
    """Repository for Appointment persistence operations."""

    def __init__(self, db_session) -> None:
        self.db = db_session

    def get_by_id(self, appointment_id: int) -> Optional[DomainAppointment]:
        db_appointment = self.db.query(DbAppointment).filter_by(id=appointment_id).first()
        return self._to_domain(db_appointment) if db_appointment else None

    def get_by_customer_id(self, customer_id: int) -> List[DomainAppointment]:
        rows = (
            self.db.query(DbAppointment)
            .filter_by(customer_id=customer_id)
            .order_by(DbAppointment.appointment_datetime)
            .all()
        )
        return [self._to_domain(row) for row in rows]

    def get_by_dentist_id(self, dentist_id: int) -> List[DomainAppointment]:
        rows = (
            self.db.query(DbAppointment)
            .filter_by(dentist_id=dentist_id)
            .order_by(DbAppointment.appointment_datetime)
            .all()
        )
        return [self._to_domain(row) for row in rows]

    def get_by_date_range(
        self, start_date: datetime, end_date: datetime
    ) -> List[DomainAppointment]:
        rows = (
            self.db.query(DbAppointment)
            .filter(
                DbAppointment.appointment_datetime >= start_date,
                DbAppointment.appointment_datetime <= end_date,
            )
            .order_by(DbAppointment.appointment_datetime)
            .all()
        )
        return [self._to_domain(row) for row in rows]

    def has_customer_conflict(
        self,
        customer_id: int,
        appointment_datetime: datetime,
        exclude_appointment_id: Optional[int] = None,
    ) -> bool:
        query = self.db.query(DbAppointment.id).filter(
            DbAppointment.customer_id == customer_id,
            DbAppointment.appointment_datetime == appointment_datetime,
            DbAppointment.status != CANCELLED,
        )
        if exclude_appointment_id is not None:
            query = query.filter(DbAppointment.id != exclude_appointment_id)
        return query.first() is not None

    def has_dentist_conflict(
        self,
        dentist_id: int,
        appointment_datetime: datetime,
        exclude_appointment_id: Optional[int] = None,
    ) -> bool:
        query = self.db.query(DbAppointment.id).filter(
            DbAppointment.dentist_id == dentist_id,
            DbAppointment.appointment_datetime == appointment_datetime,
            DbAppointment.status != CANCELLED,
        )
        if exclude_appointment_id is not None:
            query = query.filter(DbAppointment.id != exclude_appointment_id)
        return query.first() is not None

    def get_all(
        self,
        page: int = 1,
        page_size: int = 10,
        customer_id: Optional[int] = None,
        dentist_id: Optional[int] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        status: Optional[AppointmentStatus] = None,
    ) -> List[DomainAppointment]:
        query = self.db.query(DbAppointment)
        if customer_id is not None:
            query = query.filter(DbAppointment.customer_id == customer_id)
        if dentist_id is not None:
            query = query.filter(DbAppointment.dentist_id == dentist_id)
        if start_date is not None:
            query = query.filter(DbAppointment.appointment_datetime >= start_date)
        if end_date is not None:
            query = query.filter(DbAppointment.appointment_datetime <= end_date)
        if status is not None:
            query = query.filter(
                DbAppointment.status == AppointmentStatus.parse(status).value
            )

        page = max(page, 1)
        rows = (
            query.order_by(DbAppointment.appointment_datetime, DbAppointment.id)
            .offset((page - 1) * page_size)
            .limit(page_size)
            .all()
        )
        return [self._to_domain(row) for row in rows]

    def create(self, appointment: DomainAppointment) -> DomainAppointment:
        now = datetime.now(timezone.utc)
        db_appointment = DbAppointment(
            customer_id=appointment.customer_id,
            dentist_id=appointment.dentist_id,
            appointment_datetime=appointment.appointment_datetime,
            procedure_type=appointment.procedure_type,
            notes=appointment.notes or None,
            status=appointment.status.value,
            created_at=now,
            updated_at=now,
        )
        self.db.add(db_appointment)
        self._commit(appointment)
        self.db.refresh(db_appointment)
        return self._to_domain(db_appointment)

    def update(self, appointment: DomainAppointment) -> DomainAppointment:
        db_appointment = self.db.query(DbAppointment).filter_by(id=appointment.id).first()
        if not db_appointment:
            raise AppointmentNotFoundError(appointment.id)

        db_appointment.customer_id = appointment.customer_id
        db_appointment.dentist_id = appointment.dentist_id
        db_appointment.appointment_datetime = appointment.appointment_datetime
        db_appointment.procedure_type = appointment.procedure_type
        db_appointment.notes = appointment.notes or None
        db_appointment.status = appointment.status.value
        db_appointment.updated_at = datetime.now(timezone.utc)
        self._commit(appointment)
        self.db.refresh(db_appointment)
        return self._to_domain(db_appointment)

    def delete(self, appointment_id: int) -> bool:
        db_appointment = self.db.query(DbAppointment).filter_by(id=appointment_id).first()
        if not db_appointment:
            return False
        self.db.delete(db_appointment)
        self.db.commit()
        return True

    def _commit(self, appointment: DomainAppointment) -> None:
        """Commit, translating a double-booking index violation."""
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            detail = str(exc.orig).lower()
            if "unique" not in detail and "duplicate" not in detail:
                raise
            if "customer" in detail:
                kind = "customer"
            elif "dentist" in detail:
                kind = "dentist"
            else:
                raise
            logger.warning(
                "Slot uniqueness violation",
                extra={
                    "context": {
                        "kind": kind,
                        "appointment_id": appointment.id,
                        "customer_id": appointment.customer_id,
                        "dentist_id": appointment.dentist_id,
                        "appointment_datetime": str(appointment.appointment_datetime),
                    }
                },
            )
            raise SlotConflictError(kind) from exc

    def _to_domain(self, db_appointment: DbAppointment) -> DomainAppointment:
        """Convert database model to domain entity."""
        return DomainAppointment(
            id=db_appointment.id,
            customer_id=db_appointment.customer_id,
            dentist_id=db_appointment.dentist_id,
            appointment_datetime=db_appointment.appointment_datetime,
            procedure_type=db_appointment.procedure_type,
            notes=db_appointment.notes or "",
            status=AppointmentStatus.parse(db_appointment.status),
            created_at=as_utc(db_appointment.created_at),
            updated_at=as_utc(db_appointment.updated_at),
        )
