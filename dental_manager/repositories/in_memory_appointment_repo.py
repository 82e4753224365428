"""
In-process appointment store for tests and local development.

State belongs to the instance: ids come from a per-instance counter and
every access happens under the instance lock. Entities are copied on the
way in and out so callers never hold references into the store.
"""

import itertools
import threading
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from dental_manager.core.exceptions import AppointmentNotFoundError, SlotConflictError
from dental_manager.domain.entities import Appointment, AppointmentStatus
from dental_manager.domain.interfaces import IAppointmentRepository


class InMemoryAppointmentRepository(IAppointmentRepository):
    """Ephemeral IAppointmentRepository with the same conflict semantics as the SQL store."""

    def __init__(self) -> None:
        self._appointments: Dict[int, Appointment] = {}
        self._ids = itertools.count(1)
        self._lock = threading.RLock()

    def get_by_id(self, appointment_id: int) -> Optional[Appointment]:
        with self._lock:
            appointment = self._appointments.get(appointment_id)
            return replace(appointment) if appointment else None

    def get_by_customer_id(self, customer_id: int) -> List[Appointment]:
        return self._select(lambda a: a.customer_id == customer_id)

    def get_by_dentist_id(self, dentist_id: int) -> List[Appointment]:
        return self._select(lambda a: a.dentist_id == dentist_id)

    def get_by_date_range(
        self, start_date: datetime, end_date: datetime
    ) -> List[Appointment]:
        return self._select(
            lambda a: start_date <= a.appointment_datetime <= end_date
        )

    def has_customer_conflict(
        self,
        customer_id: int,
        appointment_datetime: datetime,
        exclude_appointment_id: Optional[int] = None,
    ) -> bool:
        with self._lock:
            return self._find_conflict(
                "customer_id", customer_id, appointment_datetime, exclude_appointment_id
            )

    def has_dentist_conflict(
        self,
        dentist_id: int,
        appointment_datetime: datetime,
        exclude_appointment_id: Optional[int] = None,
    ) -> bool:
        with self._lock:
            return self._find_conflict(
                "dentist_id", dentist_id, appointment_datetime, exclude_appointment_id
            )

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
        wanted_status = AppointmentStatus.parse(status) if status is not None else None

        def matches(a: Appointment) -> bool:
            return (
                (customer_id is None or a.customer_id == customer_id)
                and (dentist_id is None or a.dentist_id == dentist_id)
                and (start_date is None or a.appointment_datetime >= start_date)
                and (end_date is None or a.appointment_datetime <= end_date)
                and (wanted_status is None or a.status == wanted_status)
            )

        offset = (max(page, 1) - 1) * page_size
        return self._select(matches)[offset : offset + page_size]

    def create(self, appointment: Appointment) -> Appointment:
        with self._lock:
            self._check_slot_free(appointment, exclude_id=None)
            now = datetime.now(timezone.utc)
            stored = replace(
                appointment, id=next(self._ids), created_at=now, updated_at=now
            )
            self._appointments[stored.id] = stored
            return replace(stored)

    def update(self, appointment: Appointment) -> Appointment:
        with self._lock:
            existing = self._appointments.get(appointment.id)
            if existing is None:
                raise AppointmentNotFoundError(appointment.id)
            self._check_slot_free(appointment, exclude_id=appointment.id)
            stored = replace(
                appointment,
                created_at=existing.created_at,
                updated_at=datetime.now(timezone.utc),
            )
            self._appointments[stored.id] = stored
            return replace(stored)

    def delete(self, appointment_id: int) -> bool:
        with self._lock:
            return self._appointments.pop(appointment_id, None) is not None

    def _select(self, predicate: Callable[[Appointment], bool]) -> List[Appointment]:
        with self._lock:
            found = [replace(a) for a in self._appointments.values() if predicate(a)]
        return sorted(found, key=lambda a: (a.appointment_datetime, a.id))

    def _find_conflict(
        self,
        field: str,
        value: int,
        appointment_datetime: datetime,
        exclude_id: Optional[int],
    ) -> bool:
        return any(
            getattr(a, field) == value
            and a.appointment_datetime == appointment_datetime
            and a.status != AppointmentStatus.CANCELLED
            and (exclude_id is None or a.id != exclude_id)
            for a in self._appointments.values()
        )

    def _check_slot_free(self, appointment: Appointment, exclude_id: Optional[int]) -> None:
        # Mirrors the partial unique indexes of the SQL store
        if appointment.status == AppointmentStatus.CANCELLED:
            return
        if self._find_conflict(
            "customer_id", appointment.customer_id, appointment.appointment_datetime, exclude_id
        ):
            raise SlotConflictError("customer")
        if self._find_conflict(
            "dentist_id", appointment.dentist_id, appointment.appointment_datetime, exclude_id
        ):
            raise SlotConflictError("dentist")
