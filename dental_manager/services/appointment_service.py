"""
Appointment service following SOLID principles.

Business-rule failures come back as result objects carrying a
user-facing message. The generic status update returns the appointment
itself, so a slot conflict there raises AppointmentConflictError (a
ValueError) instead. Infrastructure errors propagate.
"""

import logging
from dataclasses import replace
from datetime import date, datetime, timezone
from typing import Dict, List, Optional, Union

from dental_manager.core.exceptions import AppointmentConflictError, SlotConflictError
from dental_manager.domain.entities import Appointment, AppointmentStatus
from dental_manager.domain.interfaces import (
    IAppointmentRepository,
    ICustomerReader,
    IDentistReader,
    IEmailService,
)
from dental_manager.domain.scheduling import ConflictEngine
from dental_manager.services.results import AppointmentResult, OperationResult

logger = logging.getLogger(__name__)

DEFAULT_DENTIST_NAME = "Dentist"

CONFLICT_MESSAGES = {
    "customer": "Customer already has an appointment at this time.",
    "dentist": "Dentist already has an appointment at this time.",
}


class AppointmentService:
    """Application service for appointment use-cases.

    Depends on store and lookup interfaces only. Every mutation is a
    read-modify-write against the appointment store; the service itself
    holds no state.
    """

    def __init__(
        self,
        appointment_repo: IAppointmentRepository,
        customer_repo: ICustomerReader,
        email_service: IEmailService,
        dentist_repo: Optional[IDentistReader] = None,
        conflict_engine: Optional[ConflictEngine] = None,
    ):
        self.appointment_repo = appointment_repo
        self.customer_repo = customer_repo
        self.email_service = email_service
        self.dentist_repo = dentist_repo
        self.conflict_engine = conflict_engine or ConflictEngine(appointment_repo)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_appointment(
        self,
        customer_id: int,
        dentist_id: int,
        appointment_datetime: datetime,
        procedure_type: str,
        notes: str = "",
    ) -> AppointmentResult:
        """Book a new appointment.

        Business Rules:
        - Customer (and dentist, when a dentist lookup is configured) must
          exist and be active
        - Date/time must be in the future, on a weekday, within opening hours
        - Neither the customer nor the dentist may already be booked then
        """
        if customer_id <= 0 or dentist_id <= 0:
            return AppointmentResult(False, "Invalid customer or dentist ID.")
        if not procedure_type or not procedure_type.strip():
            return AppointmentResult(False, "Procedure type is required.")

        validation = self.conflict_engine.validate_datetime(appointment_datetime)
        if not validation.is_valid:
            return AppointmentResult(False, validation.message)

        customer = self.customer_repo.get_by_id(customer_id)
        if not customer:
            return AppointmentResult(False, "Customer not found.")
        if not customer.is_active:
            return AppointmentResult(False, "Customer account is inactive.")

        dentist = None
        if self.dentist_repo is not None:
            dentist = self.dentist_repo.get_by_id(dentist_id)
            if not dentist:
                return AppointmentResult(False, "Dentist not found.")
            if not dentist.is_active:
                return AppointmentResult(False, "Dentist is not active.")

        if self.conflict_engine.has_customer_conflict(customer_id, appointment_datetime):
            return AppointmentResult(False, CONFLICT_MESSAGES["customer"])
        if self.conflict_engine.has_dentist_conflict(dentist_id, appointment_datetime):
            return AppointmentResult(False, CONFLICT_MESSAGES["dentist"])

        appointment = Appointment(
            customer_id=customer_id,
            dentist_id=dentist_id,
            appointment_datetime=appointment_datetime,
            procedure_type=procedure_type.strip(),
            notes=notes or "",
            status=AppointmentStatus.SCHEDULED,
        )

        try:
            created = self.appointment_repo.create(appointment)
        except SlotConflictError as e:
            return AppointmentResult(False, CONFLICT_MESSAGES.get(e.kind, str(e)))

        logger.info(
            "Appointment created",
            extra={
                "context": {
                    "appointment_id": created.id,
                    "customer_id": customer_id,
                    "dentist_id": dentist_id,
                    "appointment_datetime": appointment_datetime.isoformat(),
                }
            },
        )

        self._notify(
            "confirmation",
            created,
            lambda: self.email_service.send_appointment_confirmation(
                customer.email,
                customer.name,
                dentist.name if dentist else DEFAULT_DENTIST_NAME,
                created.appointment_datetime,
                created.procedure_type,
            ),
        )

        return AppointmentResult(True, "Appointment created successfully.", created)

    def update_appointment(
        self,
        appointment_id: int,
        customer_id: int,
        dentist_id: int,
        appointment_datetime: datetime,
        procedure_type: str,
        notes: str = "",
    ) -> AppointmentResult:
        """Edit an appointment. Time rules are re-checked only when the time changes."""
        if appointment_id <= 0:
            return AppointmentResult(False, "Invalid appointment ID.")
        if customer_id <= 0 or dentist_id <= 0:
            return AppointmentResult(False, "Invalid customer or dentist ID.")
        if not procedure_type or not procedure_type.strip():
            return AppointmentResult(False, "Procedure type is required.")

        existing = self.appointment_repo.get_by_id(appointment_id)
        if not existing:
            return AppointmentResult(False, "Appointment not found.")

        if existing.appointment_datetime != appointment_datetime:
            validation = self.conflict_engine.validate_datetime(appointment_datetime)
            if not validation.is_valid:
                return AppointmentResult(False, validation.message)
            if self.conflict_engine.has_customer_conflict(
                customer_id, appointment_datetime, appointment_id
            ):
                return AppointmentResult(False, CONFLICT_MESSAGES["customer"])
            if self.conflict_engine.has_dentist_conflict(
                dentist_id, appointment_datetime, appointment_id
            ):
                return AppointmentResult(False, CONFLICT_MESSAGES["dentist"])

        changed = replace(
            existing,
            customer_id=customer_id,
            dentist_id=dentist_id,
            appointment_datetime=appointment_datetime,
            procedure_type=procedure_type.strip(),
            notes=notes or "",
            updated_at=datetime.now(timezone.utc),
        )

        try:
            updated = self.appointment_repo.update(changed)
        except SlotConflictError as e:
            return AppointmentResult(False, CONFLICT_MESSAGES.get(e.kind, str(e)))

        logger.info(
            "Appointment updated",
            extra={"context": {"appointment_id": appointment_id}},
        )
        return AppointmentResult(True, "Appointment updated successfully.", updated)

    def update_appointment_status(
        self,
        appointment_id: int,
        new_status: Union[AppointmentStatus, str],
        reason: str = "",
    ) -> Optional[Appointment]:
        """Overwrite the status of an appointment.

        Returns None when the appointment does not exist. Transitions outside
        ALLOWED_TRANSITIONS are applied but logged as a warning.

        Raises:
            AppointmentConflictError: reinstating the appointment would
                double-book its customer or dentist
        """
        status = AppointmentStatus.parse(new_status)

        appointment = self.appointment_repo.get_by_id(appointment_id)
        if not appointment:
            return None

        if appointment.status != status and not appointment.status.can_transition_to(
            status
        ):
            logger.warning(
                "Status transition outside the allowed table",
                extra={
                    "context": {
                        "appointment_id": appointment_id,
                        "from": appointment.status.value,
                        "to": status.value,
                        "reason": reason,
                    }
                },
            )

        appointment.status = status
        appointment.updated_at = datetime.now(timezone.utc)
        try:
            updated = self.appointment_repo.update(appointment)
        except SlotConflictError as e:
            raise AppointmentConflictError(
                e.kind, CONFLICT_MESSAGES.get(e.kind, str(e))
            ) from e

        logger.info(
            "Appointment status updated",
            extra={
                "context": {
                    "appointment_id": appointment_id,
                    "status": status.value,
                    "reason": reason,
                }
            },
        )
        return updated

    def request_cancellation(
        self, appointment_id: int, customer_id: int
    ) -> OperationResult:
        """Customer-initiated cancellation; needs operator approval."""
        appointment = self.appointment_repo.get_by_id(appointment_id)
        if not appointment:
            return OperationResult(False, "Appointment not found.")
        if appointment.customer_id != customer_id:
            return OperationResult(False, "You can only cancel your own appointments.")
        if appointment.status != AppointmentStatus.SCHEDULED:
            return OperationResult(False, "Only scheduled appointments can be cancelled.")

        try:
            self._set_status(appointment, AppointmentStatus.CANCELLATION_REQUESTED)
        except SlotConflictError as e:
            return self._conflict_result(e)
        return OperationResult(True, "Cancellation request submitted successfully.")

    def cancel_appointment(self, appointment_id: int) -> OperationResult:
        appointment = self.appointment_repo.get_by_id(appointment_id)
        if not appointment:
            return OperationResult(False, "Appointment not found.")
        if appointment.status == AppointmentStatus.COMPLETED:
            return OperationResult(False, "Cannot cancel completed appointments.")

        try:
            self._set_status(appointment, AppointmentStatus.CANCELLED)
        except SlotConflictError as e:
            return self._conflict_result(e)

        customer = self.customer_repo.get_by_id(appointment.customer_id)
        if customer:
            self._notify(
                "cancellation",
                appointment,
                lambda: self.email_service.send_appointment_cancellation(
                    customer.email,
                    customer.name,
                    appointment.appointment_datetime,
                    appointment.procedure_type,
                ),
            )

        return OperationResult(True, "Appointment cancelled successfully.")

    def complete_appointment(self, appointment_id: int) -> OperationResult:
        appointment = self.appointment_repo.get_by_id(appointment_id)
        if not appointment:
            return OperationResult(False, "Appointment not found.")
        if appointment.status != AppointmentStatus.SCHEDULED:
            return OperationResult(False, "Only scheduled appointments can be completed.")

        try:
            self._set_status(appointment, AppointmentStatus.COMPLETED)
        except SlotConflictError as e:
            return self._conflict_result(e)
        return OperationResult(True, "Appointment marked as completed.")

    def delete_appointment(self, appointment_id: int) -> bool:
        deleted = self.appointment_repo.delete(appointment_id)
        if deleted:
            logger.info(
                "Appointment deleted",
                extra={"context": {"appointment_id": appointment_id}},
            )
        return deleted

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_appointment_by_id(self, appointment_id: int) -> Optional[Appointment]:
        return self.appointment_repo.get_by_id(appointment_id)

    def get_appointments_by_customer(self, customer_id: int) -> List[Appointment]:
        return self.appointment_repo.get_by_customer_id(customer_id)

    def get_appointments_by_dentist(self, dentist_id: int) -> List[Appointment]:
        return self.appointment_repo.get_by_dentist_id(dentist_id)

    def get_all_appointments(
        self,
        page: int = 1,
        page_size: int = 10,
        customer_id: Optional[int] = None,
        dentist_id: Optional[int] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        status: Optional[Union[AppointmentStatus, str]] = None,
    ) -> List[Appointment]:
        return self.appointment_repo.get_all(
            page=page,
            page_size=page_size,
            customer_id=customer_id,
            dentist_id=dentist_id,
            start_date=start_date,
            end_date=end_date,
            status=AppointmentStatus.parse(status) if status is not None else None,
        )

    def get_available_slots(
        self,
        dentist_id: int,
        start_date: Union[date, datetime],
        end_date: Union[date, datetime],
    ) -> List[datetime]:
        return self.conflict_engine.enumerate_available_slots(
            dentist_id, start_date, end_date
        )

    def get_all_available_slots(
        self, start_date: Union[date, datetime], end_date: Union[date, datetime]
    ) -> Dict[int, List[datetime]]:
        """Free slots per active dentist. Empty without a dentist lookup."""
        if self.dentist_repo is None:
            return {}
        return {
            dentist.id: self.conflict_engine.enumerate_available_slots(
                dentist.id, start_date, end_date
            )
            for dentist in self.dentist_repo.get_active()
        }

    def is_slot_available(self, dentist_id: int, appointment_datetime: datetime) -> bool:
        return self.conflict_engine.is_slot_available(dentist_id, appointment_datetime)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _set_status(
        self, appointment: Appointment, status: AppointmentStatus
    ) -> Appointment:
        previous = appointment.status
        appointment.status = status
        appointment.updated_at = datetime.now(timezone.utc)
        updated = self.appointment_repo.update(appointment)
        logger.info(
            "Appointment status changed",
            extra={
                "context": {
                    "appointment_id": appointment.id,
                    "from": previous.value,
                    "to": status.value,
                }
            },
        )
        return updated

    def _conflict_result(self, error: SlotConflictError) -> OperationResult:
        return OperationResult(False, CONFLICT_MESSAGES.get(error.kind, str(error)))

    def _notify(self, kind: str, appointment: Appointment, send) -> None:
        """Run a notification call; failures never undo the booking change."""
        try:
            if not send():
                logger.warning(
                    "Notification was not delivered",
                    extra={
                        "context": {"kind": kind, "appointment_id": appointment.id}
                    },
                )
        except Exception as e:
            logger.error(
                "Notification failed",
                extra={
                    "context": {
                        "kind": kind,
                        "appointment_id": appointment.id,
                        "error": str(e),
                    }
                },
                exc_info=True,
            )
