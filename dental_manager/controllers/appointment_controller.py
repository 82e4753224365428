"""
Appointment controller following SOLID principles.

This controller demonstrates:
- Single Responsibility: Handles only HTTP concerns for appointments
- Dependency Inversion: Depends on the service, built per request
- Open/Closed: New endpoints can be added without modifying existing code

Status codes: not found 404, validation/conflict/state failures 400,
anything unexpected 500 with a generic message.
"""

import logging
from typing import Callable

from flask import Blueprint, current_app, request

from dental_manager.core.api_utils import (
    api_response,
    get_request_session,
    optional_query_int,
    parse_iso_datetime,
)
from dental_manager.repositories.appointment_repo import AppointmentRepository
from dental_manager.repositories.customer_repo import CustomerRepository
from dental_manager.repositories.dentist_repo import DentistRepository
from dental_manager.schemas.dtos import (
    AppointmentCreateRequest,
    AppointmentResponse,
    AppointmentStatusUpdateRequest,
    AppointmentUpdateRequest,
    AvailableSlotResponse,
    CancellationRequest,
)
from dental_manager.services.appointment_service import AppointmentService
from dental_manager.services.email_service import EmailService

logger = logging.getLogger(__name__)

appointment_bp = Blueprint("appointments", __name__, url_prefix="/api/appointments")

NOT_FOUND_MESSAGE = "Appointment not found."
GENERIC_ERROR_MESSAGE = "An error occurred while processing your request."


def _optional_datetime(name: str):
    value = request.args.get(name)
    return parse_iso_datetime(value, name) if value else None


def _serialize(appointment) -> dict:
    return AppointmentResponse.from_domain(appointment).to_dict()


def _result_status(result) -> int:
    if result.success:
        return 200
    return 404 if result.message == NOT_FOUND_MESSAGE else 400


class AppointmentController:
    """Controller for appointment-related HTTP endpoints.

    Every public method returns an ``api_response`` tuple.
    """

    def __init__(self, appointment_service: AppointmentService):
        self.appointment_service = appointment_service

    def _handle(self, action: str, operation: Callable[[], tuple]) -> tuple:
        try:
            return operation()
        except ValueError as e:
            return api_response(False, str(e), None, 400)
        except Exception as e:
            logger.error(
                "Unhandled error in appointment endpoint",
                extra={
                    "context": {
                        "action": action,
                        "path": request.path,
                        "error": str(e),
                    }
                },
                exc_info=True,
            )
            return api_response(False, GENERIC_ERROR_MESSAGE, None, 500)

    def list_appointments(self) -> tuple:
        def operation():
            status = request.args.get("status") or None
            appointments = self.appointment_service.get_all_appointments(
                page=optional_query_int("page") or 1,
                page_size=optional_query_int("page_size") or 10,
                customer_id=optional_query_int("customer_id"),
                dentist_id=optional_query_int("dentist_id"),
                start_date=_optional_datetime("start_date"),
                end_date=_optional_datetime("end_date"),
                status=status,
            )
            return api_response(
                True,
                "Appointments retrieved successfully.",
                [_serialize(a) for a in appointments],
            )

        return self._handle("list", operation)

    def get_appointment(self, appointment_id: int) -> tuple:
        def operation():
            appointment = self.appointment_service.get_appointment_by_id(appointment_id)
            if not appointment:
                return api_response(False, NOT_FOUND_MESSAGE, None, 404)
            return api_response(
                True, "Appointment retrieved successfully.", _serialize(appointment)
            )

        return self._handle("get", operation)

    def get_customer_appointments(self, customer_id: int) -> tuple:
        def operation():
            appointments = self.appointment_service.get_appointments_by_customer(
                customer_id
            )
            return api_response(
                True,
                "Appointments retrieved successfully.",
                [_serialize(a) for a in appointments],
            )

        return self._handle("by_customer", operation)

    def get_dentist_appointments(self, dentist_id: int) -> tuple:
        def operation():
            appointments = self.appointment_service.get_appointments_by_dentist(
                dentist_id
            )
            return api_response(
                True,
                "Appointments retrieved successfully.",
                [_serialize(a) for a in appointments],
            )

        return self._handle("by_dentist", operation)

    def get_dentist_available_slots(self, dentist_id: int) -> tuple:
        def operation():
            start_date = parse_iso_datetime(request.args.get("start_date"), "start_date")
            end_date = parse_iso_datetime(request.args.get("end_date"), "end_date")
            slots = self.appointment_service.get_available_slots(
                dentist_id, start_date, end_date
            )
            return api_response(
                True,
                "Available slots retrieved successfully.",
                [AvailableSlotResponse(dentist_id, slot).to_dict() for slot in slots],
            )

        return self._handle("dentist_slots", operation)

    def get_all_available_slots(self) -> tuple:
        def operation():
            start_date = parse_iso_datetime(request.args.get("start_date"), "start_date")
            end_date = parse_iso_datetime(request.args.get("end_date"), "end_date")
            slots_by_dentist = self.appointment_service.get_all_available_slots(
                start_date, end_date
            )
            names = self._dentist_names()
            data = [
                AvailableSlotResponse(
                    dentist_id, slot, dentist_name=names.get(dentist_id, "")
                ).to_dict()
                for dentist_id, slots in slots_by_dentist.items()
                for slot in slots
            ]
            return api_response(True, "Available slots retrieved successfully.", data)

        return self._handle("all_slots", operation)

    def create_appointment(self) -> tuple:
        def operation():
            create_request = AppointmentCreateRequest.from_dict(
                request.get_json(silent=True) or {}
            )
            create_request.validate()

            result = self.appointment_service.create_appointment(
                customer_id=create_request.customer_id,
                dentist_id=create_request.dentist_id,
                appointment_datetime=create_request.appointment_datetime,
                procedure_type=create_request.procedure_type,
                notes=create_request.notes,
            )
            if not result:
                return api_response(False, result.message, None, _result_status(result))
            return api_response(True, result.message, _serialize(result.appointment), 201)

        return self._handle("create", operation)

    def update_appointment(self, appointment_id: int) -> tuple:
        def operation():
            update_request = AppointmentUpdateRequest.from_dict(
                request.get_json(silent=True) or {}
            )
            update_request.validate()

            result = self.appointment_service.update_appointment(
                appointment_id,
                customer_id=update_request.customer_id,
                dentist_id=update_request.dentist_id,
                appointment_datetime=update_request.appointment_datetime,
                procedure_type=update_request.procedure_type,
                notes=update_request.notes,
            )
            if not result:
                return api_response(False, result.message, None, _result_status(result))
            return api_response(True, result.message, _serialize(result.appointment))

        return self._handle("update", operation)

    def update_appointment_status(self, appointment_id: int) -> tuple:
        def operation():
            status_request = AppointmentStatusUpdateRequest.from_dict(
                request.get_json(silent=True) or {}
            )
            status_request.validate()

            appointment = self.appointment_service.update_appointment_status(
                appointment_id, status_request.status, status_request.reason
            )
            if not appointment:
                return api_response(False, NOT_FOUND_MESSAGE, None, 404)
            return api_response(
                True, "Appointment status updated successfully.", _serialize(appointment)
            )

        return self._handle("update_status", operation)

    def request_cancellation(self, appointment_id: int) -> tuple:
        def operation():
            cancellation = CancellationRequest.from_dict(
                request.get_json(silent=True) or {}
            )
            cancellation.validate()

            result = self.appointment_service.request_cancellation(
                appointment_id, cancellation.customer_id
            )
            return api_response(result.success, result.message, None, _result_status(result))

        return self._handle("request_cancellation", operation)

    def cancel_appointment(self, appointment_id: int) -> tuple:
        def operation():
            result = self.appointment_service.cancel_appointment(appointment_id)
            return api_response(result.success, result.message, None, _result_status(result))

        return self._handle("cancel", operation)

    def complete_appointment(self, appointment_id: int) -> tuple:
        def operation():
            result = self.appointment_service.complete_appointment(appointment_id)
            return api_response(result.success, result.message, None, _result_status(result))

        return self._handle("complete", operation)

    def delete_appointment(self, appointment_id: int) -> tuple:
        def operation():
            if not self.appointment_service.delete_appointment(appointment_id):
                return api_response(False, NOT_FOUND_MESSAGE, None, 404)
            return "", 204

        return self._handle("delete", operation)

    def _dentist_names(self) -> dict:
        dentist_repo = self.appointment_service.dentist_repo
        if dentist_repo is None:
            return {}
        return {d.id: d.name for d in dentist_repo.get_active()}


def build_appointment_service(db_session) -> AppointmentService:
    """Wire the service against SQLAlchemy repositories on one session."""
    return AppointmentService(
        appointment_repo=AppointmentRepository(db_session),
        customer_repo=CustomerRepository(db_session),
        email_service=EmailService(),
        dentist_repo=DentistRepository(db_session),
    )


def get_appointment_controller() -> AppointmentController:
    """Controller for the current request.

    An app may pin a service in ``app.extensions["appointment_service"]``;
    otherwise one is built on a request-scoped session closed at teardown.
    """
    service = current_app.extensions.get("appointment_service")
    if service is None:
        service = build_appointment_service(get_request_session())
    return AppointmentController(service)


@appointment_bp.route("", methods=["GET"])
def list_appointments():
    return get_appointment_controller().list_appointments()


@appointment_bp.route("/<int:appointment_id>", methods=["GET"])
def get_appointment(appointment_id: int):
    return get_appointment_controller().get_appointment(appointment_id)


@appointment_bp.route("/customer/<int:customer_id>", methods=["GET"])
def get_customer_appointments(customer_id: int):
    return get_appointment_controller().get_customer_appointments(customer_id)


@appointment_bp.route("/dentist/<int:dentist_id>", methods=["GET"])
def get_dentist_appointments(dentist_id: int):
    return get_appointment_controller().get_dentist_appointments(dentist_id)


@appointment_bp.route("/dentist/<int:dentist_id>/available-slots", methods=["GET"])
def get_dentist_available_slots(dentist_id: int):
    return get_appointment_controller().get_dentist_available_slots(dentist_id)


@appointment_bp.route("/available-slots", methods=["GET"])
def get_all_available_slots():
    return get_appointment_controller().get_all_available_slots()


@appointment_bp.route("", methods=["POST"])
def create_appointment():
    return get_appointment_controller().create_appointment()


@appointment_bp.route("/<int:appointment_id>", methods=["PUT"])
def update_appointment(appointment_id: int):
    return get_appointment_controller().update_appointment(appointment_id)


@appointment_bp.route("/<int:appointment_id>/status", methods=["PUT"])
def update_appointment_status(appointment_id: int):
    return get_appointment_controller().update_appointment_status(appointment_id)


@appointment_bp.route("/<int:appointment_id>/request-cancellation", methods=["POST"])
def request_cancellation(appointment_id: int):
    return get_appointment_controller().request_cancellation(appointment_id)


@appointment_bp.route("/<int:appointment_id>/cancel", methods=["POST"])
def cancel_appointment(appointment_id: int):
    return get_appointment_controller().cancel_appointment(appointment_id)


@appointment_bp.route("/<int:appointment_id>/complete", methods=["POST"])
def complete_appointment(appointment_id: int):
    return get_appointment_controller().complete_appointment(appointment_id)


@appointment_bp.route("/<int:appointment_id>", methods=["DELETE"])
def delete_appointment(appointment_id: int):
    return get_appointment_controller().delete_appointment(appointment_id)
