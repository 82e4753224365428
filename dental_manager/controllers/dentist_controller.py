"""
Dentist controller - CRUD endpoints for the clinic's dentists.

Same status conventions as the customer endpoints. Deactivating a dentist
through PUT removes them from availability listings without touching
their booked appointments.
"""

import logging
from typing import Callable

from flask import Blueprint, current_app, request

from dental_manager.core.api_utils import (
    api_response,
    failure_status,
    get_request_session,
    optional_query_int,
)
from dental_manager.repositories.appointment_repo import AppointmentRepository
from dental_manager.repositories.dentist_repo import DentistRepository
from dental_manager.schemas.dtos import (
    DentistCreateRequest,
    DentistResponse,
    DentistUpdateRequest,
    PagedResponse,
)
from dental_manager.services.dentist_service import NOT_FOUND_MESSAGE, DentistService

logger = logging.getLogger(__name__)

dentist_bp = Blueprint("dentists", __name__, url_prefix="/api/dentists")

GENERIC_ERROR_MESSAGE = "An error occurred while processing your request."


def _serialize(dentist) -> dict:
    return DentistResponse.from_domain(dentist).to_dict()


class DentistController:
    def __init__(self, dentist_service: DentistService):
        self.dentist_service = dentist_service

    def _handle(self, action: str, operation: Callable[[], tuple]) -> tuple:
        try:
            return operation()
        except ValueError as e:
            return api_response(False, str(e), None, 400)
        except Exception as e:
            logger.error(
                "Unhandled error in dentist endpoint",
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

    def list_dentists(self) -> tuple:
        def operation():
            result = self.dentist_service.get_all_dentists(
                page=optional_query_int("page") or 1,
                page_size=optional_query_int("page_size") or 10,
                search=request.args.get("search") or None,
            )
            return api_response(
                True,
                "Dentists retrieved successfully.",
                PagedResponse.from_result(result, _serialize).to_dict(),
            )

        return self._handle("list", operation)

    def get_dentist(self, dentist_id: int) -> tuple:
        def operation():
            dentist = self.dentist_service.get_dentist_by_id(dentist_id)
            if not dentist:
                return api_response(False, NOT_FOUND_MESSAGE, None, 404)
            return api_response(True, "Dentist retrieved successfully.", _serialize(dentist))

        return self._handle("get", operation)

    def get_dentist_by_email(self, email: str) -> tuple:
        def operation():
            dentist = self.dentist_service.get_dentist_by_email(email)
            if not dentist:
                return api_response(False, NOT_FOUND_MESSAGE, None, 404)
            return api_response(True, "Dentist retrieved successfully.", _serialize(dentist))

        return self._handle("get_by_email", operation)

    def create_dentist(self) -> tuple:
        def operation():
            create_request = DentistCreateRequest.from_dict(
                request.get_json(silent=True) or {}
            )
            create_request.validate()

            result = self.dentist_service.create_dentist(
                name=create_request.name,
                email=create_request.email,
                phone=create_request.phone,
                license_number=create_request.license_number,
                specialization=create_request.specialization,
            )
            if not result:
                return api_response(False, result.message, None, failure_status(result.message))
            return api_response(True, result.message, _serialize(result.dentist), 201)

        return self._handle("create", operation)

    def update_dentist(self, dentist_id: int) -> tuple:
        def operation():
            update_request = DentistUpdateRequest.from_dict(
                request.get_json(silent=True) or {}
            )
            update_request.validate()

            result = self.dentist_service.update_dentist(
                dentist_id,
                name=update_request.name,
                email=update_request.email,
                phone=update_request.phone,
                license_number=update_request.license_number,
                specialization=update_request.specialization,
                is_active=update_request.is_active,
            )
            if not result:
                return api_response(False, result.message, None, failure_status(result.message))
            return api_response(True, result.message, _serialize(result.dentist))

        return self._handle("update", operation)

    def delete_dentist(self, dentist_id: int) -> tuple:
        def operation():
            result = self.dentist_service.delete_dentist(dentist_id)
            if not result:
                return api_response(False, result.message, None, failure_status(result.message))
            return "", 204

        return self._handle("delete", operation)


def build_dentist_service(db_session) -> DentistService:
    return DentistService(
        dentist_repo=DentistRepository(db_session),
        appointment_repo=AppointmentRepository(db_session),
    )


def get_dentist_controller() -> DentistController:
    service = current_app.extensions.get("dentist_service")
    if service is None:
        service = build_dentist_service(get_request_session())
    return DentistController(service)


@dentist_bp.route("", methods=["GET"])
def list_dentists():
    return get_dentist_controller().list_dentists()


@dentist_bp.route("/<int:dentist_id>", methods=["GET"])
def get_dentist(dentist_id: int):
    return get_dentist_controller().get_dentist(dentist_id)


@dentist_bp.route("/by-email/<path:email>", methods=["GET"])
def get_dentist_by_email(email: str):
    return get_dentist_controller().get_dentist_by_email(email)


@dentist_bp.route("", methods=["POST"])
def create_dentist():
    return get_dentist_controller().create_dentist()


@dentist_bp.route("/<int:dentist_id>", methods=["PUT"])
def update_dentist(dentist_id: int):
    return get_dentist_controller().update_dentist(dentist_id)


@dentist_bp.route("/<int:dentist_id>", methods=["DELETE"])
def delete_dentist(dentist_id: int):
    return get_dentist_controller().delete_dentist(dentist_id)
