"""
Customer controller - CRUD endpoints for clinic customers.

Status codes: created 201, deleted 204, missing 404, duplicate email 409,
validation failures 400, anything unexpected 500 with a generic message.
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
from dental_manager.repositories.customer_repo import CustomerRepository
from dental_manager.schemas.dtos import (
    CustomerCreateRequest,
    CustomerResponse,
    CustomerUpdateRequest,
    PagedResponse,
)
from dental_manager.services.customer_service import NOT_FOUND_MESSAGE, CustomerService

logger = logging.getLogger(__name__)

customer_bp = Blueprint("customers", __name__, url_prefix="/api/customers")

GENERIC_ERROR_MESSAGE = "An error occurred while processing your request."


def _serialize(customer) -> dict:
    return CustomerResponse.from_domain(customer).to_dict()


class CustomerController:
    def __init__(self, customer_service: CustomerService):
        self.customer_service = customer_service

    def _handle(self, action: str, operation: Callable[[], tuple]) -> tuple:
        try:
            return operation()
        except ValueError as e:
            return api_response(False, str(e), None, 400)
        except Exception as e:
            logger.error(
                "Unhandled error in customer endpoint",
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

    def list_customers(self) -> tuple:
        def operation():
            result = self.customer_service.get_all_customers(
                page=optional_query_int("page") or 1,
                page_size=optional_query_int("page_size") or 10,
                search=request.args.get("search") or None,
            )
            return api_response(
                True,
                "Customers retrieved successfully.",
                PagedResponse.from_result(result, _serialize).to_dict(),
            )

        return self._handle("list", operation)

    def get_customer(self, customer_id: int) -> tuple:
        def operation():
            customer = self.customer_service.get_customer_by_id(customer_id)
            if not customer:
                return api_response(False, NOT_FOUND_MESSAGE, None, 404)
            return api_response(
                True, "Customer retrieved successfully.", _serialize(customer)
            )

        return self._handle("get", operation)

    def create_customer(self) -> tuple:
        def operation():
            create_request = CustomerCreateRequest.from_dict(
                request.get_json(silent=True) or {}
            )
            create_request.validate()

            result = self.customer_service.create_customer(
                name=create_request.name,
                email=create_request.email,
                phone=create_request.phone,
                address=create_request.address,
                date_of_birth=create_request.date_of_birth,
            )
            if not result:
                return api_response(False, result.message, None, failure_status(result.message))
            return api_response(True, result.message, _serialize(result.customer), 201)

        return self._handle("create", operation)

    def update_customer(self, customer_id: int) -> tuple:
        def operation():
            update_request = CustomerUpdateRequest.from_dict(
                request.get_json(silent=True) or {}
            )
            update_request.validate()

            result = self.customer_service.update_customer(
                customer_id,
                name=update_request.name,
                email=update_request.email,
                phone=update_request.phone,
                address=update_request.address,
                date_of_birth=update_request.date_of_birth,
                is_active=update_request.is_active,
            )
            if not result:
                return api_response(False, result.message, None, failure_status(result.message))
            return api_response(True, result.message, _serialize(result.customer))

        return self._handle("update", operation)

    def delete_customer(self, customer_id: int) -> tuple:
        def operation():
            result = self.customer_service.delete_customer(customer_id)
            if not result:
                return api_response(False, result.message, None, failure_status(result.message))
            return "", 204

        return self._handle("delete", operation)


def build_customer_service(db_session) -> CustomerService:
    return CustomerService(
        customer_repo=CustomerRepository(db_session),
        appointment_repo=AppointmentRepository(db_session),
    )


def get_customer_controller() -> CustomerController:
    service = current_app.extensions.get("customer_service")
    if service is None:
        service = build_customer_service(get_request_session())
    return CustomerController(service)


@customer_bp.route("", methods=["GET"])
def list_customers():
    return get_customer_controller().list_customers()


@customer_bp.route("/<int:customer_id>", methods=["GET"])
def get_customer(customer_id: int):
    return get_customer_controller().get_customer(customer_id)


@customer_bp.route("", methods=["POST"])
def create_customer():
    return get_customer_controller().create_customer()


@customer_bp.route("/<int:customer_id>", methods=["PUT"])
def update_customer(customer_id: int):
    return get_customer_controller().update_customer(customer_id)


@customer_bp.route("/<int:customer_id>", methods=["DELETE"])
def delete_customer(customer_id: int):
    return get_customer_controller().delete_customer(customer_id)
