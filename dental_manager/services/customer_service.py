"""
Customer service for business logic following SOLID principles.

This service:
- Keeps business rules separate from controllers and repositories (Single Responsibility)
- Depends on abstractions (ICustomerRepository, IAppointmentReader) not concrete implementations (Dependency Inversion)
- Works with domain entities, not database models

Business Rules:
- Email addresses are unique across customers (case-insensitive)
- A customer that still has appointments cannot be deleted
"""

import logging
from dataclasses import replace
from datetime import date
from typing import Optional

from dental_manager.domain.entities import Customer
from dental_manager.domain.interfaces import IAppointmentReader, ICustomerRepository
from dental_manager.services.results import CustomerResult, OperationResult, PagedResult

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100
NOT_FOUND_MESSAGE = "Customer not found."
DUPLICATE_EMAIL_MESSAGE = "A customer with this email already exists."


def normalize_paging(page: int, page_size: int) -> tuple:
    """Clamp paging input to page >= 1 and 1 <= page_size <= MAX_PAGE_SIZE."""
    return max(page, 1), min(max(page_size, 1), MAX_PAGE_SIZE)


class CustomerService:
    """Application service for customer-related use-cases."""

    def __init__(
        self,
        customer_repo: ICustomerRepository,
        appointment_repo: Optional[IAppointmentReader] = None,
    ) -> None:
        self.customer_repo = customer_repo
        self.appointment_repo = appointment_repo

    def create_customer(
        self,
        name: str,
        email: str,
        phone: str = "",
        address: str = "",
        date_of_birth: Optional[date] = None,
    ) -> CustomerResult:
        name = (name or "").strip()
        email = (email or "").strip()
        if not name or not email:
            return CustomerResult(False, "Name and email are required.")

        if self.customer_repo.get_by_email(email):
            return CustomerResult(False, DUPLICATE_EMAIL_MESSAGE)

        try:
            customer = Customer(
                name=name,
                email=email,
                phone=(phone or "").strip(),
                address=(address or "").strip(),
                date_of_birth=date_of_birth,
                is_active=True,
            )
        except ValueError as e:
            return CustomerResult(False, str(e))

        created = self.customer_repo.create(customer)
        logger.info(
            "Customer created",
            extra={"context": {"customer_id": created.id}},
        )
        return CustomerResult(True, "Customer created successfully.", created)

    def get_customer_by_id(self, customer_id: int) -> Optional[Customer]:
        return self.customer_repo.get_by_id(customer_id)

    def get_all_customers(
        self, page: int = 1, page_size: int = 10, search: Optional[str] = None
    ) -> PagedResult:
        page, page_size = normalize_paging(page, page_size)
        return PagedResult(
            items=self.customer_repo.get_all(page, page_size, search),
            page=page,
            page_size=page_size,
            total_count=self.customer_repo.count(search),
        )

    def update_customer(
        self,
        customer_id: int,
        name: str,
        email: str,
        phone: str = "",
        address: str = "",
        date_of_birth: Optional[date] = None,
        is_active: bool = True,
    ) -> CustomerResult:
        """Replace the editable fields of a customer.

        Changing the email to one held by another customer is refused.
        """
        if customer_id <= 0:
            return CustomerResult(False, "Invalid customer ID.")
        name = (name or "").strip()
        email = (email or "").strip()
        if not name or not email:
            return CustomerResult(False, "Name and email are required.")

        existing = self.customer_repo.get_by_id(customer_id)
        if not existing:
            return CustomerResult(False, NOT_FOUND_MESSAGE)

        if existing.email.lower() != email.lower():
            holder = self.customer_repo.get_by_email(email)
            if holder and holder.id != customer_id:
                return CustomerResult(False, DUPLICATE_EMAIL_MESSAGE)

        try:
            changed = replace(
                existing,
                name=name,
                email=email,
                phone=(phone or "").strip(),
                address=(address or "").strip(),
                date_of_birth=date_of_birth,
                is_active=is_active,
            )
        except ValueError as e:
            return CustomerResult(False, str(e))

        updated = self.customer_repo.update(changed)
        if not updated:
            return CustomerResult(False, NOT_FOUND_MESSAGE)

        logger.info(
            "Customer updated",
            extra={"context": {"customer_id": customer_id, "is_active": is_active}},
        )
        return CustomerResult(True, "Customer updated successfully.", updated)

    def delete_customer(self, customer_id: int) -> OperationResult:
        if not self.customer_repo.get_by_id(customer_id):
            return OperationResult(False, NOT_FOUND_MESSAGE)

        if self.appointment_repo is not None and self.appointment_repo.get_by_customer_id(
            customer_id
        ):
            return OperationResult(
                False, "Cannot delete a customer who has appointments."
            )

        if not self.customer_repo.delete(customer_id):
            return OperationResult(False, NOT_FOUND_MESSAGE)

        logger.info(
            "Customer deleted",
            extra={"context": {"customer_id": customer_id}},
        )
        return OperationResult(True, "Customer deleted successfully.")
