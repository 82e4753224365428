"""
Dentist service for business logic following SOLID principles.

Business Rules:
- Email addresses are unique across dentists (case-insensitive)
- A dentist that still has appointments cannot be deleted; deactivate
  them instead so they drop out of availability listings
"""

import logging
from dataclasses import replace
from typing import Optional

from dental_manager.domain.entities import Dentist
from dental_manager.domain.interfaces import IAppointmentReader, IDentistRepository
from dental_manager.services.customer_service import normalize_paging
from dental_manager.services.results import DentistResult, OperationResult, PagedResult

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Dentist not found."


def _duplicate_email_message(email: str) -> str:
    return f"A dentist with email '{email}' already exists."


class DentistService:
    """Application service for dentist-related use-cases."""

    def __init__(
        self,
        dentist_repo: IDentistRepository,
        appointment_repo: Optional[IAppointmentReader] = None,
    ) -> None:
        self.dentist_repo = dentist_repo
        self.appointment_repo = appointment_repo

    def create_dentist(
        self,
        name: str,
        email: str,
        phone: str = "",
        license_number: str = "",
        specialization: str = "",
    ) -> DentistResult:
        name = (name or "").strip()
        email = (email or "").strip()
        if not name or not email:
            return DentistResult(False, "Name and email are required.")

        if self.dentist_repo.get_by_email(email):
            return DentistResult(False, _duplicate_email_message(email))

        try:
            dentist = Dentist(
                name=name,
                email=email,
                phone=(phone or "").strip(),
                license_number=(license_number or "").strip(),
                specialization=(specialization or "").strip(),
                is_active=True,
            )
        except ValueError as e:
            return DentistResult(False, str(e))

        created = self.dentist_repo.create(dentist)
        logger.info(
            "Dentist created",
            extra={"context": {"dentist_id": created.id}},
        )
        return DentistResult(True, "Dentist created successfully.", created)

    def get_dentist_by_id(self, dentist_id: int) -> Optional[Dentist]:
        return self.dentist_repo.get_by_id(dentist_id)

    def get_dentist_by_email(self, email: str) -> Optional[Dentist]:
        return self.dentist_repo.get_by_email(email)

    def get_all_dentists(
        self, page: int = 1, page_size: int = 10, search: Optional[str] = None
    ) -> PagedResult:
        page, page_size = normalize_paging(page, page_size)
        return PagedResult(
            items=self.dentist_repo.get_all(page, page_size, search),
            page=page,
            page_size=page_size,
            total_count=self.dentist_repo.count(search),
        )

    def update_dentist(
        self,
        dentist_id: int,
        name: str,
        email: str,
        phone: str = "",
        license_number: str = "",
        specialization: str = "",
        is_active: bool = True,
    ) -> DentistResult:
        if dentist_id <= 0:
            return DentistResult(False, "Invalid dentist ID.")
        name = (name or "").strip()
        email = (email or "").strip()
        if not name or not email:
            return DentistResult(False, "Name and email are required.")

        existing = self.dentist_repo.get_by_id(dentist_id)
        if not existing:
            return DentistResult(False, NOT_FOUND_MESSAGE)

        if existing.email.lower() != email.lower():
            holder = self.dentist_repo.get_by_email(email)
            if holder and holder.id != dentist_id:
                return DentistResult(False, _duplicate_email_message(email))

        try:
            changed = replace(
                existing,
                name=name,
                email=email,
                phone=(phone or "").strip(),
                license_number=(license_number or "").strip(),
                specialization=(specialization or "").strip(),
                is_active=is_active,
            )
        except ValueError as e:
            return DentistResult(False, str(e))

        updated = self.dentist_repo.update(changed)
        if not updated:
            return DentistResult(False, NOT_FOUND_MESSAGE)

        if existing.is_active and not is_active:
            logger.warning(
                "Dentist deactivated",
                extra={"context": {"dentist_id": dentist_id}},
            )
        logger.info(
            "Dentist updated",
            extra={"context": {"dentist_id": dentist_id, "is_active": is_active}},
        )
        return DentistResult(True, "Dentist updated successfully.", updated)

    def delete_dentist(self, dentist_id: int) -> OperationResult:
        if not self.dentist_repo.get_by_id(dentist_id):
            return OperationResult(False, NOT_FOUND_MESSAGE)

        if self.appointment_repo is not None and self.appointment_repo.get_by_dentist_id(
            dentist_id
        ):
            return OperationResult(False, "Cannot delete a dentist who has appointments.")

        if not self.dentist_repo.delete(dentist_id):
            return OperationResult(False, NOT_FOUND_MESSAGE)

        logger.info(
            "Dentist deleted",
            extra={"context": {"dentist_id": dentist_id}},
        )
        return OperationResult(True, "Dentist deleted successfully.")
