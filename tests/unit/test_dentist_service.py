"""Unit tests for DentistService."""

import logging
from unittest.mock import Mock

import pytest

from dental_manager.domain.entities import Dentist
from dental_manager.services.dentist_service import DentistService
from tests.factories.repository_factories import (
    AppointmentRepositoryFactory,
    DentistRepositoryFactory,
    make_appointment,
)


@pytest.fixture
def mock_dentist_repo(active_dentist) -> Mock:
    return DentistRepositoryFactory.create_populated_mock(active_dentist)


@pytest.fixture
def mock_appointment_repo() -> Mock:
    return AppointmentRepositoryFactory.create_mock_reader()


@pytest.fixture
def service(mock_dentist_repo, mock_appointment_repo) -> DentistService:
    return DentistService(mock_dentist_repo, mock_appointment_repo)


@pytest.mark.unit
@pytest.mark.services
class TestDentistService:
    def test_create_success(self):
        service = DentistService(DentistRepositoryFactory.create_mock_full())

        result = service.create_dentist(
            "Dr. Ana Costa", "ana@clinic.local", license_number="CRO-1", specialization="Endo"
        )

        assert result
        assert result.dentist.id == 1
        assert result.dentist.specialization == "Endo"

    def test_create_duplicate_email(self, service, mock_dentist_repo, active_dentist):
        mock_dentist_repo.get_by_email.return_value = active_dentist

        result = service.create_dentist("Dr. Clone", "carlos@clinic.local")

        assert result.message == "A dentist with email 'carlos@clinic.local' already exists."
        mock_dentist_repo.create.assert_not_called()

    def test_get_by_email(self, service, mock_dentist_repo, active_dentist):
        mock_dentist_repo.get_by_email.return_value = active_dentist
        assert service.get_dentist_by_email("carlos@clinic.local") == active_dentist

    def test_list_is_paged(self, service, mock_dentist_repo):
        page = service.get_all_dentists(page=2, page_size=1)

        assert page.page == 2
        assert page.total_count == 1
        assert page.has_previous_page
        mock_dentist_repo.get_all.assert_called_once_with(2, 1, None)

    def test_deactivation_logs_warning(self, service, caplog):
        with caplog.at_level(logging.WARNING):
            result = service.update_dentist(
                1, "Dr. Carlos Lima", "carlos@clinic.local", is_active=False
            )

        assert result
        assert result.dentist.is_active is False
        assert "Dentist deactivated" in caplog.text

    def test_update_to_taken_email(self, service, mock_dentist_repo):
        mock_dentist_repo.get_by_email.return_value = Dentist(
            id=5, name="Dr. Paula Reis", email="paula@clinic.local"
        )

        result = service.update_dentist(1, "Dr. Carlos Lima", "paula@clinic.local")

        assert result.message == "A dentist with email 'paula@clinic.local' already exists."

    def test_update_missing(self, service):
        assert service.update_dentist(3, "Dr. X", "x@clinic.local").message == (
            "Dentist not found."
        )

    def test_delete_with_appointments_refused(self, service, mock_appointment_repo):
        mock_appointment_repo.get_by_dentist_id.return_value = [make_appointment()]

        result = service.delete_dentist(1)

        assert result.message == "Cannot delete a dentist who has appointments."

    def test_delete_success_and_missing(self, service, mock_dentist_repo):
        assert service.delete_dentist(1)
        mock_dentist_repo.delete.assert_called_once_with(1)
        assert service.delete_dentist(9).message == "Dentist not found."
