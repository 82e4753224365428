"""
Unit tests for AppointmentService creation functionality.

This module tests appointment creation operations:
- Successful creation and confirmation email
- Input validation and date/time rules
- Customer and dentist lookups
- Double-booking detection, including store-level violations
"""

from datetime import datetime, timedelta
from unittest.mock import Mock

import pytest

from dental_manager.core.exceptions import SlotConflictError
from dental_manager.domain.entities import AppointmentStatus, Customer, Dentist
from dental_manager.services.appointment_service import (
    AppointmentResult,
    AppointmentService,
)
from tests.factories.dates import SATURDAY, TUESDAY, next_weekday
from tests.factories.repository_factories import (
    AppointmentRepositoryFactory,
    CustomerRepositoryFactory,
    DentistRepositoryFactory,
    EmailServiceFactory,
)


@pytest.fixture
def mock_appointment_repo() -> Mock:
    return AppointmentRepositoryFactory.create_mock_full()


@pytest.fixture
def mock_customer_repo(active_customer) -> Mock:
    return CustomerRepositoryFactory.create_populated_mock(active_customer)


@pytest.fixture
def mock_dentist_repo(active_dentist) -> Mock:
    return DentistRepositoryFactory.create_populated_mock(active_dentist)


@pytest.fixture
def mock_email_service() -> Mock:
    return EmailServiceFactory.create_mock()


@pytest.fixture
def service(
    mock_appointment_repo, mock_customer_repo, mock_email_service, mock_dentist_repo
) -> AppointmentService:
    return AppointmentService(
        mock_appointment_repo,
        mock_customer_repo,
        mock_email_service,
        dentist_repo=mock_dentist_repo,
    )


@pytest.mark.unit
@pytest.mark.services
@pytest.mark.appointment
class TestAppointmentServiceCreation:
    """Test appointment creation functionality."""

    def test_create_appointment_success(
        self, service, mock_appointment_repo, mock_email_service, next_tuesday_10am
    ):
        result = service.create_appointment(1, 1, next_tuesday_10am, "Cleaning", "first visit")

        assert isinstance(result, AppointmentResult)
        assert result
        assert result.message == "Appointment created successfully."
        assert result.appointment.id == 1
        assert result.appointment.status is AppointmentStatus.SCHEDULED
        assert result.appointment.notes == "first visit"
        mock_appointment_repo.create.assert_called_once()
        mock_email_service.send_appointment_confirmation.assert_called_once_with(
            "maria@example.com",
            "Maria Silva",
            "Dr. Carlos Lima",
            next_tuesday_10am,
            "Cleaning",
        )

    def test_procedure_type_is_trimmed(self, service, next_tuesday_10am):
        result = service.create_appointment(1, 1, next_tuesday_10am, "  Filling ")
        assert result.appointment.procedure_type == "Filling"

    @pytest.mark.parametrize("customer_id, dentist_id", [(0, 1), (1, 0), (-1, -1)])
    def test_invalid_ids(
        self, service, mock_appointment_repo, next_tuesday_10am, customer_id, dentist_id
    ):
        result = service.create_appointment(
            customer_id, dentist_id, next_tuesday_10am, "Cleaning"
        )
        assert not result
        assert result.message == "Invalid customer or dentist ID."
        mock_appointment_repo.create.assert_not_called()

    @pytest.mark.parametrize("procedure", ["", "   ", None])
    def test_procedure_type_required(self, service, next_tuesday_10am, procedure):
        result = service.create_appointment(1, 1, next_tuesday_10am, procedure)
        assert result.message == "Procedure type is required."

    def test_weekend_rejected_and_nothing_persisted(
        self, service, mock_appointment_repo, mock_email_service
    ):
        result = service.create_appointment(1, 1, next_weekday(SATURDAY, 10), "Cleaning")

        assert not result
        assert result.message == "Appointments cannot be scheduled on weekends."
        mock_appointment_repo.create.assert_not_called()
        mock_email_service.send_appointment_confirmation.assert_not_called()

    def test_past_rejected(self, service):
        result = service.create_appointment(
            1, 1, datetime.now() - timedelta(days=1), "Cleaning"
        )
        assert result.message == "Cannot schedule appointments in the past."

    def test_outside_hours_rejected(self, service):
        result = service.create_appointment(1, 1, next_weekday(TUESDAY, 19), "Cleaning")
        assert result.message == (
            "Appointments can only be scheduled between 08:00 and 18:00."
        )

    def test_customer_not_found(self, service, next_tuesday_10am):
        result = service.create_appointment(99, 1, next_tuesday_10am, "Cleaning")
        assert result.message == "Customer not found."

    def test_customer_inactive(
        self, service, mock_customer_repo, next_tuesday_10am
    ):
        mock_customer_repo.get_by_id.side_effect = None
        mock_customer_repo.get_by_id.return_value = Customer(
            id=1, name="Maria Silva", email="maria@example.com", is_active=False
        )
        result = service.create_appointment(1, 1, next_tuesday_10am, "Cleaning")
        assert result.message == "Customer account is inactive."

    def test_dentist_not_found(self, service, next_tuesday_10am):
        result = service.create_appointment(1, 42, next_tuesday_10am, "Cleaning")
        assert result.message == "Dentist not found."

    def test_dentist_inactive(self, service, mock_dentist_repo, next_tuesday_10am):
        mock_dentist_repo.get_by_id.side_effect = None
        mock_dentist_repo.get_by_id.return_value = Dentist(
            id=1, name="Dr. Off", is_active=False
        )
        result = service.create_appointment(1, 1, next_tuesday_10am, "Cleaning")
        assert result.message == "Dentist is not active."

    def test_customer_conflict(self, service, mock_appointment_repo, next_tuesday_10am):
        mock_appointment_repo.has_customer_conflict.return_value = True

        result = service.create_appointment(1, 1, next_tuesday_10am, "Cleaning")

        assert result.message == "Customer already has an appointment at this time."
        mock_appointment_repo.create.assert_not_called()

    def test_dentist_conflict(self, service, mock_appointment_repo, next_tuesday_10am):
        mock_appointment_repo.has_dentist_conflict.return_value = True

        result = service.create_appointment(1, 1, next_tuesday_10am, "Cleaning")

        assert result.message == "Dentist already has an appointment at this time."

    @pytest.mark.parametrize(
        "kind, message",
        [
            ("customer", "Customer already has an appointment at this time."),
            ("dentist", "Dentist already has an appointment at this time."),
        ],
    )
    def test_store_uniqueness_violation_maps_to_conflict(
        self, service, mock_appointment_repo, mock_email_service, next_tuesday_10am, kind, message
    ):
        mock_appointment_repo.create.side_effect = SlotConflictError(kind)

        result = service.create_appointment(1, 1, next_tuesday_10am, "Cleaning")

        assert not result
        assert result.message == message
        mock_email_service.send_appointment_confirmation.assert_not_called()

    def test_notification_failure_does_not_fail_creation(
        self, service, mock_email_service, next_tuesday_10am
    ):
        mock_email_service.send_appointment_confirmation.side_effect = RuntimeError(
            "smtp down"
        )

        result = service.create_appointment(1, 1, next_tuesday_10am, "Cleaning")

        assert result.success
        assert result.message == "Appointment created successfully."

    def test_without_dentist_lookup_uses_generic_name(
        self, mock_appointment_repo, mock_customer_repo, mock_email_service, next_tuesday_10am
    ):
        service = AppointmentService(
            mock_appointment_repo, mock_customer_repo, mock_email_service
        )

        result = service.create_appointment(1, 7, next_tuesday_10am, "Cleaning")

        assert result
        args = mock_email_service.send_appointment_confirmation.call_args[0]
        assert args[2] == "Dentist"
