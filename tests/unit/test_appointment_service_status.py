"""
Unit tests for AppointmentService status operations.

This module tests:
- Completing appointments
- Customer cancellation requests
- The generic status overwrite and its transition warning
- Deletion
"""

import logging
from unittest.mock import Mock

import pytest

from dental_manager.core.exceptions import AppointmentConflictError, SlotConflictError
from dental_manager.domain.entities import AppointmentStatus
from dental_manager.services.appointment_service import (
    AppointmentService,
    OperationResult,
)
from tests.factories.repository_factories import (
    AppointmentRepositoryFactory,
    CustomerRepositoryFactory,
    EmailServiceFactory,
    make_appointment,
)


@pytest.fixture
def mock_appointment_repo() -> Mock:
    return AppointmentRepositoryFactory.create_mock_full()


@pytest.fixture
def service(mock_appointment_repo, active_customer) -> AppointmentService:
    return AppointmentService(
        mock_appointment_repo,
        CustomerRepositoryFactory.create_populated_mock(active_customer),
        EmailServiceFactory.create_mock(),
    )


def stored(mock_repo, status, customer_id=1):
    appointment = make_appointment(id=3, customer_id=customer_id, status=status)
    mock_repo.get_by_id.return_value = appointment
    return appointment


@pytest.mark.unit
@pytest.mark.services
@pytest.mark.appointment
class TestCompleteAppointment:
    def test_complete_scheduled(self, service, mock_appointment_repo):
        appointment = stored(mock_appointment_repo, AppointmentStatus.SCHEDULED)

        result = service.complete_appointment(3)

        assert isinstance(result, OperationResult)
        assert result
        assert result.message == "Appointment marked as completed."
        assert appointment.status is AppointmentStatus.COMPLETED
        assert appointment.updated_at is not None
        mock_appointment_repo.update.assert_called_once_with(appointment)

    @pytest.mark.parametrize(
        "status",
        [
            AppointmentStatus.COMPLETED,
            AppointmentStatus.CANCELLED,
            AppointmentStatus.CANCELLATION_REQUESTED,
        ],
    )
    def test_complete_requires_scheduled(self, service, mock_appointment_repo, status):
        stored(mock_appointment_repo, status)

        result = service.complete_appointment(3)

        assert not result
        assert result.message == "Only scheduled appointments can be completed."
        mock_appointment_repo.update.assert_not_called()

    def test_complete_not_found(self, service):
        assert service.complete_appointment(3).message == "Appointment not found."


@pytest.mark.unit
@pytest.mark.services
@pytest.mark.appointment
class TestRequestCancellation:
    def test_owner_can_request(self, service, mock_appointment_repo):
        appointment = stored(mock_appointment_repo, AppointmentStatus.SCHEDULED)

        result = service.request_cancellation(3, customer_id=1)

        assert result
        assert result.message == "Cancellation request submitted successfully."
        assert appointment.status is AppointmentStatus.CANCELLATION_REQUESTED

    def test_non_owner_rejected(self, service, mock_appointment_repo):
        appointment = stored(mock_appointment_repo, AppointmentStatus.SCHEDULED)

        result = service.request_cancellation(3, customer_id=2)

        assert result.message == "You can only cancel your own appointments."
        assert appointment.status is AppointmentStatus.SCHEDULED

    @pytest.mark.parametrize(
        "status",
        [
            AppointmentStatus.COMPLETED,
            AppointmentStatus.CANCELLED,
            AppointmentStatus.CANCELLATION_REQUESTED,
        ],
    )
    def test_requires_scheduled(self, service, mock_appointment_repo, status):
        stored(mock_appointment_repo, status)

        result = service.request_cancellation(3, customer_id=1)

        assert result.message == "Only scheduled appointments can be cancelled."

    def test_not_found(self, service):
        assert service.request_cancellation(3, 1).message == "Appointment not found."


@pytest.mark.unit
@pytest.mark.services
@pytest.mark.appointment
class TestUpdateAppointmentStatus:
    def test_returns_none_when_missing(self, service):
        assert service.update_appointment_status(3, AppointmentStatus.COMPLETED) is None

    def test_accepts_textual_status(self, service, mock_appointment_repo):
        stored(mock_appointment_repo, AppointmentStatus.SCHEDULED)

        updated = service.update_appointment_status(3, "Cancellation Requested", "asked by phone")

        assert updated.status is AppointmentStatus.CANCELLATION_REQUESTED
        assert updated.updated_at is not None

    def test_unknown_status_raises(self, service, mock_appointment_repo):
        stored(mock_appointment_repo, AppointmentStatus.SCHEDULED)
        with pytest.raises(ValueError):
            service.update_appointment_status(3, "Archived")

    def test_transition_outside_table_is_applied_with_warning(
        self, service, mock_appointment_repo, caplog
    ):
        stored(mock_appointment_repo, AppointmentStatus.COMPLETED)

        with caplog.at_level(logging.WARNING):
            updated = service.update_appointment_status(3, AppointmentStatus.SCHEDULED)

        assert updated.status is AppointmentStatus.SCHEDULED
        assert "Status transition outside the allowed table" in caplog.text

    def test_allowed_transition_logs_no_warning(
        self, service, mock_appointment_repo, caplog
    ):
        stored(mock_appointment_repo, AppointmentStatus.SCHEDULED)

        with caplog.at_level(logging.WARNING):
            service.update_appointment_status(3, AppointmentStatus.COMPLETED)

        assert "outside the allowed table" not in caplog.text

    def test_reinstating_into_taken_slot_raises_conflict(
        self, service, mock_appointment_repo
    ):
        stored(mock_appointment_repo, AppointmentStatus.CANCELLED)
        mock_appointment_repo.update.side_effect = SlotConflictError("dentist")

        with pytest.raises(AppointmentConflictError) as excinfo:
            service.update_appointment_status(3, AppointmentStatus.SCHEDULED)

        assert excinfo.value.kind == "dentist"
        assert str(excinfo.value) == "Dentist already has an appointment at this time."
        assert isinstance(excinfo.value, ValueError)


@pytest.mark.unit
@pytest.mark.services
@pytest.mark.appointment
class TestStatusChangeConflicts:
    """A store-level slot conflict during a status write becomes a failed result."""

    def test_complete_reports_conflict(self, service, mock_appointment_repo):
        stored(mock_appointment_repo, AppointmentStatus.SCHEDULED)
        mock_appointment_repo.update.side_effect = SlotConflictError("customer")

        result = service.complete_appointment(3)

        assert not result
        assert result.message == "Customer already has an appointment at this time."

    def test_request_cancellation_reports_conflict(self, service, mock_appointment_repo):
        stored(mock_appointment_repo, AppointmentStatus.SCHEDULED)
        mock_appointment_repo.update.side_effect = SlotConflictError("dentist")

        result = service.request_cancellation(3, 1)

        assert not result
        assert result.message == "Dentist already has an appointment at this time."


@pytest.mark.unit
@pytest.mark.services
@pytest.mark.appointment
class TestDeleteAppointment:
    def test_delete_existing(self, service, mock_appointment_repo):
        mock_appointment_repo.delete.return_value = True
        assert service.delete_appointment(3) is True
        mock_appointment_repo.delete.assert_called_once_with(3)

    def test_delete_missing(self, service):
        assert service.delete_appointment(3) is False
