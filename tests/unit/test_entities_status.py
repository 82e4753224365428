"""Unit tests for domain entities and the appointment status model."""

import pytest

from dental_manager.domain.entities import (
    ALLOWED_TRANSITIONS,
    Appointment,
    AppointmentStatus,
    Customer,
    Dentist,
)


@pytest.mark.unit
@pytest.mark.appointment
class TestAppointmentStatus:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("Scheduled", AppointmentStatus.SCHEDULED),
            ("completed", AppointmentStatus.COMPLETED),
            ("CANCELLED", AppointmentStatus.CANCELLED),
            ("CancellationRequested", AppointmentStatus.CANCELLATION_REQUESTED),
            ("CANCELLATION_REQUESTED", AppointmentStatus.CANCELLATION_REQUESTED),
            ("Cancellation Requested", AppointmentStatus.CANCELLATION_REQUESTED),
            (AppointmentStatus.COMPLETED, AppointmentStatus.COMPLETED),
        ],
    )
    def test_parse_accepts_value_name_and_description(self, raw, expected):
        assert AppointmentStatus.parse(raw) is expected

    @pytest.mark.parametrize("raw", ["", None, "Confirmed", "done"])
    def test_parse_rejects_unknown(self, raw):
        with pytest.raises(ValueError, match="Invalid appointment status"):
            AppointmentStatus.parse(raw)

    def test_description(self):
        assert AppointmentStatus.CANCELLATION_REQUESTED.description == "Cancellation Requested"
        assert AppointmentStatus.SCHEDULED.description == "Scheduled"

    def test_str_is_stored_value(self):
        assert str(AppointmentStatus.CANCELLATION_REQUESTED) == "CancellationRequested"

    def test_terminal_states(self):
        assert AppointmentStatus.COMPLETED.is_terminal
        assert AppointmentStatus.CANCELLED.is_terminal
        assert not AppointmentStatus.SCHEDULED.is_terminal
        assert not AppointmentStatus.CANCELLATION_REQUESTED.is_terminal

    def test_transition_table(self):
        scheduled = AppointmentStatus.SCHEDULED
        requested = AppointmentStatus.CANCELLATION_REQUESTED

        assert scheduled.can_transition_to(AppointmentStatus.COMPLETED)
        assert scheduled.can_transition_to(AppointmentStatus.CANCELLED)
        assert scheduled.can_transition_to(requested)
        assert requested.can_transition_to(AppointmentStatus.CANCELLED)
        assert requested.can_transition_to(scheduled)
        assert not requested.can_transition_to(AppointmentStatus.COMPLETED)
        assert not AppointmentStatus.COMPLETED.can_transition_to(
            AppointmentStatus.CANCELLED
        )

    def test_every_status_has_a_table_entry(self):
        assert set(ALLOWED_TRANSITIONS) == set(AppointmentStatus)


@pytest.mark.unit
@pytest.mark.appointment
class TestAppointmentEntity:
    def test_defaults(self):
        appointment = Appointment(customer_id=1, dentist_id=2, procedure_type="Cleaning")
        assert appointment.status is AppointmentStatus.SCHEDULED
        assert appointment.notes == ""
        assert appointment.is_active

    def test_status_given_as_text_is_parsed(self):
        appointment = Appointment(customer_id=1, dentist_id=2, status="Cancelled")
        assert appointment.status is AppointmentStatus.CANCELLED
        assert not appointment.is_active

    def test_none_notes_become_empty(self):
        assert Appointment(customer_id=1, dentist_id=2, notes=None).notes == ""

    @pytest.mark.parametrize(
        "customer_id, dentist_id, message",
        [(0, 1, "customer_id"), (1, 0, "dentist_id"), (-3, 1, "customer_id")],
    )
    def test_requires_positive_ids(self, customer_id, dentist_id, message):
        with pytest.raises(ValueError, match=message):
            Appointment(customer_id=customer_id, dentist_id=dentist_id)


@pytest.mark.unit
class TestPeopleEntities:
    def test_customer_requires_name(self):
        with pytest.raises(ValueError, match="Name is required"):
            Customer(email="a@b.com")

    def test_dentist_rejects_malformed_email(self):
        with pytest.raises(ValueError, match="Invalid email format"):
            Dentist(name="Dr. Who", email="not-an-email")

    def test_customer_defaults_active_and_unlinked(self):
        customer = Customer(name="Ana", email="ana@example.com")
        assert customer.is_active
        assert customer.user_id is None
