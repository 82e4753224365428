"""Unit tests for the notification sender."""

import logging
from datetime import datetime
from unittest.mock import patch

import pytest

from dental_manager.services.email_service import (
    EmailService,
    render_cancellation_body,
    render_confirmation_body,
)

WHEN = datetime(2030, 3, 5, 10, 30)


@pytest.mark.unit
@pytest.mark.services
class TestEmailService:
    def test_confirmation_body_mentions_details(self):
        body = render_confirmation_body("Maria", "Dr. Lima", WHEN, "Cleaning")

        assert "Dear Maria" in body
        assert "Dr. Lima" in body
        assert "Cleaning" in body
        assert "Tuesday, 05 March 2030 at 10:30" in body

    def test_cancellation_body(self):
        body = render_cancellation_body("Maria", WHEN, "Filling")
        assert "has been cancelled" in body
        assert "Filling" in body

    def test_enabled_sender_logs_message(self, caplog):
        service = EmailService(enabled=True, from_address="clinic@example.com")

        with caplog.at_level(logging.INFO, logger="dental_manager.services.email_service"):
            sent = service.send_appointment_confirmation(
                "maria@example.com", "Maria", "Dr. Lima", WHEN, "Cleaning"
            )

        assert sent is True
        record = next(r for r in caplog.records if r.getMessage() == "Email dispatched")
        assert record.context["recipient"] == "maria@example.com"
        assert record.context["from"] == "clinic@example.com"
        assert record.context["subject"].startswith("Appointment Confirmation")

    def test_disabled_sender_reports_success_without_sending(self, caplog):
        service = EmailService(enabled=False)

        with caplog.at_level(logging.INFO, logger="dental_manager.services.email_service"):
            sent = service.send_appointment_cancellation(
                "maria@example.com", "Maria", WHEN, "Cleaning"
            )

        assert sent is True
        assert not any(r.getMessage() == "Email dispatched" for r in caplog.records)

    @pytest.mark.parametrize("recipient", ["", "not-an-address"])
    def test_invalid_recipient_returns_false(self, recipient):
        service = EmailService(enabled=True)
        assert service.send_appointment_cancellation(recipient, "Maria", WHEN, "Cleaning") is False

    def test_render_failure_returns_false(self):
        service = EmailService(enabled=True)
        with patch(
            "dental_manager.services.email_service.render_confirmation_body",
            side_effect=RuntimeError("template error"),
        ):
            sent = service.send_appointment_confirmation(
                "maria@example.com", "Maria", "Dr. Lima", WHEN, "Cleaning"
            )
        assert sent is False

    def test_defaults_come_from_config(self):
        with patch("dental_manager.services.email_service.config") as mock_config:
            mock_config.EMAIL_ENABLED = False
            mock_config.EMAIL_FROM_ADDRESS = "noreply@clinic.local"
            service = EmailService()

        assert service.enabled is False
        assert service.from_address == "noreply@clinic.local"
