"""
Appointment notification emails.

Renders confirmation and cancellation messages and hands them to the
outbound log. Delivery is best-effort: every method returns a bool and
never raises.
"""

import logging
from datetime import datetime
from typing import Optional

from dental_manager.core import config
from dental_manager.domain.interfaces import IEmailService

logger = logging.getLogger(__name__)

CLINIC_NAME = "Dental Manager"


def _format_when(appointment_datetime: datetime) -> str:
    return appointment_datetime.strftime("%A, %d %B %Y at %H:%M")


def render_confirmation_body(
    customer_name: str,
    dentist_name: str,
    appointment_datetime: datetime,
    procedure_type: str,
) -> str:
    return (
        f"Dear {customer_name},\n\n"
        "Your appointment has been scheduled.\n\n"
        f"- Date and time: {_format_when(appointment_datetime)}\n"
        f"- Dentist: {dentist_name}\n"
        f"- Procedure: {procedure_type}\n\n"
        "Please arrive 10 minutes early. If you need to cancel, request it "
        "through your account at least 24 hours in advance.\n\n"
        f"Best regards,\n{CLINIC_NAME}"
    )


def render_cancellation_body(
    customer_name: str, appointment_datetime: datetime, procedure_type: str
) -> str:
    return (
        f"Dear {customer_name},\n\n"
        "Your appointment has been cancelled.\n\n"
        f"- Date and time: {_format_when(appointment_datetime)}\n"
        f"- Procedure: {procedure_type}\n\n"
        "Contact us if you would like to book a new time.\n\n"
        f"Best regards,\n{CLINIC_NAME}"
    )


class EmailService(IEmailService):
    """Notification sender used by the appointment service."""

    def __init__(
        self, enabled: Optional[bool] = None, from_address: Optional[str] = None
    ):
        self.enabled = config.EMAIL_ENABLED if enabled is None else enabled
        self.from_address = from_address or config.EMAIL_FROM_ADDRESS

    def send_appointment_confirmation(
        self,
        email: str,
        customer_name: str,
        dentist_name: str,
        appointment_datetime: datetime,
        procedure_type: str,
    ) -> bool:
        return self._send(
            "appointment_confirmation",
            email,
            f"Appointment Confirmation - {CLINIC_NAME}",
            lambda: render_confirmation_body(
                customer_name, dentist_name, appointment_datetime, procedure_type
            ),
        )

    def send_appointment_cancellation(
        self,
        email: str,
        customer_name: str,
        appointment_datetime: datetime,
        procedure_type: str,
    ) -> bool:
        return self._send(
            "appointment_cancellation",
            email,
            f"Appointment Cancelled - {CLINIC_NAME}",
            lambda: render_cancellation_body(
                customer_name, appointment_datetime, procedure_type
            ),
        )

    def _send(self, kind: str, email: str, subject: str, render_body) -> bool:
        if not self.enabled:
            logger.info(
                "Email service is disabled, skipping message",
                extra={"context": {"kind": kind, "recipient": email}},
            )
            return True

        if not email or "@" not in email:
            logger.warning(
                "Cannot send email without a valid recipient",
                extra={"context": {"kind": kind, "recipient": email}},
            )
            return False

        try:
            body = render_body()
            logger.info(
                "Email dispatched",
                extra={
                    "context": {
                        "kind": kind,
                        "from": self.from_address,
                        "recipient": email,
                        "subject": subject,
                        "body": body,
                    }
                },
            )
            return True
        except Exception as e:
            logger.error(
                "Failed to send email",
                extra={"context": {"kind": kind, "recipient": email, "error": str(e)}},
                exc_info=True,
            )
            return False
