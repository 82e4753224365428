"""
Custom exceptions for the application.
Following SOLID principles - centralized error handling.

Business-rule failures are reported as result values by the services;
these exceptions cover the store boundary only.
"""


class AppointmentNotFoundError(LookupError):
    """
    Raised by an appointment store when an update targets an id that
    does not exist.
    """

    def __init__(self, appointment_id):
        self.appointment_id = appointment_id
        super().__init__(f"Appointment with ID {appointment_id} not found")


class SlotConflictError(Exception):
    """
    Raised by an appointment store when a write would create a second
    non-cancelled appointment for the same customer or dentist at the same time.
    """

    def __init__(self, kind: str, message: str = ""):
        # kind is "customer" or "dentist"
        self.kind = kind
        super().__init__(
            message or f"{kind.capitalize()} already has an appointment at this time."
        )


class AppointmentConflictError(ValueError):
    """
    Raised by the appointment service when a status change is refused by
    the store because the slot is already held by another appointment.
    """

    def __init__(self, kind: str, message: str):
        self.kind = kind
        super().__init__(message)
