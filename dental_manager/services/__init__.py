# Services package initialization
# This file makes the services directory a Python package
# and allows importing service modules

from . import appointment_service
from . import customer_service
from . import dentist_service
from . import email_service
from . import results
from . import user_linking_service

__all__ = [
    "appointment_service",
    "customer_service",
    "dentist_service",
    "email_service",
    "results",
    "user_linking_service",
]
