# Controllers package initialization
# This file makes the controllers directory a Python package
# and allows importing controller modules

from . import appointment_controller
from . import customer_controller
from . import dentist_controller
from . import health_controller

__all__ = [
    "appointment_controller",
    "customer_controller",
    "dentist_controller",
    "health_controller",
]
