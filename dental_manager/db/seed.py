"""
Database seeding for local development.

Creates a minimal clinic (one dentist and one customer) so the
appointment endpoints can be exercised against a fresh database.
"""

import logging

from dental_manager.db.base import Customer, Dentist
from dental_manager.db.session import SessionLocal

logger = logging.getLogger(__name__)

DEMO_DENTIST = {
    "name": "Dr. Ana Souza",
    "email": "ana.souza@clinic.local",
    "license_number": "CRO-0001",
    "specialization": "General Dentistry",
}
DEMO_CUSTOMER = {
    "name": "Demo Patient",
    "email": "patient@clinic.local",
    "phone": "555-0100",
}


def ensure_demo_clinic_data(session_factory=SessionLocal) -> bool:
    """
    Insert the demo dentist and customer when they are missing.

    Idempotent: records are matched by email. Returns True when anything
    was created.
    """
    created = False
    with session_factory() as db:
        if db.query(Dentist).filter_by(email=DEMO_DENTIST["email"]).first() is None:
            db.add(Dentist(is_active=True, **DEMO_DENTIST))
            created = True
        if db.query(Customer).filter_by(email=DEMO_CUSTOMER["email"]).first() is None:
            db.add(Customer(is_active=True, **DEMO_CUSTOMER))
            created = True
        if created:
            db.commit()

    if created:
        logger.info(
            "Demo clinic data seeded",
            extra={
                "context": {
                    "dentist_email": DEMO_DENTIST["email"],
                    "customer_email": DEMO_CUSTOMER["email"],
                }
            },
        )
    else:
        logger.debug("Demo clinic data already present")
    return created
