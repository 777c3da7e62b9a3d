"""Demo programs and clients for a fresh installation."""

import logging

from .store import HealthSystemStore


logger = logging.getLogger(__name__)


DEMO_PROGRAMS = [
    {
        "name": "HIV Prevention",
        "description": "Program aimed at HIV prevention through education and screening.",
    },
    {
        "name": "TB Treatment",
        "description": "Comprehensive tuberculosis treatment and monitoring program.",
    },
    {
        "name": "Malaria Control",
        "description": "Malaria prevention, diagnosis and treatment program.",
    },
]

DEMO_CLIENTS = [
    {
        "first_name": "John",
        "last_name": "Doe",
        "date_of_birth": "1985-05-15",
        "gender": "male",
        "contact_number": "+1234567890",
        "email": "john.doe@example.com",
        "address": "123 Main St, Anytown",
        "medical_history": "No significant history",
    },
    {
        "first_name": "Jane",
        "last_name": "Smith",
        "date_of_birth": "1990-08-20",
        "gender": "female",
        "contact_number": "+1987654321",
        "email": "jane.smith@example.com",
        "address": "456 Elm St, Othertown",
        "medical_history": "History of asthma",
    },
]


def seed_demo_data(store: HealthSystemStore) -> bool:
    """Add the demo records if ``store`` is empty.

    Returns ``True`` when data was added.
    """
    if not store.is_empty():
        return False
    for program in DEMO_PROGRAMS:
        store.add_program(program)
    for client in DEMO_CLIENTS:
        store.add_client(client)
    logger.info("Seeded %d demo programs and %d demo clients", len(DEMO_PROGRAMS), len(DEMO_CLIENTS))
    return True
