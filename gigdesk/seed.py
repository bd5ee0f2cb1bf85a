"""
Demo marketplace data.

Mirrors the showcase accounts and services used by the front end so the
console demo and manual testing have something to book against. The demo
login is ``demo@example.com`` / ``demo123``.
"""

import logging

from gigdesk.catalog.identities import IdentityRegistry
from gigdesk.catalog.services import ServiceCatalog
from gigdesk.schemas.booking_schema import Service
from gigdesk.schemas.identity_schema import Identity, UserRole

logger = logging.getLogger(__name__)

DEMO_CREDENTIALS: dict[str, str] = {
    "email": "demo@example.com",
    "password": "demo123",
}

# Freelancer accounts share one showcase password.
FREELANCER_DEMO_PASSWORD = "freelancer123"

DEMO_USERS: list[dict] = [
    {
        "id": "user-1",
        "email": "john.doe@example.com",
        "display_name": "John Doe",
        "role": UserRole.FREELANCER,
        "hourly_rate_cents": 7500,
        "location": "Dhaka, Bangladesh",
        "bio": "Experienced web developer with 5+ years in React and Node.js",
        "is_verified": True,
    },
    {
        "id": "user-2",
        "email": "sarah.smith@example.com",
        "display_name": "Sarah Smith",
        "role": UserRole.FREELANCER,
        "hourly_rate_cents": 9000,
        "location": "Chittagong, Bangladesh",
        "bio": "UI/UX Designer specializing in mobile and web applications",
        "is_verified": True,
    },
    {
        "id": "user-3",
        "email": "mike.johnson@example.com",
        "display_name": "Mike Johnson",
        "role": UserRole.FREELANCER,
        "hourly_rate_cents": 6000,
        "location": "Khulna, Bangladesh",
        "bio": "Full-stack developer with expertise in Python and Django",
    },
    {
        "id": "user-4",
        "email": "client@example.com",
        "display_name": "Alice Wilson",
        "role": UserRole.CLIENT,
        "location": "Dhaka, Bangladesh",
        "bio": "Startup founder looking for talented developers",
    },
    {
        "id": "user-5",
        "email": "demo@example.com",
        "display_name": "Demo User",
        "role": UserRole.CLIENT,
        "location": "Dhaka, Bangladesh",
        "bio": "Demo user for showcasing the platform",
    },
]

DEMO_PASSWORDS: dict[str, str] = {
    "client@example.com": "client123",
    DEMO_CREDENTIALS["email"]: DEMO_CREDENTIALS["password"],
}

DEMO_SERVICES: list[dict] = [
    {
        "id": "service-1",
        "title": "React Web Application Development",
        "description": "Build modern, responsive web applications using React and TypeScript",
        "price_cents": 50000,
        "duration_minutes": 120,
        "freelancer_id": "user-1",
        "category_id": "cat-1",
    },
    {
        "id": "service-2",
        "title": "Mobile UI/UX Design",
        "description": "Create beautiful and intuitive mobile app designs",
        "price_cents": 75000,
        "duration_minutes": 90,
        "freelancer_id": "user-2",
        "category_id": "cat-3",
    },
    {
        "id": "service-3",
        "title": "Python Backend API",
        "description": "Develop robust REST APIs using Python and Django",
        "price_cents": 40000,
        "duration_minutes": 150,
        "freelancer_id": "user-3",
        "category_id": "cat-1",
    },
    {
        "id": "service-4",
        "title": "React Native Mobile App",
        "description": "Cross-platform mobile application development",
        "price_cents": 80000,
        "duration_minutes": 180,
        "freelancer_id": "user-1",
        "category_id": "cat-2",
    },
    {
        "id": "service-5",
        "title": "Website Redesign",
        "description": "Complete website redesign with modern UI/UX principles",
        "price_cents": 60000,
        "duration_minutes": 240,
        "freelancer_id": "user-2",
        "category_id": "cat-3",
    },
]


def seed_identities(registry: IdentityRegistry, currency: str) -> None:
    for user in DEMO_USERS:
        password = DEMO_PASSWORDS.get(user["email"], FREELANCER_DEMO_PASSWORD)
        registry.add(Identity(currency=currency, **user), password)


def seed_services(catalog: ServiceCatalog, currency: str) -> None:
    for service in DEMO_SERVICES:
        catalog.add(Service(currency=currency, **service))


def seed_demo_data(registry: IdentityRegistry, catalog: ServiceCatalog, currency: str) -> None:
    """Load the showcase users and services."""
    seed_identities(registry, currency)
    seed_services(catalog, currency)
    logger.info("Seeded %d users and %d services", len(DEMO_USERS), len(DEMO_SERVICES))
