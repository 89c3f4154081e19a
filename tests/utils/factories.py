"""Test data factories using Faker."""

import uuid
from faker import Faker
from typing import Optional

fake = Faker()


def create_user_id() -> str:
    return str(uuid.uuid4())


def create_lead_data(**overrides) -> dict:
    """Valid LeadCreate payload."""
    budget_min = fake.random_int(min=100, max=500) * 1000
    data = {
        "first_name": fake.first_name(),
        "last_name": fake.last_name(),
        "email": f"{fake.user_name()}{fake.random_int(min=1, max=9999)}@example.com",
        "phone": "+1-555-0123",
        "budget_min": float(budget_min),
        "budget_max": float(budget_min + 200000),
        "preferred_areas": ["Downtown", "Midtown"],
        "property_type": "Condo",
        "bedrooms": fake.random_int(min=1, max=5),
        "bathrooms": 2.5,
        "status": "new",
        "source": "website",
        "priority": fake.random_int(min=1, max=5),
        "notes": fake.sentence(nb_words=6).replace(",", ""),
    }
    data.update(overrides)
    return data


def create_lead_row(created_by: Optional[str] = None, assigned_to: Optional[str] = None, **overrides) -> dict:
    """buyer_leads row values for seeding the fake store."""
    data = create_lead_data(**overrides)
    data["created_by"] = created_by
    data["assigned_to"] = assigned_to
    return data


def create_profile_row(user_id: Optional[str] = None, role: str = "agent", **overrides) -> dict:
    data = {
        "user_id": user_id or create_user_id(),
        "full_name": fake.name(),
        "role": role,
    }
    data.update(overrides)
    return data


def create_csv(rows: list[list[str]], header: Optional[list[str]] = None) -> str:
    """Plain comma-joined CSV text (no quoting) for import tests."""
    header = header or ["first_name", "last_name", "email"]
    return "\n".join(",".join(row) for row in [header, *rows])
