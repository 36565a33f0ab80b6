"""Test data factories using Faker."""

from faker import Faker
from typing import Optional

fake = Faker()
fake_fa = Faker("fa_IR")


def create_user_data(role: str = "admin", user_id: Optional[str] = None) -> dict:
    """Create test user data."""
    return {
        "id": user_id or str(fake.random_int(min=1, max=99999)),
        "email": fake.email(),
        "role": role,
        "is_active": True,
    }


def create_token_response(user: Optional[dict] = None, **overrides) -> dict:
    """Create a password-grant token response."""
    data = {
        "access_token": fake.sha256(),
        "refresh_token": fake.sha1(),
        "token_type": "bearer",
        "expires_in": 3600,
        "expires_at": fake.random_int(min=1_700_000_000, max=1_900_000_000),
        "user": user or create_user_data(),
    }
    data.update(overrides)
    return data


def create_property_data(property_id: Optional[str] = None, **overrides) -> dict:
    """Create a property record as the backend returns it."""
    data = {
        "id": property_id or str(fake.random_int(min=1, max=99999)),
        "title": fake_fa.sentence(nb_words=4),
        "description": fake_fa.text(max_nb_chars=120),
        "property_type": "apartment",
        "status": "available",
        "listing_type": "sale",
        "address": fake_fa.address(),
        "city": "تهران",
        "district": None,
        "area": str(fake.random_int(min=40, max=400)),
        "bedrooms": fake.random_int(min=0, max=5),
        "bathrooms": fake.random_int(min=1, max=3),
        "price": str(fake.random_int(min=1_000_000_000, max=90_000_000_000)),
        "features": {"has_elevator": True, "has_parking": False},
        "images": [{"url": fake.image_url()}],
        "featured_image": None,
        "is_featured": False,
        "created_at": "2024-12-09T12:00:00Z",
        "updated_at": "2024-12-09T12:00:00Z",
    }
    data.update(overrides)
    return data


def create_property_payload(**overrides) -> dict:
    """Create a payload accepted by the create operation."""
    data = {
        "title": "آپارتمان ۱۵۰ متری در فرمانیه",
        "description": None,
        "property_type": "apartment",
        "status": "available",
        "listing_type": "sale",
        "address": "فرمانیه، خیابان دیباجی",
        "city": "تهران",
        "district": "فرمانیه",
        "area": 80,
        "bedrooms": 2,
        "bathrooms": 1,
        "price": 1500,
        "features": {"has_elevator": True},
        "images": [],
        "featured_image": None,
    }
    data.update(overrides)
    return data
