"""Pytest configuration and fixtures.

Fixture overview
----------------
app             - application built from TestConfig with an in-memory SQLite
                  database and a per-test upload folder; an app context stays
                  pushed for the whole test
client          - Flask test client
socket_client   - Socket.IO test client connected to ``app``
now             - fixed "current time" for the view-model calculations
sample_records  - a small agency: two clients, two properties, a commission,
                  an interaction and reminders in every bucket
"""

from datetime import datetime, timedelta

import pytest

from RealtyMVP.app import create_app
from RealtyMVP.config import TestConfig
from RealtyMVP.extensions import db, socketio
from RealtyMVP.services.entity_store import create_entity


@pytest.fixture
def app(tmp_path):
    """Fresh app and empty database per test."""
    config = type("LocalTestConfig", (TestConfig,), {"UPLOAD_FOLDER": str(tmp_path / "uploads")})
    app = create_app(config)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def socket_client(app):
    sc = socketio.test_client(app)
    sc.get_received()  # drop the connect handshake
    yield sc
    if sc.is_connected():
        sc.disconnect()


@pytest.fixture
def now() -> datetime:
    """Mid-month, mid-day so day/month boundaries stay clear of the tests."""
    return datetime(2026, 10, 19, 12, 0, 0)


@pytest.fixture
def sample_records(app):
    """Persisted demo records keyed by role."""
    current = datetime.now()

    seller = create_entity("client", {
        "name": "Maria Lopez", "email": "maria@lopezfamily.net", "phone": "555-0101",
        "client_type": "seller", "status": "active",
    })
    buyer = create_entity("client", {
        "name": "James Carter", "email": "james@cartermail.com", "phone": "555-0202",
        "client_type": "buyer", "status": "inactive", "budget_min": 200000, "budget_max": 500000,
    })

    loft = create_entity("property", {
        "title": "Sunny Loft", "address": "145 Bedford Ave", "city": "Brooklyn",
        "property_type": "condo", "listing_type": "sale", "status": "available",
        "price": 1250000, "latitude": 40.7177, "longitude": -73.9571,
        "owner_client_id": seller.id, "commission_rate": 3,
        "contract_end_date": (current + timedelta(days=10)).date(),
    })
    flat = create_entity("property", {
        "title": "Garden Flat", "address": "32 30th Ave", "city": "Queens",
        "property_type": "apartment", "listing_type": "rent", "status": "rented",
        "price": 3200,
    })

    commission = create_entity("commission", {
        "property_id": loft.id, "client_id": buyer.id, "deal_type": "sale",
        "deal_value": 100000, "commission_rate": 5, "status": "paid",
        "closing_date": current.date(),
    })
    interaction = create_entity("interaction", {
        "client_id": buyer.id, "property_id": loft.id, "type": "viewing",
        "title": "Viewed the loft", "outcome": "positive",
    })

    reminders = {
        "overdue": create_entity("reminder", {"title": "Call back", "due_date": current - timedelta(days=2)}),
        "upcoming": create_entity("reminder", {"title": "Open house", "due_date": current + timedelta(days=3)}),
        "completed": create_entity("reminder", {
            "title": "Send contract", "due_date": current + timedelta(days=1), "status": "completed",
        }),
    }

    return {
        "seller": seller,
        "buyer": buyer,
        "loft": loft,
        "flat": flat,
        "commission": commission,
        "interaction": interaction,
        "reminders": reminders,
    }
