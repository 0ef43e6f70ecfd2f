# RealtyMVP/seed_demo.py
import logging
from datetime import datetime, timedelta

from RealtyMVP.extensions import db
from RealtyMVP.models import User, Property
from RealtyMVP.services.entity_store import create_entity

logger = logging.getLogger(__name__)

DEFAULT_USERS = [
    {"first_name": "Admin", "last_name": "User", "email": "admin@realtymvp.com", "password": "admin123", "role": "admin"},
    {"first_name": "Agent", "last_name": "User", "email": "agent@realtymvp.com", "password": "agent123", "role": "agent"},
    {"first_name": "Viewer", "last_name": "User", "email": "viewer@realtymvp.com", "password": "viewer123", "role": "viewer"},
]


# ----------------------------
# 🌱 Seed Default Users
# ----------------------------
def seed_users():
    if User.query.first():
        logger.info("Users already exist, skipping user seed.")
        return []

    created = []
    for u in DEFAULT_USERS:
        user = User(first_name=u["first_name"], last_name=u["last_name"], email=u["email"], role=u["role"])
        user.set_password(u["password"])
        db.session.add(user)
        created.append(user)

    db.session.commit()
    for u in DEFAULT_USERS:
        logger.info("Seeded login %-8s | %s | %s", u["role"], u["email"], u["password"])
    return created


# ----------------------------
# 🏡 Seed Demo Agency Data
# ----------------------------
def seed_records(now=None):
    if Property.query.first():
        logger.info("Properties already exist, skipping demo records.")
        return {}

    now = now or datetime.now()
    today = now.date()

    maria = create_entity("client", {
        "name": "Maria Lopez", "email": "maria.lopez@gmail.com", "phone": "555-201-3344",
        "client_type": "seller", "status": "active", "source": "referral",
    })
    james = create_entity("client", {
        "name": "James Carter", "email": "jcarter@outlook.com", "phone": "555-887-1200",
        "client_type": "buyer", "status": "active", "source": "website",
        "budget_min": 400000, "budget_max": 750000,
        "preferred_locations": ["Brooklyn", "Queens"],
        "preferred_property_types": ["Condo", "Townhouse"],
    })

    loft = create_entity("property", {
        "title": "Sunny Loft in Williamsburg", "address": "145 Bedford Ave", "city": "Brooklyn",
        "zip_code": "11211", "latitude": 40.7177, "longitude": -73.9571,
        "property_type": "condo", "listing_type": "sale", "status": "available",
        "price": 1250000, "bedrooms": 2, "bathrooms": 2, "area_sqft": 1100,
        "features": ["Balcony", "Elevator", "Hardwood Floors"],
        "owner_client_id": maria.id, "commission_rate": 3,
        "contract_end_date": today + timedelta(days=21),
        "portal_listings": [{"portal_name": "Zillow", "listing_url": "https://www.zillow.com/", "listed_date": today.isoformat()}],
    })
    rental = create_entity("property", {
        "title": "Garden Apartment", "address": "32-10 30th Ave", "city": "Queens",
        "zip_code": "11102", "latitude": 40.7663, "longitude": -73.9213,
        "property_type": "apartment", "listing_type": "rent", "status": "rented",
        "price": 3200, "bedrooms": 1, "bathrooms": 1, "area_sqft": 700,
        "features": ["Garden", "Pet Friendly"], "commission_rate": 8,
    })

    deal = create_entity("commission", {
        "property_id": rental.id, "client_id": james.id, "deal_type": "rental",
        "deal_value": 38400, "commission_rate": 8, "status": "paid",
        "closing_date": today, "payment_date": today,
    })

    create_entity("interaction", {
        "client_id": james.id, "property_id": loft.id, "type": "viewing",
        "title": "Viewed the loft", "description": "Liked the light, asked about HOA fees.",
        "date": now - timedelta(days=1), "outcome": "positive",
    })
    create_entity("reminder", {
        "title": "Follow up with James on offer", "due_date": now + timedelta(hours=2),
        "reminder_type": "follow_up", "priority": "high", "client_id": james.id, "property_id": loft.id,
    })
    create_entity("reminder", {
        "title": "Renew Williamsburg listing agreement", "due_date": now + timedelta(days=14),
        "reminder_type": "contract_renewal", "priority": "medium",
        "client_id": maria.id, "property_id": loft.id,
    })

    logger.info("Seeded demo agency data")
    return {"clients": [maria, james], "properties": [loft, rental], "commissions": [deal]}


def seed_demo(app):
    with app.app_context():
        db.create_all()
        users = seed_users()
        records = seed_records()
    return users, records


if __name__ == "__main__":
    from RealtyMVP.app import create_app

    seed_demo(create_app())
