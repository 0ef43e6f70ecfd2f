# RealtyMVP/models/property.py
from RealtyMVP.extensions import db
from RealtyMVP.utils.formatters import isoformat_or_none
from datetime import datetime


# ====================================
# 🏠 PROPERTY MODEL
# ====================================
class Property(db.Model):
    __tablename__ = "property"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)

    # Location
    address = db.Column(db.String(255), nullable=False)
    city = db.Column(db.String(100))
    zip_code = db.Column(db.String(20))
    latitude = db.Column(db.Float)
    longitude = db.Column(db.Float)

    # Listing
    property_type = db.Column(db.String(30), default="house")
    listing_type = db.Column(db.String(10), default="sale")   # sale / rent
    status = db.Column(db.String(30), default="available")
    price = db.Column(db.Float, nullable=False)

    # Facts
    bedrooms = db.Column(db.Integer)
    bathrooms = db.Column(db.Float)
    area_sqft = db.Column(db.Float)
    features = db.Column(db.JSON, default=list)
    images = db.Column(db.JSON, default=list)

    # Agency contract
    owner_client_id = db.Column(db.Integer, index=True)  # Client.id, not enforced
    commission_rate = db.Column(db.Float, default=3)
    contract_end_date = db.Column(db.Date)
    portal_listings = db.Column(db.JSON, default=list)  # [{portal_name, listing_url, listed_date}]

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Property {self.title} ({self.status})>"

    @property
    def has_location(self):
        return self.latitude is not None and self.longitude is not None

    @property
    def cover_image(self):
        return (self.images or [None])[0]

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "address": self.address,
            "city": self.city,
            "zip_code": self.zip_code,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "property_type": self.property_type,
            "listing_type": self.listing_type,
            "status": self.status,
            "price": self.price,
            "bedrooms": self.bedrooms,
            "bathrooms": self.bathrooms,
            "area_sqft": self.area_sqft,
            "features": list(self.features or []),
            "images": list(self.images or []),
            "owner_client_id": self.owner_client_id,
            "commission_rate": self.commission_rate,
            "contract_end_date": isoformat_or_none(self.contract_end_date),
            "portal_listings": list(self.portal_listings or []),
            "created_at": isoformat_or_none(self.created_at),
            "updated_at": isoformat_or_none(self.updated_at),
        }
