# RealtyMVP/models/client_models.py
from datetime import datetime
from RealtyMVP.extensions import db
from RealtyMVP.utils.formatters import isoformat_or_none


# ====================================
# 👥 CLIENT (buyers & sellers)
# ====================================
class Client(db.Model):
    __tablename__ = "client"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(120))
    phone = db.Column(db.String(50))

    client_type = db.Column(db.String(20), default="buyer")   # buyer / seller / both
    status = db.Column(db.String(20), default="active")       # active / inactive / closed
    source = db.Column(db.String(50))                         # referral, website, portal...

    # Search profile
    budget_min = db.Column(db.Float)
    budget_max = db.Column(db.Float)
    preferred_locations = db.Column(db.JSON, default=list)
    preferred_property_types = db.Column(db.JSON, default=list)

    notes = db.Column(db.Text)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Client {self.name} - {self.client_type}>"

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "client_type": self.client_type,
            "status": self.status,
            "source": self.source,
            "budget_min": self.budget_min,
            "budget_max": self.budget_max,
            "preferred_locations": list(self.preferred_locations or []),
            "preferred_property_types": list(self.preferred_property_types or []),
            "notes": self.notes,
            "created_at": isoformat_or_none(self.created_at),
            "updated_at": isoformat_or_none(self.updated_at),
        }
