# RealtyMVP/models/commission_models.py
from datetime import datetime
from RealtyMVP.extensions import db
from RealtyMVP.utils.formatters import isoformat_or_none
from RealtyMVP.services.portfolio_calcs import compute_commission_amount


# ====================================
# 💰 COMMISSION (closed deals)
# ====================================
class Commission(db.Model):
    __tablename__ = "commission"

    id = db.Column(db.Integer, primary_key=True)
    property_id = db.Column(db.Integer, index=True)  # Property.id, not enforced
    client_id = db.Column(db.Integer, index=True)    # Client.id, not enforced

    deal_type = db.Column(db.String(20), default="sale")  # sale / rental
    deal_value = db.Column(db.Float)
    commission_rate = db.Column(db.Float, default=3)      # percent
    commission_amount = db.Column(db.Float)
    status = db.Column(db.String(30), default="pending")  # pending / paid / partially_paid

    closing_date = db.Column(db.Date)
    payment_date = db.Column(db.Date)
    notes = db.Column(db.Text)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Commission {self.id} {self.status} {self.commission_amount}>"

    def recalculate_amount(self):
        """Derive commission_amount from deal_value and commission_rate.

        Only runs when both inputs are set; otherwise the stored amount is
        left as entered.
        """
        amount = compute_commission_amount(self.deal_value, self.commission_rate)
        if amount is not None:
            self.commission_amount = amount
        return self.commission_amount

    def to_dict(self):
        return {
            "id": self.id,
            "property_id": self.property_id,
            "client_id": self.client_id,
            "deal_type": self.deal_type,
            "deal_value": self.deal_value,
            "commission_rate": self.commission_rate,
            "commission_amount": self.commission_amount,
            "status": self.status,
            "closing_date": isoformat_or_none(self.closing_date),
            "payment_date": isoformat_or_none(self.payment_date),
            "notes": self.notes,
            "created_at": isoformat_or_none(self.created_at),
            "updated_at": isoformat_or_none(self.updated_at),
        }
