# RealtyMVP/models/crm_models.py
from datetime import datetime
from RealtyMVP.extensions import db
from RealtyMVP.utils.formatters import isoformat_or_none


# ====================================
# 📞 INTERACTION (activity log)
# ====================================
class Interaction(db.Model):
    __tablename__ = "interaction"

    id = db.Column(db.Integer, primary_key=True)
    client_id = db.Column(db.Integer, index=True)
    property_id = db.Column(db.Integer, index=True, nullable=True)

    type = db.Column(db.String(30), default="note")  # call, email, viewing, meeting, note, offer, contract
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    date = db.Column(db.DateTime, default=datetime.now)
    outcome = db.Column(db.String(20), default="pending")

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Interaction {self.type} - {self.title}>"

    @property
    def occurred_at(self):
        return self.date or self.created_at

    def to_dict(self):
        return {
            "id": self.id,
            "client_id": self.client_id,
            "property_id": self.property_id,
            "type": self.type,
            "title": self.title,
            "description": self.description,
            "date": isoformat_or_none(self.date),
            "outcome": self.outcome,
            "created_at": isoformat_or_none(self.created_at),
            "updated_at": isoformat_or_none(self.updated_at),
        }


# ====================================
# ⏰ REMINDER
# ====================================
class Reminder(db.Model):
    __tablename__ = "reminder"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    due_date = db.Column(db.DateTime, nullable=False)
    reminder_type = db.Column(db.String(30), default="custom")
    priority = db.Column(db.String(10), default="medium")   # low / medium / high
    status = db.Column(db.String(20), default="pending")    # pending / completed / dismissed

    client_id = db.Column(db.Integer, index=True, nullable=True)
    property_id = db.Column(db.Integer, index=True, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Reminder {self.title} due {self.due_date} ({self.status})>"

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "due_date": isoformat_or_none(self.due_date),
            "reminder_type": self.reminder_type,
            "priority": self.priority,
            "status": self.status,
            "client_id": self.client_id,
            "property_id": self.property_id,
            "created_at": isoformat_or_none(self.created_at),
            "updated_at": isoformat_or_none(self.updated_at),
        }
