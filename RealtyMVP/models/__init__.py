# RealtyMVP/models/__init__.py
from RealtyMVP.extensions import db

# ======================================================
# 🧱 Model Imports
# ======================================================

# 🧍 User & Authentication
from RealtyMVP.models.user_model import User

# 🏠 Listings
from RealtyMVP.models.property import Property

# 👥 Clients
from RealtyMVP.models.client_models import Client

# 💰 Commissions
from RealtyMVP.models.commission_models import Commission

# 💬 CRM activity (interactions, reminders)
from RealtyMVP.models.crm_models import Interaction, Reminder

# ======================================================
# 🧩 SQLAlchemy Export (for Migrate / Shell)
# ======================================================

__all__ = [
    "db",
    "User",
    "Property",
    "Client",
    "Commission",
    "Interaction",
    "Reminder",
]
