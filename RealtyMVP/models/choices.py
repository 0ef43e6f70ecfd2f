# RealtyMVP/models/choices.py
# Allowed values for the categorical columns. Forms, filters and the seed
# script all read from here.

# ====================================
# 🏠 PROPERTY
# ====================================
PROPERTY_TYPES = ["apartment", "house", "condo", "townhouse", "land", "commercial", "other"]
LISTING_TYPES = ["sale", "rent"]
PROPERTY_STATUSES = ["available", "under_contract", "sold", "rented", "off_market"]

FEATURE_OPTIONS = [
    "Pool", "Garage", "Garden", "Balcony", "Fireplace", "Central AC",
    "Hardwood Floors", "Updated Kitchen", "Smart Home", "Security System",
    "Gym", "Parking", "Elevator", "Storage", "Pet Friendly",
]

# ====================================
# 👥 CLIENT
# ====================================
CLIENT_TYPES = ["buyer", "seller", "both"]
CLIENT_STATUSES = ["active", "inactive", "closed"]
CLIENT_SOURCES = ["referral", "website", "portal", "social_media", "cold_call", "other"]
PREFERRED_PROPERTY_TYPES = ["Apartment", "House", "Condo", "Townhouse", "Land", "Commercial"]

# ====================================
# 💰 COMMISSION
# ====================================
DEAL_TYPES = ["sale", "rental"]
COMMISSION_STATUSES = ["pending", "paid", "partially_paid"]
COMMISSION_PERIODS = ["all", "month", "year"]

# ====================================
# 📞 INTERACTION
# ====================================
INTERACTION_TYPES = [
    ("call", "Phone Call"),
    ("email", "Email"),
    ("viewing", "Property Viewing"),
    ("meeting", "Meeting"),
    ("note", "Note"),
    ("offer", "Offer"),
    ("contract", "Contract"),
]
INTERACTION_OUTCOMES = [
    ("positive", "Positive"),
    ("neutral", "Neutral"),
    ("negative", "Negative"),
    ("pending", "Pending"),
]

# ====================================
# ⏰ REMINDER
# ====================================
REMINDER_TYPES = [
    ("contract_renewal", "Contract Renewal"),
    ("viewing", "Property Viewing"),
    ("follow_up", "Follow Up"),
    ("payment", "Payment Due"),
    ("custom", "Custom"),
]
REMINDER_PRIORITIES = ["low", "medium", "high"]
REMINDER_STATUSES = ["pending", "completed", "dismissed"]


def humanize(value):
    """'under_contract' -> 'Under contract'."""
    if not value:
        return ""
    text = str(value).replace("_", " ")
    return text[:1].upper() + text[1:]


def as_choices(values, all_label=None):
    """Build WTForms/select choices from plain values, optionally with an 'all' entry."""
    choices = [(v, humanize(v)) for v in values]
    if all_label:
        choices.insert(0, ("all", all_label))
    return choices
