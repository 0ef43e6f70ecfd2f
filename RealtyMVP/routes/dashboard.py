from datetime import datetime

from flask import Blueprint, render_template, current_app
from flask_login import login_required

from RealtyMVP.forms import ReminderForm
from RealtyMVP.services.entity_store import list_entities
from RealtyMVP.services.portfolio_calcs import (
    actionable_reminders, dashboard_stats, index_by_id,
)

dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/dashboard")


# =========================================================
# 📊 AGENCY DASHBOARD
# =========================================================
@dashboard_bp.route("/")
@login_required
def index():
    cfg = current_app.config
    now = datetime.now()

    properties = list_entities("property", sort="-created_at")
    clients = list_entities("client", sort="-created_at")
    reminders = list_entities("reminder", sort="due_date")
    commissions = list_entities("commission", sort="-created_at")
    interactions = list_entities("interaction", sort="-created_at", limit=cfg["RECENT_ACTIVITY_LIMIT"])

    stats = dashboard_stats(
        properties, clients, commissions, reminders,
        now=now, alert_days=cfg["CONTRACT_ALERT_DAYS"],
    )
    upcoming = actionable_reminders(reminders, now=now, limit=cfg["DASHBOARD_REMINDER_LIMIT"])

    reminder_form = ReminderForm().set_reference_choices(clients=clients, properties=properties)

    return render_template(
        "dashboard/index.html",
        stats=stats,
        upcoming_reminders=upcoming,
        interactions=interactions,
        recent_properties=properties[:cfg["RECENT_LISTINGS_LIMIT"]],
        clients_by_id=index_by_id(clients),
        properties_by_id=index_by_id(properties),
        reminder_form=reminder_form,
        now=now,
        query_keys=["properties", "clients", "reminders", "interactions", "commissions"],
        title="Dashboard",
    )
