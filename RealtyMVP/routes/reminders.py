from datetime import datetime

from flask import Blueprint, render_template, request, redirect, url_for, flash, abort
from flask_login import login_required

from RealtyMVP.exceptions import EntityNotFoundError, RealtyMVPError
from RealtyMVP.forms import ReminderForm, form_object
from RealtyMVP.models.choices import REMINDER_STATUSES
from RealtyMVP.services.entity_store import (
    create_entity, delete_entity, get_entity, list_entities, update_entity,
)
from RealtyMVP.services.portfolio_calcs import (
    bucket_reminders, filter_reminders, index_by_id, reminder_stats,
)
from RealtyMVP.utils.decorators import role_required
from RealtyMVP.utils.page_helpers import flash_failure, load_references, safe_next

reminder_bp = Blueprint("reminders", __name__, url_prefix="/reminders")

STATUS_TABS = REMINDER_STATUSES + ["all"]


def _render_form(form, reminder=None):
    return render_template(
        "reminders/form.html",
        form=form,
        reminder=reminder,
        next_url=request.values.get("next", ""),
        title="Edit Reminder" if reminder else "New Reminder",
    )


# =========================================================
# ⏰ REMINDERS (status tabs + overdue/today/upcoming)
# =========================================================
@reminder_bp.route("/")
@login_required
def index():
    now = datetime.now()
    status = request.args.get("status", "pending")
    if status not in STATUS_TABS:
        status = "pending"

    reminders = list_entities("reminder", sort="due_date")
    clients, properties = load_references()

    return render_template(
        "reminders/index.html",
        status=status,
        status_tabs=STATUS_TABS,
        reminders=filter_reminders(reminders, status),
        buckets=bucket_reminders(reminders, now),
        stats=reminder_stats(reminders, now),
        clients_by_id=index_by_id(clients),
        properties_by_id=index_by_id(properties),
        now=now,
        query_keys=["reminders"],
        title="Reminders",
    )


# =========================================================
# ➕ NEW REMINDER
# =========================================================
@reminder_bp.route("/new", methods=["GET", "POST"])
@role_required("admin", "agent")
def new():
    clients, properties = load_references()
    form = ReminderForm().set_reference_choices(clients=clients, properties=properties)

    if request.method == "GET":
        form.client_id.data = request.args.get("client_id", "")
        form.property_id.data = request.args.get("property_id", "")

    if form.validate_on_submit():
        try:
            create_entity("reminder", form.entity_data())
        except RealtyMVPError as e:
            flash_failure("create the reminder", e)
        else:
            flash("✅ Reminder created.", "success")
            return safe_next("reminders.index")

    return _render_form(form)


# =========================================================
# ✏️ EDIT REMINDER
# =========================================================
@reminder_bp.route("/<int:reminder_id>/edit", methods=["GET", "POST"])
@role_required("admin", "agent")
def edit(reminder_id):
    try:
        reminder = get_entity("reminder", reminder_id)
    except EntityNotFoundError:
        abort(404)

    clients, properties = load_references()
    form = ReminderForm(obj=form_object(reminder)).set_reference_choices(
        clients=clients, properties=properties
    )

    if form.validate_on_submit():
        try:
            update_entity("reminder", reminder.id, form.entity_data())
        except RealtyMVPError as e:
            flash_failure("update the reminder", e)
        else:
            flash("✅ Reminder updated.", "success")
            return safe_next("reminders.index")

    return _render_form(form, reminder)


# =========================================================
# ✔️ COMPLETE / DISMISS
# =========================================================
def _set_status(reminder_id, status, message):
    try:
        update_entity("reminder", reminder_id, {"status": status})
    except EntityNotFoundError:
        abort(404)
    except RealtyMVPError as e:
        flash_failure("update the reminder", e)
    else:
        flash(message, "success")
    return safe_next("reminders.index")


@reminder_bp.route("/<int:reminder_id>/complete", methods=["POST"])
@role_required("admin", "agent")
def complete(reminder_id):
    return _set_status(reminder_id, "completed", "✅ Reminder completed.")


@reminder_bp.route("/<int:reminder_id>/dismiss", methods=["POST"])
@role_required("admin", "agent")
def dismiss(reminder_id):
    return _set_status(reminder_id, "dismissed", "Reminder dismissed.")


# =========================================================
# 🗑️ DELETE REMINDER
# =========================================================
@reminder_bp.route("/<int:reminder_id>/delete", methods=["POST"])
@role_required("admin", "agent")
def delete(reminder_id):
    try:
        delete_entity("reminder", reminder_id)
    except EntityNotFoundError:
        abort(404)
    except RealtyMVPError as e:
        flash_failure("delete the reminder", e)
    else:
        flash("🗑️ Reminder deleted.", "info")
    return redirect(url_for("reminders.index"))
