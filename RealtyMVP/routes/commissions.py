from datetime import datetime

from flask import Blueprint, render_template, request, redirect, url_for, flash, abort
from flask_login import login_required

from RealtyMVP.exceptions import EntityNotFoundError, RealtyMVPError
from RealtyMVP.forms import CommissionForm, form_object
from RealtyMVP.models.choices import COMMISSION_STATUSES, COMMISSION_PERIODS, as_choices
from RealtyMVP.services.entity_store import (
    create_entity, delete_entity, find_entity, get_entity, list_entities, update_entity,
)
from RealtyMVP.services.portfolio_calcs import (
    commission_defaults_from_property, commission_totals, filter_commissions, index_by_id,
)
from RealtyMVP.utils.decorators import role_required
from RealtyMVP.utils.page_helpers import flash_failure, load_references, request_filters

commission_bp = Blueprint("commissions", __name__, url_prefix="/commissions")


def _prefill(form, defaults):
    for name, value in defaults.items():
        if name in form:
            form[name].data = str(value) if name.endswith("_id") else value


def _render_form(form, commission=None):
    return render_template(
        "commissions/form.html",
        form=form,
        commission=commission,
        title="Edit Commission" if commission else "Add Commission",
    )


# =========================================================
# 💰 COMMISSION TRACKER
# =========================================================
@commission_bp.route("/")
@login_required
def index():
    now = datetime.now()
    filters = request_filters("status", "period")

    commissions = list_entities("commission", sort="-created_at")
    clients, properties = load_references()

    return render_template(
        "commissions/index.html",
        commissions=filter_commissions(commissions, now=now, **filters),
        totals=commission_totals(commissions, now),
        filters=filters,
        status_choices=as_choices(COMMISSION_STATUSES, "All Statuses"),
        period_choices=[(p, "All Time" if p == "all" else f"This {p.title()}") for p in COMMISSION_PERIODS],
        clients_by_id=index_by_id(clients),
        properties_by_id=index_by_id(properties),
        query_keys=["commissions"],
        title="Commissions",
    )


# =========================================================
# ➕ ADD COMMISSION (?property_id= pre-fills the deal)
# =========================================================
@commission_bp.route("/new", methods=["GET", "POST"])
@role_required("admin", "agent")
def new():
    clients, properties = load_references()
    form = CommissionForm().set_reference_choices(clients=clients, properties=properties)

    if request.method == "GET" and request.args.get("property_id"):
        prop = find_entity("property", request.args.get("property_id"))
        if prop is not None:
            form.property_id.data = str(prop.id)
            _prefill(form, commission_defaults_from_property(prop))

    if form.validate_on_submit():
        try:
            create_entity("commission", form.entity_data())
        except RealtyMVPError as e:
            flash_failure("save the commission", e)
        else:
            flash("✅ Commission recorded.", "success")
            return redirect(url_for("commissions.index"))

    return _render_form(form)


# =========================================================
# ✏️ EDIT COMMISSION
# =========================================================
@commission_bp.route("/<int:commission_id>/edit", methods=["GET", "POST"])
@role_required("admin", "agent")
def edit(commission_id):
    try:
        commission = get_entity("commission", commission_id)
    except EntityNotFoundError:
        abort(404)

    clients, properties = load_references()
    form = CommissionForm(obj=form_object(commission)).set_reference_choices(
        clients=clients, properties=properties
    )

    if form.validate_on_submit():
        try:
            update_entity("commission", commission.id, form.entity_data())
        except RealtyMVPError as e:
            flash_failure("update the commission", e)
        else:
            flash("✅ Commission updated.", "success")
            return redirect(url_for("commissions.index"))

    return _render_form(form, commission)


# =========================================================
# 🗑️ DELETE COMMISSION
# =========================================================
@commission_bp.route("/<int:commission_id>/delete", methods=["POST"])
@role_required("admin", "agent")
def delete(commission_id):
    try:
        delete_entity("commission", commission_id)
    except EntityNotFoundError:
        abort(404)
    except RealtyMVPError as e:
        flash_failure("delete the commission", e)
    else:
        flash("🗑️ Commission deleted.", "info")
    return redirect(url_for("commissions.index"))
