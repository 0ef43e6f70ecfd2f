from flask import Blueprint, render_template, request, redirect, url_for, flash, abort
from flask_login import login_required

from RealtyMVP.exceptions import EntityNotFoundError, RealtyMVPError
from RealtyMVP.forms import ClientForm, client_form_object
from RealtyMVP.models.choices import CLIENT_TYPES, CLIENT_STATUSES, as_choices
from RealtyMVP.services.entity_store import (
    create_entity, delete_entity, filter_entities, get_entity, list_entities, update_entity,
)
from RealtyMVP.services.portfolio_calcs import filter_clients, index_by_id
from RealtyMVP.utils.decorators import role_required
from RealtyMVP.utils.page_helpers import flash_failure, request_filters

client_bp = Blueprint("clients", __name__, url_prefix="/clients")


# =========================================================
# 👥 CLIENT LIST (search + filters)
# =========================================================
@client_bp.route("/")
@login_required
def index():
    search = request.args.get("search", "")
    filters = request_filters("client_type", "status")

    clients = list_entities("client", sort="-created_at")

    return render_template(
        "clients/index.html",
        clients=filter_clients(clients, search=search, **filters),
        total=len(clients),
        search=search,
        filters=filters,
        type_choices=as_choices(CLIENT_TYPES, "All"),
        status_choices=as_choices(CLIENT_STATUSES, "All Statuses"),
        query_keys=["clients"],
        title="Clients",
    )


# =========================================================
# ➕ ADD CLIENT
# =========================================================
@client_bp.route("/new", methods=["GET", "POST"])
@role_required("admin", "agent")
def new():
    form = ClientForm()
    if form.validate_on_submit():
        try:
            client = create_entity("client", form.entity_data())
        except RealtyMVPError as e:
            flash_failure("save the client", e)
        else:
            flash("✅ Client added successfully!", "success")
            return redirect(url_for("clients.view", client_id=client.id))

    return render_template("clients/form.html", form=form, client=None, title="Add Client")


# =========================================================
# 🧾 CLIENT DETAILS
# =========================================================
@client_bp.route("/<int:client_id>")
@login_required
def view(client_id):
    try:
        client = get_entity("client", client_id)
    except EntityNotFoundError:
        abort(404)

    owned = filter_entities("property", {"owner_client_id": client.id}, sort="-created_at")
    interactions = filter_entities("interaction", {"client_id": client.id}, sort="-created_at")
    properties = list_entities("property", sort="title")

    return render_template(
        "clients/view.html",
        client=client,
        owned_properties=owned,
        interactions=interactions,
        properties_by_id=index_by_id(properties),
        query_keys=["clients", "properties", "interactions"],
        title=client.name,
    )


# =========================================================
# ✏️ EDIT CLIENT
# =========================================================
@client_bp.route("/<int:client_id>/edit", methods=["GET", "POST"])
@role_required("admin", "agent")
def edit(client_id):
    try:
        client = get_entity("client", client_id)
    except EntityNotFoundError:
        abort(404)

    form = ClientForm(obj=client_form_object(client))
    if form.validate_on_submit():
        try:
            update_entity("client", client.id, form.entity_data())
        except RealtyMVPError as e:
            flash_failure("update the client", e)
        else:
            flash("✅ Client updated successfully.", "success")
            return redirect(url_for("clients.view", client_id=client.id))

    return render_template("clients/form.html", form=form, client=client, title="Edit Client")


# =========================================================
# 🗑️ DELETE CLIENT
# =========================================================
@client_bp.route("/<int:client_id>/delete", methods=["POST"])
@role_required("admin", "agent")
def delete(client_id):
    try:
        delete_entity("client", client_id)
    except EntityNotFoundError:
        abort(404)
    except RealtyMVPError as e:
        flash_failure("delete the client", e)
        return redirect(url_for("clients.view", client_id=client_id))

    flash("🗑️ Client deleted.", "info")
    return redirect(url_for("clients.index"))
