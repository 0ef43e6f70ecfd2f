from flask import Blueprint, render_template, request, redirect, url_for, flash, abort
from flask_login import login_required

from RealtyMVP.exceptions import EntityNotFoundError, RealtyMVPError
from RealtyMVP.forms import PropertyForm, property_form_object
from RealtyMVP.models.choices import PROPERTY_TYPES, PROPERTY_STATUSES, LISTING_TYPES, as_choices
from RealtyMVP.services.entity_store import (
    create_entity, delete_entity, discard_uploads, filter_entities, find_entity,
    get_entity, list_entities, update_entity, upload_file,
)
from RealtyMVP.services.portfolio_calcs import filter_properties, index_by_id
from RealtyMVP.utils.decorators import role_required
from RealtyMVP.utils.page_helpers import flash_failure, request_filters

property_bp = Blueprint("properties", __name__, url_prefix="/properties")


def _uploaded_images(form):
    urls = []
    try:
        for file in form.new_images.data or []:
            if getattr(file, "filename", ""):
                urls.append(upload_file(file, subdir="properties")["url"])
    except RealtyMVPError:
        discard_uploads(urls)
        raise
    return urls


def _save_property(form, save, existing_images=()):
    """Upload new images and call ``save(data)``.

    New uploads are removed again when saving fails; images the user
    unticked are removed once the save went through.
    """
    data = form.entity_data()
    data["portal_listings"] = form.portal_listing_data()
    unticked = set(form.remove_images.data or [])
    removed = [url for url in existing_images if url in unticked]
    new_urls = _uploaded_images(form)
    data["images"] = [url for url in existing_images if url not in removed] + new_urls

    try:
        result = save(data)
    except RealtyMVPError:
        discard_uploads(new_urls)
        raise
    discard_uploads(removed)
    return result


def _render_form(form, prop=None):
    return render_template(
        "properties/form.html",
        form=form,
        property=prop,
        title="Edit Property" if prop else "Add Property",
    )


# =========================================================
# 📋 PROPERTY LIST (search + filters)
# =========================================================
@property_bp.route("/")
@login_required
def index():
    search = request.args.get("search", "")
    filters = request_filters("property_type", "status", "listing_type")

    properties = list_entities("property", sort="-created_at")
    filtered = filter_properties(properties, search=search, **filters)

    return render_template(
        "properties/index.html",
        properties=filtered,
        total=len(properties),
        search=search,
        filters=filters,
        type_choices=as_choices(PROPERTY_TYPES, "All Types"),
        status_choices=as_choices(PROPERTY_STATUSES, "All Statuses"),
        listing_choices=as_choices(LISTING_TYPES, "All"),
        query_keys=["properties"],
        title="Properties",
    )


# =========================================================
# ➕ ADD PROPERTY
# =========================================================
@property_bp.route("/new", methods=["GET", "POST"])
@role_required("admin", "agent")
def new():
    clients = list_entities("client", sort="name")
    form = PropertyForm().set_reference_choices(clients=clients)
    form.set_image_choices([])

    if form.validate_on_submit():
        try:
            prop = _save_property(form, lambda data: create_entity("property", data))
        except RealtyMVPError as e:
            flash_failure("save the property", e)
        else:
            flash("✅ Property added successfully!", "success")
            return redirect(url_for("properties.view", property_id=prop.id))

    return _render_form(form)


# =========================================================
# 🧾 VIEW PROPERTY
# =========================================================
@property_bp.route("/<int:property_id>")
@login_required
def view(property_id):
    try:
        prop = get_entity("property", property_id)
    except EntityNotFoundError:
        abort(404)

    interactions = filter_entities("interaction", {"property_id": prop.id}, sort="-created_at")
    clients = list_entities("client", sort="name")

    return render_template(
        "properties/view.html",
        property=prop,
        owner=find_entity("client", prop.owner_client_id),
        interactions=interactions,
        clients_by_id=index_by_id(clients),
        query_keys=["properties", "interactions"],
        title=prop.title,
    )


# =========================================================
# ✏️ EDIT PROPERTY
# =========================================================
@property_bp.route("/<int:property_id>/edit", methods=["GET", "POST"])
@role_required("admin", "agent")
def edit(property_id):
    try:
        prop = get_entity("property", property_id)
    except EntityNotFoundError:
        abort(404)

    clients = list_entities("client", sort="name")
    form = PropertyForm(obj=property_form_object(prop)).set_reference_choices(clients=clients)
    form.set_image_choices(prop.images)

    if form.validate_on_submit():
        try:
            _save_property(form, lambda data: update_entity("property", prop.id, data), prop.images or [])
        except RealtyMVPError as e:
            flash_failure("update the property", e)
        else:
            flash("✅ Property updated successfully.", "success")
            return redirect(url_for("properties.view", property_id=prop.id))
    elif request.method == "GET" and not form.portal_listings.entries[-1].form.is_blank():
        form.portal_listings.append_entry()

    return _render_form(form, prop)


# =========================================================
# 🗑️ DELETE PROPERTY
# =========================================================
@property_bp.route("/<int:property_id>/delete", methods=["POST"])
@role_required("admin", "agent")
def delete(property_id):
    try:
        delete_entity("property", property_id)
    except EntityNotFoundError:
        abort(404)
    except RealtyMVPError as e:
        flash_failure("delete the property", e)
        return redirect(url_for("properties.view", property_id=property_id))

    flash("🗑️ Property deleted.", "info")
    return redirect(url_for("properties.index"))
