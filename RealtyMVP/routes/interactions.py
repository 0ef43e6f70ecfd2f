from flask import Blueprint, render_template, request, flash, abort
from flask_login import login_required

from RealtyMVP.exceptions import EntityNotFoundError, RealtyMVPError
from RealtyMVP.forms import InteractionForm, form_object
from RealtyMVP.services.entity_store import create_entity, delete_entity, get_entity, update_entity
from RealtyMVP.utils.decorators import role_required
from RealtyMVP.utils.page_helpers import flash_failure, load_references, safe_next

interaction_bp = Blueprint("interactions", __name__, url_prefix="/interactions")


def _render_form(form, interaction=None):
    return render_template(
        "interactions/form.html",
        form=form,
        interaction=interaction,
        next_url=request.values.get("next", ""),
        title="Edit Interaction" if interaction else "Log Interaction",
    )


# =========================================================
# 📞 LOG INTERACTION (optionally pre-linked to a client/property)
# =========================================================
@interaction_bp.route("/new", methods=["GET", "POST"])
@role_required("admin", "agent")
def new():
    clients, properties = load_references()
    form = InteractionForm().set_reference_choices(clients=clients, properties=properties)

    if request.method == "GET":
        form.client_id.data = request.args.get("client_id", "")
        form.property_id.data = request.args.get("property_id", "")

    if form.validate_on_submit():
        try:
            create_entity("interaction", form.entity_data())
        except RealtyMVPError as e:
            flash_failure("log the interaction", e)
        else:
            flash("✅ Interaction logged.", "success")
            return safe_next("dashboard.index")

    return _render_form(form)


# =========================================================
# ✏️ EDIT INTERACTION
# =========================================================
@interaction_bp.route("/<int:interaction_id>/edit", methods=["GET", "POST"])
@role_required("admin", "agent")
def edit(interaction_id):
    try:
        interaction = get_entity("interaction", interaction_id)
    except EntityNotFoundError:
        abort(404)

    clients, properties = load_references()
    form = InteractionForm(obj=form_object(interaction)).set_reference_choices(
        clients=clients, properties=properties
    )

    if form.validate_on_submit():
        try:
            update_entity("interaction", interaction.id, form.entity_data())
        except RealtyMVPError as e:
            flash_failure("update the interaction", e)
        else:
            flash("✅ Interaction updated.", "success")
            return safe_next("dashboard.index")

    return _render_form(form, interaction)


# =========================================================
# 🗑️ DELETE INTERACTION
# =========================================================
@interaction_bp.route("/<int:interaction_id>/delete", methods=["POST"])
@role_required("admin", "agent")
def delete(interaction_id):
    try:
        delete_entity("interaction", interaction_id)
    except EntityNotFoundError:
        abort(404)
    except RealtyMVPError as e:
        flash_failure("delete the interaction", e)
    else:
        flash("🗑️ Interaction deleted.", "info")
    return safe_next("dashboard.index")
