"""
JSON API over the entity store.

    GET    /api/<kind>?sort=-created_at&limit=10&status=available
    GET    /api/<kind>/<id>
    POST   /api/<kind>
    PATCH  /api/<kind>/<id>
    DELETE /api/<kind>/<id>
    POST   /api/uploads            (multipart, field "file")

<kind> accepts the singular kind or its plural query key.
"""

import logging

from flask import Blueprint, jsonify, request
from flask_login import login_required

from RealtyMVP.exceptions import (
    EntityNotFoundError,
    EntityStoreError,
    InvalidQueryError,
    RealtyMVPError,
    UnknownEntityKindError,
    UploadError,
)
from RealtyMVP.services.entity_store import (
    create_entity, delete_entity, filter_entities, get_entity, list_entities,
    resolve_kind, update_entity, upload_file,
)
from RealtyMVP.utils.decorators import role_required

api_bp = Blueprint("api", __name__, url_prefix="/api")

logger = logging.getLogger(__name__)

RESERVED_PARAMS = {"sort", "limit"}

ERROR_STATUS = (
    (UnknownEntityKindError, 404),
    (EntityNotFoundError, 404),
    (InvalidQueryError, 400),
    (UploadError, 400),
    (EntityStoreError, 500),
)


@api_bp.errorhandler(RealtyMVPError)
def handle_entity_error(e):
    status = next((code for cls, code in ERROR_STATUS if isinstance(e, cls)), 500)
    if status >= 500:
        logger.error("API failure on %s: %s", request.path, e)
    return jsonify({"error": str(e), "type": e.__class__.__name__}), status


def _payload():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidQueryError("Request body must be a JSON object.")
    return data


def _limit():
    raw = request.args.get("limit")
    if raw in (None, ""):
        return None
    try:
        return max(int(raw), 0)
    except ValueError as e:
        raise InvalidQueryError(f"Invalid limit: {raw!r}") from e


# ===============================
# 📋 Collection
# ===============================
@api_bp.route("/<kind>", methods=["GET"])
@login_required
def list_records(kind):
    kind = resolve_kind(kind)
    sort = request.args.get("sort") or None
    criteria = {k: v for k, v in request.args.items() if k not in RESERVED_PARAMS}

    if criteria:
        records = filter_entities(kind, criteria, sort=sort)
        limit = _limit()
        if limit is not None:
            records = records[:limit]
    else:
        records = list_entities(kind, sort=sort, limit=_limit())

    return jsonify([r.to_dict() for r in records])


@api_bp.route("/<kind>", methods=["POST"])
@role_required("admin", "agent")
def create_record(kind):
    record = create_entity(kind, _payload())
    return jsonify(record.to_dict()), 201


# ===============================
# 🧾 Single record
# ===============================
@api_bp.route("/<kind>/<int:entity_id>", methods=["GET"])
@login_required
def get_record(kind, entity_id):
    return jsonify(get_entity(kind, entity_id).to_dict())


@api_bp.route("/<kind>/<int:entity_id>", methods=["PATCH"])
@role_required("admin", "agent")
def update_record(kind, entity_id):
    update_entity(kind, entity_id, _payload())
    return jsonify(get_entity(kind, entity_id).to_dict())


@api_bp.route("/<kind>/<int:entity_id>", methods=["DELETE"])
@role_required("admin", "agent")
def delete_record(kind, entity_id):
    delete_entity(kind, entity_id)
    return "", 204


# ===============================
# 📎 Uploads
# ===============================
@api_bp.route("/uploads", methods=["POST"])
@role_required("admin", "agent")
def upload():
    file = request.files.get("file")
    if file is None:
        raise UploadError("No file provided (expected form field 'file').")
    result = upload_file(file, subdir=request.form.get("subdir") or "uploads")
    return jsonify(result), 201
