"""
Entity Store
------------
The data-access layer every page and the JSON API go through.

    list_entities(kind, sort, limit)      -> ordered records
    filter_entities(kind, criteria, sort) -> ordered records matching field equality
    get_entity(kind, id)                  -> record
    create_entity(kind, data)             -> record with id
    update_entity(kind, id, partial)      -> None
    delete_entity(kind, id)               -> None
    upload_file(file)                     -> {"url": ...}
    discard_uploads(urls)                 -> None

Sort keys are column names, optionally prefixed with "-" for descending.
Each mutation commits once and then broadcasts the kind's invalidation key.
"""

import logging
import math
import os
import uuid
from datetime import date, datetime

from botocore.exceptions import BotoCoreError, ClientError
from flask import current_app, url_for
from sqlalchemy import Date, DateTime, Float, Integer, JSON
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from werkzeug.utils import secure_filename

from RealtyMVP.exceptions import (
    EntityNotFoundError,
    EntityStoreError,
    InvalidQueryError,
    UnknownEntityKindError,
    UploadError,
)
from RealtyMVP.extensions import db
from RealtyMVP.models import Client, Commission, Interaction, Property, Reminder
from RealtyMVP.socketio_utils import QUERY_KEYS, broadcast_invalidation
from RealtyMVP.utils.r2_storage import r2_delete_object, r2_enabled, r2_key_for_url, r2_put_bytes

logger = logging.getLogger(__name__)

ENTITY_MODELS = {
    "property": Property,
    "client": Client,
    "commission": Commission,
    "interaction": Interaction,
    "reminder": Reminder,
}

# URL segments use the plural query keys ("/api/properties")
KIND_ALIASES = {key: kind for kind, key in QUERY_KEYS.items()}

READ_ONLY_FIELDS = {"id", "created_at", "updated_at"}


# ---------------------------------------------------------
# Kind / column helpers
# ---------------------------------------------------------
def resolve_kind(kind):
    name = (kind or "").strip().lower()
    name = KIND_ALIASES.get(name, name)
    if name not in ENTITY_MODELS:
        raise UnknownEntityKindError(f"Unknown entity kind: {kind!r}")
    return name


def model_for(kind):
    return ENTITY_MODELS[resolve_kind(kind)]


def _columns(model):
    return {c.name: c for c in model.__table__.columns}


def _column(model, name):
    column = _columns(model).get(name)
    if column is None:
        raise InvalidQueryError(f"{model.__name__} has no field {name!r}")
    return column


def _parse_datetime(value):
    return datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))


def coerce_value(column, value):
    """Convert form/JSON input to the column's Python type. Empty strings become None."""
    if value is None:
        return None
    if isinstance(value, str) and not value.strip() and not isinstance(column.type, JSON):
        return "" if _is_text(column) else None

    try:
        if isinstance(column.type, (Integer, Float)):
            number = float(value)
            if not math.isfinite(number):
                raise ValueError("not a finite number")
            return int(number) if isinstance(column.type, Integer) else number
        if isinstance(column.type, DateTime):
            if isinstance(value, datetime):
                return value
            if isinstance(value, date):
                return datetime.combine(value, datetime.min.time())
            parsed = _parse_datetime(value)
            if parsed.tzinfo is not None:
                parsed = parsed.astimezone().replace(tzinfo=None)
            return parsed
        if isinstance(column.type, Date):
            if isinstance(value, datetime):
                return value.date()
            if isinstance(value, date):
                return value
            return _parse_datetime(value).date()
        if isinstance(column.type, JSON):
            if not isinstance(value, (list, dict)):
                raise ValueError("expected a list or object")
            return value
    except (TypeError, ValueError, OverflowError) as e:
        raise InvalidQueryError(f"Invalid value for {column.name}: {value!r}") from e

    return value if isinstance(value, str) else str(value)


def _is_text(column):
    return not isinstance(column.type, (Integer, Float, Date, DateTime, JSON))


def _order_by(model, sort):
    if not sort:
        return [model.id.asc()]
    descending = sort.startswith("-")
    column = getattr(model, _column(model, sort.lstrip("-")).name)
    if descending:
        return [column.desc(), model.id.desc()]
    return [column.asc(), model.id.asc()]


def _assign(model, record, data):
    for name, value in (data or {}).items():
        if name in READ_ONLY_FIELDS:
            continue
        setattr(record, name, coerce_value(_column(model, name), value))


def _required_columns(model):
    return [
        c for c in model.__table__.columns
        if not c.nullable and not c.primary_key and c.default is None and c.server_default is None
    ]


def _check_required(model, record):
    missing = []
    for column in _required_columns(model):
        value = getattr(record, column.name)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(column.name)
    if missing:
        raise InvalidQueryError(f"Missing required field(s): {', '.join(missing)}")


def _commit(kind, action, record_id=None):
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        logger.warning("Rejected %s of %s %s: %s", action, kind, record_id or "", e.orig)
        raise InvalidQueryError(f"Could not {action} {kind}: conflicting or missing values") from e
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception("Failed to %s %s %s", action, kind, record_id or "")
        raise EntityStoreError(f"Could not {action} {kind}: {e.__class__.__name__}") from e


def _row_limit(limit):
    try:
        return max(int(limit), 0)
    except (TypeError, ValueError) as e:
        raise InvalidQueryError(f"Invalid limit: {limit!r}") from e


def _run_query(kind, query):
    try:
        return query.all()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception("Failed to load %s", kind)
        raise EntityStoreError(f"Could not load {kind} records") from e


# ---------------------------------------------------------
# Reads
# ---------------------------------------------------------
def list_entities(kind, sort=None, limit=None):
    kind = resolve_kind(kind)
    model = ENTITY_MODELS[kind]
    query = model.query.order_by(*_order_by(model, sort))
    if limit is not None:
        query = query.limit(_row_limit(limit))
    return _run_query(kind, query)


def filter_entities(kind, criteria, sort=None):
    kind = resolve_kind(kind)
    model = ENTITY_MODELS[kind]
    query = model.query
    for name, value in (criteria or {}).items():
        column = _column(model, name)
        query = query.filter(getattr(model, column.name) == coerce_value(column, value))
    return _run_query(kind, query.order_by(*_order_by(model, sort)))


def get_entity(kind, entity_id):
    kind = resolve_kind(kind)
    try:
        record = db.session.get(ENTITY_MODELS[kind], int(entity_id))
    except (TypeError, ValueError):
        record = None
    except SQLAlchemyError as e:
        db.session.rollback()
        raise EntityStoreError(f"Could not load {kind} {entity_id}") from e
    if record is None:
        raise EntityNotFoundError(f"{kind} {entity_id} not found")
    return record


def find_entity(kind, entity_id):
    """Like get_entity, but a missing/empty id gives None."""
    if entity_id in (None, ""):
        return None
    try:
        return get_entity(kind, entity_id)
    except EntityNotFoundError:
        return None


# ---------------------------------------------------------
# Mutations
# ---------------------------------------------------------
def create_entity(kind, data):
    kind = resolve_kind(kind)
    model = ENTITY_MODELS[kind]
    record = model()
    _assign(model, record, data)
    _check_required(model, record)
    if kind == "commission":
        record.recalculate_amount()

    db.session.add(record)
    _commit(kind, "create")
    logger.info("Created %s %s", kind, record.id)
    broadcast_invalidation(kind, record.id, "created")
    return record


def update_entity(kind, entity_id, data):
    kind = resolve_kind(kind)
    model = ENTITY_MODELS[kind]
    record = get_entity(kind, entity_id)
    try:
        _assign(model, record, data)
        _check_required(model, record)
    except InvalidQueryError:
        db.session.rollback()
        raise
    if kind == "commission":
        record.recalculate_amount()

    _commit(kind, "update", record.id)
    logger.info("Updated %s %s (%s)", kind, record.id, ", ".join(sorted(data or {})))
    broadcast_invalidation(kind, record.id, "updated")


def delete_entity(kind, entity_id):
    kind = resolve_kind(kind)
    record = get_entity(kind, entity_id)
    record_id = record.id
    db.session.delete(record)
    _commit(kind, "delete", record_id)
    logger.info("Deleted %s %s", kind, record_id)
    broadcast_invalidation(kind, record_id, "deleted")


# ---------------------------------------------------------
# Files
# ---------------------------------------------------------
def _allowed(filename):
    allowed = current_app.config.get("ALLOWED_UPLOAD_EXTENSIONS") or set()
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    return not allowed or ext in allowed


def upload_file(file_storage, subdir="uploads"):
    """Store an uploaded file in R2 (when configured) or the local upload folder."""
    original = secure_filename(getattr(file_storage, "filename", "") or "")
    if not original:
        raise UploadError("No file selected.")
    if not _allowed(original):
        raise UploadError(f"File type not allowed: {original}")

    filename = f"{uuid.uuid4().hex[:12]}_{original}"

    if r2_enabled():
        try:
            result = r2_put_bytes(
                file_storage.read(),
                subdir=subdir,
                filename=filename,
                content_type=file_storage.mimetype or "application/octet-stream",
            )
        except (BotoCoreError, ClientError) as e:
            logger.exception("R2 upload failed for %s", original)
            raise UploadError(f"Could not upload {original}") from e
        logger.info("Uploaded %s to R2 key %s", original, result["key"])
        return {"url": result["url"]}

    folder = current_app.config["UPLOAD_FOLDER"]
    try:
        os.makedirs(folder, exist_ok=True)
        file_storage.save(os.path.join(folder, filename))
    except OSError as e:
        logger.exception("Local upload failed for %s", original)
        raise UploadError(f"Could not save {original}") from e

    logger.info("Saved upload %s to %s", original, folder)
    return {"url": url_for("uploads.uploaded_file", filename=filename)}


def discard_uploads(urls):
    """Remove files stored by upload_file that no record refers to.

    Storage errors are logged and skipped so cleanup never hides the
    failure that triggered it.
    """
    for url in urls or []:
        if not url:
            continue
        if r2_enabled():
            key = r2_key_for_url(url)
            if key is None:
                continue
            try:
                r2_delete_object(key)
            except (BotoCoreError, ClientError):
                logger.warning("Could not delete R2 key %s", key, exc_info=True)
                continue
            logger.info("Deleted R2 key %s", key)
            continue

        name = secure_filename(url.rsplit("/", 1)[-1])
        path = os.path.join(current_app.config["UPLOAD_FOLDER"], name)
        if not name or not os.path.isfile(path):
            continue
        try:
            os.remove(path)
        except OSError:
            logger.warning("Could not delete upload %s", path, exc_info=True)
            continue
        logger.info("Deleted upload %s", path)
