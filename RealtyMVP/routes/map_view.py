from flask import Blueprint, render_template, request, jsonify, url_for, current_app
from flask_login import login_required

from RealtyMVP.models.choices import PROPERTY_STATUSES, LISTING_TYPES, as_choices
from RealtyMVP.services.entity_store import list_entities
from RealtyMVP.services.portfolio_calcs import map_center, map_markers
from RealtyMVP.utils.formatters import format_price
from RealtyMVP.utils.page_helpers import request_filters

map_bp = Blueprint("map", __name__, url_prefix="/map")


def _marker(prop):
    return {
        "id": prop.id,
        "title": prop.title,
        "address": prop.address,
        "city": prop.city,
        "lat": prop.latitude,
        "lng": prop.longitude,
        "status": prop.status,
        "listing_type": prop.listing_type,
        "price": format_price(prop.price),
        "image": prop.cover_image,
        "url": url_for("properties.view", property_id=prop.id),
    }


def _markers(filters):
    properties = list_entities("property", sort="title")
    markers = map_markers(properties, **filters)
    default = current_app.config.get("MAP_DEFAULT_CENTER")
    center = map_center(markers, default) if default else map_center(markers)
    return markers, center


# =========================================================
# 🗺️ PROPERTY MAP
# =========================================================
@map_bp.route("/")
@login_required
def index():
    filters = request_filters("status", "listing_type")
    markers, center = _markers(filters)

    return render_template(
        "map/index.html",
        markers=[_marker(p) for p in markers],
        center=center,
        filters=filters,
        status_choices=as_choices(PROPERTY_STATUSES, "All Statuses"),
        listing_choices=as_choices(LISTING_TYPES, "All"),
        query_keys=["properties"],
        title="Property Map",
    )


@map_bp.route("/markers")
@login_required
def markers():
    filters = request_filters("status", "listing_type")
    found, center = _markers(filters)
    return jsonify({
        "center": {"lat": center[0], "lng": center[1]},
        "markers": [_marker(p) for p in found],
    })
