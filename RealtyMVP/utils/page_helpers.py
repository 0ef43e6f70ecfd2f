# RealtyMVP/utils/page_helpers.py
from urllib.parse import urlparse

from flask import flash, redirect, request, url_for

from RealtyMVP.services.entity_store import list_entities


def load_references():
    """Clients and properties for select boxes and name resolution."""
    return list_entities("client", sort="name"), list_entities("property", sort="title")


def request_filters(*names, default="all"):
    return {name: (request.args.get(name) or default) for name in names}


def flash_failure(action, err):
    flash(f"⚠️ Could not {action}: {err}", "danger")


def safe_next(default_endpoint, **values):
    """Redirect to ?next= / form 'next' when it is a local path, else to the default endpoint."""
    target = request.form.get("next") or request.args.get("next")
    if target and not urlparse(target).netloc and target.startswith("/"):
        return redirect(target)
    return redirect(url_for(default_endpoint, **values))
