from functools import wraps
from flask import current_app, redirect, url_for, flash, request
from flask_login import current_user


def role_required(*roles):
    """Require a logged-in user whose role is one of ``roles``.

    Honors LOGIN_DISABLED the same way flask_login.login_required does.
    """
    roles = {r.strip().lower() for r in roles}

    def decorator(fn):
        @wraps(fn)
        def decorated_view(*args, **kwargs):
            if current_app.config.get("LOGIN_DISABLED"):
                return fn(*args, **kwargs)

            if not current_user.is_authenticated:
                return redirect(url_for("auth.login", next=request.path))

            user_role = (getattr(current_user, "role", "") or "").strip().lower()

            if user_role not in roles:
                flash("Your account doesn’t have access to that action.", "warning")
                return redirect(url_for("dashboard.index"))

            return fn(*args, **kwargs)
        return decorated_view
    return decorator
