import logging
from datetime import datetime
from urllib.parse import urlparse

from flask import Blueprint, render_template, redirect, url_for, flash, request, session
from flask_login import login_user, logout_user, login_required, current_user

from RealtyMVP.extensions import db
from RealtyMVP.forms import LoginForm
from RealtyMVP.models.user_model import User

auth_bp = Blueprint("auth", __name__, url_prefix="/auth")

logger = logging.getLogger(__name__)


# ------------------------------------------------
# 🟩 Login
# ------------------------------------------------
@auth_bp.route("/login", methods=["GET", "POST"])
def login():
    if current_user.is_authenticated:
        return redirect(url_for("dashboard.index"))

    form = LoginForm()
    if not form.validate_on_submit():
        return render_template("auth/login.html", form=form, title="Login")

    email = (form.email.data or "").strip().lower()
    user = User.query.filter_by(email=email).first()

    if not user or not user.check_password(form.password.data or ""):
        logger.warning("Failed login for %s", email)
        flash("❌ Invalid email or password.", "danger")
        return render_template("auth/login.html", form=form, title="Login"), 401

    if not user.is_active:
        flash("🚫 Your account is deactivated. Contact admin for access.", "danger")
        return render_template("auth/login.html", form=form, title="Login"), 403

    session.permanent = True
    login_user(user, remember=form.remember.data)
    user.last_login = datetime.utcnow()
    db.session.commit()
    logger.info("User %s logged in", user.email)

    flash("👋 Welcome back!", "success")

    # ✅ Respect "next" (local paths only)
    next_page = request.args.get("next")
    if next_page and next_page.startswith("/") and not urlparse(next_page).netloc:
        return redirect(next_page)
    return redirect(url_for("dashboard.index"))


# ------------------------------------------------
# 🟥 Logout
# ------------------------------------------------
@auth_bp.route("/logout")
@login_required
def logout():
    logout_user()
    flash("You have been logged out successfully.", "info")
    return redirect(url_for("auth.login"))
