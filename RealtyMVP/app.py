# RealtyMVP/app.py

import os
import importlib
import logging
from datetime import datetime

from flask import Flask, Blueprint, redirect, render_template, send_from_directory, url_for
from werkzeug.exceptions import HTTPException

from RealtyMVP.config import Config
from RealtyMVP.extensions import db, login_manager, migrate, cors, socketio
from RealtyMVP.logging_setup import setup_logging
from RealtyMVP.models import User
from RealtyMVP.models.choices import humanize
from RealtyMVP import socketio_utils  # noqa: F401  registers Socket.IO handlers before init_app
from RealtyMVP.utils.formatters import (
    format_budget, format_currency, format_date, format_price, reminder_date_label, time_ago,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------
# App Factory
# ---------------------------------------------------------
def create_app(config_class=Config):
    base_dir = os.path.abspath(os.path.dirname(__file__))

    app = Flask(
        __name__,
        template_folder=os.path.join(base_dir, "templates"),
        static_folder=os.path.join(base_dir, "static"),
        instance_relative_config=True,
    )

    # Core configuration
    app.config.from_object(config_class)
    app.secret_key = app.config.get("SECRET_KEY")

    log_file = setup_logging(app.config.get("LOG_LEVEL", "INFO"), app.config.get("LOG_FOLDER"))
    if log_file:
        logger.info("Logging to %s", log_file)

    # Initialize extensions
    cors.init_app(app, resources={r"/api/*": {"origins": app.config.get("CORS_ORIGINS", "*")}})
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    socketio.init_app(app)
    app.socketio = socketio

    # Login manager settings
    login_manager.login_view = "auth.login"
    login_manager.login_message = "Please log in to continue."

    @login_manager.user_loader
    def load_user(user_id):
        try:
            return db.session.get(User, int(user_id))
        except (TypeError, ValueError):
            return None

    # Register all route blueprints dynamically
    register_blueprints(app)

    # -----------------------------------------------------
    # Routes
    # -----------------------------------------------------
    @app.route("/")
    def home_redirect():
        return redirect(url_for("dashboard.index"))

    @app.route("/favicon.ico")
    def favicon():
        return send_from_directory(
            os.path.join(app.root_path, "static"),
            "favicon.svg",
            mimetype="image/svg+xml",
        )

    # Global error handlers
    @app.errorhandler(404)
    def not_found(e):
        return render_template("errors/404.html", title="Not Found"), 404

    @app.errorhandler(Exception)
    def handle_any_exception(e):
        if isinstance(e, HTTPException):
            return e
        logger.exception("Unhandled error")
        return render_template("errors/500.html", title="Server Error"), 500

    # Context processors
    @app.context_processor
    def inject_brand():
        return dict(
            company_name=app.config.get("COMPANY_NAME"),
            company_email=app.config.get("COMPANY_EMAIL"),
        )

    @app.context_processor
    def inject_datetime():
        return dict(datetime=datetime)

    # Template filters
    app.add_template_filter(format_currency, "currency")
    app.add_template_filter(format_price, "price")
    app.add_template_filter(format_date, "date")
    app.add_template_filter(reminder_date_label, "date_label")
    app.add_template_filter(time_ago, "time_ago")
    app.add_template_filter(humanize, "humanize")

    @app.template_filter("budget")
    def budget_format(client):
        return format_budget(client.budget_min, client.budget_max)

    return app


# ---------------------------------------------------------
# Dynamic Blueprint Registration
# ---------------------------------------------------------
def register_blueprints(app):
    routes_dir = os.path.join(os.path.dirname(__file__), "routes")
    if not os.path.exists(routes_dir):
        logger.warning("No routes folder found.")
        return

    for file in sorted(os.listdir(routes_dir)):
        if file.endswith(".py") and not file.startswith("__"):
            mod = importlib.import_module(f"RealtyMVP.routes.{file[:-3]}")
            for attr in dir(mod):
                obj = getattr(mod, attr)
                if isinstance(obj, Blueprint) and obj.name not in app.blueprints:
                    app.register_blueprint(obj)
                    logger.debug("Registered blueprint: %s -> %s", obj.name, obj.url_prefix)
