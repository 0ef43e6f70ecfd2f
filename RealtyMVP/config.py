from datetime import timedelta
from dotenv import load_dotenv
import os

# ===================================================
# 🏗 BASE CONFIG PATH SETUP
# ===================================================
BASE_DIR = os.path.abspath(os.path.dirname(__file__))
INSTANCE_PATH = os.path.join(BASE_DIR, "instance")

load_dotenv()


def _env_flag(name, default="false"):
    return os.environ.get(name, default).lower() in ("1", "true", "yes")


# ===================================================
# ⚙️ MAIN CONFIG CLASS
# ===================================================
class Config:
    # --------------------------------------------------
    # 🔐 CORE APP SETTINGS
    # --------------------------------------------------
    SECRET_KEY = os.getenv("SECRET_KEY", "dev_only_change_me")

    DEBUG = _env_flag("FLASK_DEBUG")
    TESTING = False

    PERMANENT_SESSION_LIFETIME = timedelta(days=30)
    REMEMBER_COOKIE_DURATION = timedelta(days=30)

    SESSION_COOKIE_SECURE = _env_flag("SESSION_COOKIE_SECURE", "true")
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"

    REMEMBER_COOKIE_SECURE = SESSION_COOKIE_SECURE
    REMEMBER_COOKIE_HTTPONLY = True
    REMEMBER_COOKIE_SAMESITE = "Lax"

    SESSION_PROTECTION = "strong"

    # --------------------------------------------------
    # 🗄 DATABASE
    # --------------------------------------------------
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL",
        "postgresql+psycopg2://postgres@localhost:5432/realtymvp_db"
    )

    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # --------------------------------------------------
    # 🌍 CORS (JSON API only)
    # --------------------------------------------------
    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")
    CORS_SUPPORTS_CREDENTIALS = True

    # --------------------------------------------------
    # 📁 FILE UPLOADS
    # --------------------------------------------------
    UPLOAD_FOLDER = os.environ.get("UPLOAD_FOLDER", os.path.join(BASE_DIR, "uploads"))
    MAX_CONTENT_LENGTH = 25 * 1024 * 1024  # 25 MB
    ALLOWED_UPLOAD_EXTENSIONS = {"png", "jpg", "jpeg", "gif", "webp", "pdf"}

    # Cloudflare R2 (S3 API). Local UPLOAD_FOLDER is used when R2_BUCKET is empty.
    R2_ACCOUNT_ID = os.environ.get("R2_ACCOUNT_ID", "")
    R2_ACCESS_KEY_ID = os.environ.get("R2_ACCESS_KEY_ID", "")
    R2_SECRET_ACCESS_KEY = os.environ.get("R2_SECRET_ACCESS_KEY", "")
    R2_BUCKET = os.environ.get("R2_BUCKET", "")
    R2_PUBLIC_BASE_URL = os.environ.get("R2_PUBLIC_BASE_URL", "")

    # --------------------------------------------------
    # 📝 LOGGING
    # --------------------------------------------------
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    LOG_FOLDER = os.environ.get("LOG_FOLDER", os.path.join(BASE_DIR, "logs"))

    # --------------------------------------------------
    # 📊 DASHBOARD / VIEW TUNING
    # --------------------------------------------------
    CONTRACT_ALERT_DAYS = int(os.environ.get("CONTRACT_ALERT_DAYS", 30))
    DASHBOARD_REMINDER_LIMIT = int(os.environ.get("DASHBOARD_REMINDER_LIMIT", 5))
    RECENT_ACTIVITY_LIMIT = int(os.environ.get("RECENT_ACTIVITY_LIMIT", 10))
    RECENT_LISTINGS_LIMIT = 3
    MAP_DEFAULT_CENTER = (40.7128, -74.0060)  # New York

    # --------------------------------------------------
    # 🏢 BRAND INFO
    # --------------------------------------------------
    COMPANY_NAME = os.environ.get("COMPANY_NAME", "RealtyMVP Agency")
    COMPANY_EMAIL = os.environ.get("COMPANY_EMAIL", "info@realtymvp.com")


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    WTF_CSRF_ENABLED = False
    LOGIN_DISABLED = True
    SESSION_COOKIE_SECURE = False
    REMEMBER_COOKIE_SECURE = False
    R2_BUCKET = ""
    LOG_FOLDER = None
