from flask import Blueprint, current_app, send_from_directory

uploads_bp = Blueprint("uploads", __name__, url_prefix="/uploads")


# 📎 Serve files saved to the local upload folder (R2 uploads are served by R2)
@uploads_bp.route("/<path:filename>")
def uploaded_file(filename):
    return send_from_directory(current_app.config["UPLOAD_FOLDER"], filename)
