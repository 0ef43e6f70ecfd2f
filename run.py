# run.py — RealtyMVP Launcher
import logging
import os

from RealtyMVP.app import create_app
from RealtyMVP.extensions import socketio

logger = logging.getLogger("RealtyMVP.run")


def start_server():
    app = create_app()

    # Render requires binding to the PORT environment variable
    port = int(os.environ.get("PORT", 5050))

    logger.info("Starting RealtyMVP Flask-SocketIO server on port %s (threading mode)...", port)
    socketio.run(
        app,
        host="0.0.0.0",
        port=port,
        debug=app.config.get("DEBUG", False),
        use_reloader=False,
        allow_unsafe_werkzeug=True,  # Required for threading mode in production
    )


if __name__ == "__main__":
    try:
        start_server()
    except KeyboardInterrupt:
        logger.info("RealtyMVP service stopped manually.")
