# RealtyMVP/socketio_utils.py
import logging

from flask_socketio import emit

from RealtyMVP.extensions import socketio

logger = logging.getLogger(__name__)

# Fixed cache identifier per entity kind. Pages subscribe to the keys they
# render and refetch when one of them is invalidated.
QUERY_KEYS = {
    "property": "properties",
    "client": "clients",
    "commission": "commissions",
    "interaction": "interactions",
    "reminder": "reminders",
}


# ===============================================================
#   INVALIDATION BROADCAST (called after every mutation)
# ===============================================================
def broadcast_invalidation(kind, entity_id=None, action="updated"):
    payload = {
        "query_key": QUERY_KEYS.get(kind, kind),
        "kind": kind,
        "id": entity_id,
        "action": action,
    }
    socketio.emit("invalidate", payload)
    logger.debug("Broadcast invalidate %s", payload)
    return payload


# ===============================================================
#   CONNECT HANDSHAKE
# ===============================================================
@socketio.on("connect")
def handle_connect():
    emit("query_keys", {"keys": sorted(QUERY_KEYS.values())})
