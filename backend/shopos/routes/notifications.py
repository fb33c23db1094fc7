from __future__ import annotations

from flask import Blueprint, jsonify, request, current_app

from ..extensions import state_store
from ..services import alerts_service
from ..state import actions as A
from ..state.actions import Action
from ..state.notifications import unread_count

notifications_bp = Blueprint("notifications", __name__, url_prefix="/api/notifications")


@notifications_bp.route("", methods=["GET"])
def list_notifications():
    all_notifications = state_store.store.state.get("notifications") or []
    unread_only = request.args.get("unread_only", "false").lower() == "true"
    notifications = [n for n in all_notifications if not n.get("isRead")] if unread_only else all_notifications
    return jsonify({
        "notifications": notifications,
        "unread": unread_count(all_notifications),
    })


@notifications_bp.route("/<notification_id>/dismiss", methods=["POST"])
def dismiss_notification(notification_id: str):
    store = state_store.store
    if not any(n.get("id") == notification_id for n in store.state.get("notifications") or []):
        return jsonify({"error": "Not found"}), 404
    state = store.dispatch(Action(A.DISMISS_NOTIFICATION, {"notificationId": notification_id}))
    return jsonify({"dismissed": notification_id, "unread": unread_count(state.get("notifications") or [])})


@notifications_bp.route("/read-all", methods=["POST"])
def mark_all_read():
    state = state_store.store.dispatch(Action(A.MARK_ALL_NOTIFICATIONS_AS_READ))
    return jsonify({"unread": unread_count(state.get("notifications") or [])})


@notifications_bp.route("/scan", methods=["POST"])
def scan_alerts():
    try:
        added = alerts_service.scan_inventory_alerts(state_store.store)
    except Exception:
        current_app.logger.exception("Inventory alert scan failed")
        return jsonify({"error": "Scan failed"}), 500
    return jsonify({"added": added})
