# Overview: Notification construction and the unread-duplicate policy.

from __future__ import annotations

from .actions import DEDUP_NOTIFICATION_TYPES, NOTIFICATION_LOW_STOCK


def has_unread(notifications: list[dict], notification_type: str, product_id) -> bool:
    """True if an unread notification of this type already references the product."""
    for n in notifications:
        if n.get("isRead") or n.get("type") != notification_type:
            continue
        if (n.get("metadata") or {}).get("productId") == product_id:
            return True
    return False


def is_duplicate(notifications: list[dict], notification_type: str, metadata: dict | None) -> bool:
    """
    Dedup rule for ADD_NOTIFICATION.

    Only stock and expiry types are deduplicated, keyed by (type, productId).
    An expiry_alert and an expiry_warning for the same product may coexist,
    and read notifications never block.
    """
    if notification_type not in DEDUP_NOTIFICATION_TYPES:
        return False
    return has_unread(notifications, notification_type, (metadata or {}).get("productId"))


def build_notification(notification_type: str, metadata: dict, *, notification_id: str, date: str) -> dict:
    return {
        "id": notification_id,
        "type": notification_type,
        "metadata": metadata,
        "date": date,
        "isRead": False,
    }


def low_stock_metadata(product: dict, stock) -> dict:
    return {"productId": product.get("id"), "productName": product.get("name"), "stock": stock}


def needs_low_stock_alert(notifications: list[dict], product: dict) -> bool:
    return not has_unread(notifications, NOTIFICATION_LOW_STOCK, product.get("id"))


def unread_count(notifications: list[dict]) -> int:
    return sum(1 for n in notifications if not n.get("isRead"))
