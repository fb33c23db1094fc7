# Overview: Inventory alert scan (low stock and expiry), dispatched as
# ADD_NOTIFICATION actions so the reducer's dedup rule applies.

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from ..state import actions as A
from ..state.actions import Action
from ..state.store import StateStore
from ..time_utils import parse_stored_datetime, utcnow


logger = logging.getLogger(__name__)

EXPIRY_WARNING_DAYS = 30


def _expiry(product: dict) -> datetime | None:
    value = product.get("expiryDate")
    expiry = parse_stored_datetime(value)
    if expiry is None and value not in (None, ""):
        logger.warning("Ignoring unparseable expiryDate on product %r", product.get("id"))
    return expiry


def alert_actions(products: list[dict], now: datetime | None = None) -> list[Action]:
    """ADD_NOTIFICATION actions for every active product that needs one."""
    now = now or utcnow()
    warning_cutoff = now + timedelta(days=EXPIRY_WARNING_DAYS)
    pending = []

    for product in products:
        if product.get("isDeleted"):
            continue

        stock = product.get("stock") or 0
        if 0 < stock < A.LOW_STOCK_THRESHOLD:
            pending.append(Action(A.ADD_NOTIFICATION, {
                "type": A.NOTIFICATION_LOW_STOCK,
                "metadata": {"productId": product.get("id"), "productName": product.get("name"), "stock": stock},
            }))

        expiry = _expiry(product)
        if expiry is None:
            continue
        if expiry < now:
            notification_type = A.NOTIFICATION_EXPIRY_ALERT
        elif expiry < warning_cutoff:
            notification_type = A.NOTIFICATION_EXPIRY_WARNING
        else:
            continue
        pending.append(Action(A.ADD_NOTIFICATION, {
            "type": notification_type,
            "metadata": {
                "productId": product.get("id"),
                "productName": product.get("name"),
                "expiryDate": product.get("expiryDate"),
            },
        }))

    return pending


def scan_inventory_alerts(store: StateStore, now: datetime | None = None) -> int:
    """Dispatch alerts for the current products. Returns how many notifications were added."""
    before = len(store.state.get("notifications") or [])
    store.dispatch_many(alert_actions(store.state.get("products") or [], now))
    added = len(store.state.get("notifications") or []) - before
    logger.info("Inventory alert scan added %d notification(s)", added)
    return added
