# Overview: The application reducer; the only writer of the state tree.

"""
State transitions for the whole application.

`reduce(state, action, context)` is a pure function of its inputs: it never
mutates `state`, and returns a new top-level dict (with new lists for every
changed collection) whenever something changed. Unchanged entities are shared
between the old and the new tree.

The reducer trusts its payloads. Business validation (due limits, duplicate
user ids, password policy) belongs to the callers; see `shopos.validation`.
Clock, id generation and the seed dataset come from `ReducerContext` so
tests can pin them.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable

from ..time_utils import utcnow, to_utc_z
from .ledger import sale_date, sale_due
from . import actions as A
from .actions import Action
from .notifications import (
    build_notification,
    is_duplicate,
    low_stock_metadata,
    needs_low_stock_alert,
)
from .seed import build_seed_state


logger = logging.getLogger(__name__)


def _uuid_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4()}"


@dataclass
class ReducerContext:
    clock: Callable[[], datetime] = field(default=utcnow)
    id_factory: Callable[[str], str] = field(default=_uuid_id)
    seed_factory: Callable[[], dict] = field(default=build_seed_state)

    def now(self) -> datetime:
        return self.clock()

    def now_iso(self) -> str:
        return to_utc_z(self.clock())

    def new_id(self, prefix: str) -> str:
        return self.id_factory(prefix)


Handler = Callable[[dict, Any, ReducerContext], dict]
_HANDLERS: dict[str, Handler] = {}


def _handles(*action_types: str):
    def decorator(fn: Handler) -> Handler:
        for action_type in action_types:
            _HANDLERS[action_type] = fn
        return fn
    return decorator


def reduce(state: dict, action: Action | dict, context: ReducerContext | None = None) -> dict:
    """Apply one action. Unknown action types return `state` itself."""
    if isinstance(action, dict):
        action = Action.from_dict(action)
    handler = _HANDLERS.get(action.type)
    if handler is None:
        return state
    return handler(state, action.payload, context or ReducerContext())


# =============================================================================
# HELPERS
# =============================================================================


def _items(state: dict, key: str) -> list:
    return state.get(key) or []


def _find(records: list[dict], record_id) -> dict | None:
    for record in records:
        if record.get("id") == record_id:
            return record
    return None


def _quantities_by_product(lines: list[dict]) -> dict:
    totals: dict = {}
    for line in lines or []:
        product_id = line.get("productId")
        totals[product_id] = totals.get(product_id, 0) + (line.get("quantity") or 0)
    return totals


def _replace_by_id(records: list[dict], replacement: dict) -> list[dict]:
    return [replacement if r.get("id") == replacement.get("id") else r for r in records]


def _flag_deleted(records: list[dict], record_id, deleted: bool) -> list[dict]:
    return [{**r, "isDeleted": deleted} if r.get("id") == record_id else r for r in records]


def _settlement_order(sales: list[dict], customer_id) -> list[int]:
    """Indexes of the customer's sales, oldest first; ties keep array order."""
    indexed = [(i, s) for i, s in enumerate(sales) if s.get("customerId") == customer_id]
    indexed.sort(key=lambda pair: (sale_date(pair[1]), pair[0]))
    return [i for i, _ in indexed]


def _customer_name(state: dict, customer_id) -> str | None:
    customer = _find(_items(state, "customers"), customer_id)
    return customer.get("name") if customer else None


def _other_super_user_exists(users: list[dict], excluding_id=None) -> bool:
    return any(u.get("role") == A.ROLE_SUPER_USER and u.get("id") != excluding_id for u in users)


# =============================================================================
# GENERIC COLLECTION HANDLERS
# =============================================================================


_APPEND_TARGETS = {
    A.ADD_PRODUCT: "products",
    A.ADD_PRINTER: "printers",
    A.ADD_CARD_MACHINE: "cardMachines",
    A.ADD_CUSTOMER: "customers",
    A.ADD_SUPPLIER: "suppliers",
    A.CREATE_SERVICE_PURCHASE: "servicePurchases",
    A.ADD_ATTENDANCE_MACHINE: "attendanceMachines",
}

_REPLACE_TARGETS = {
    A.EDIT_PRINTER: "printers",
    A.EDIT_CARD_MACHINE: "cardMachines",
    A.EDIT_CUSTOMER: "customers",
    A.EDIT_SUPPLIER: "suppliers",
    A.EDIT_ATTENDANCE_MACHINE: "attendanceMachines",
}

# action -> (collection, payload id field, isDeleted value)
_SOFT_DELETE_TARGETS = {
    A.DELETE_PRODUCT: ("products", "productId", True),
    A.RESTORE_PRODUCT: ("products", "productId", False),
    A.DELETE_PRINTER: ("printers", "printerId", True),
    A.RESTORE_PRINTER: ("printers", "printerId", False),
    A.DELETE_CARD_MACHINE: ("cardMachines", "machineId", True),
    A.RESTORE_CARD_MACHINE: ("cardMachines", "machineId", False),
    A.DELETE_ATTENDANCE_MACHINE: ("attendanceMachines", "machineId", True),
    A.RESTORE_ATTENDANCE_MACHINE: ("attendanceMachines", "machineId", False),
}


def _make_append(key: str) -> Handler:
    def handler(state, payload, context):
        return {**state, key: [*_items(state, key), payload]}
    return handler


def _make_replace(key: str) -> Handler:
    def handler(state, payload, context):
        return {**state, key: _replace_by_id(_items(state, key), payload)}
    return handler


def _make_soft_delete(key: str, id_field: str, deleted: bool) -> Handler:
    def handler(state, payload, context):
        return {**state, key: _flag_deleted(_items(state, key), (payload or {}).get(id_field), deleted)}
    return handler


for _action_type, _key in _APPEND_TARGETS.items():
    _HANDLERS[_action_type] = _make_append(_key)
for _action_type, _key in _REPLACE_TARGETS.items():
    _HANDLERS[_action_type] = _make_replace(_key)
for _action_type, (_key, _id_field, _deleted) in _SOFT_DELETE_TARGETS.items():
    _HANDLERS[_action_type] = _make_soft_delete(_key, _id_field, _deleted)


@_handles(A.DELETE_SUPPLIER)
def _delete_supplier(state, payload, context):
    supplier_id = payload.get("supplierId")
    return {**state, "suppliers": [s for s in _items(state, "suppliers") if s.get("id") != supplier_id]}


@_handles(A.BULK_DELETE_PRODUCTS)
def _bulk_delete_products(state, payload, context):
    return {**state, "products": [{**p, "isDeleted": True} for p in _items(state, "products")]}


@_handles(A.REFRESH_USB_DEVICES, A.REFRESH_BLUETOOTH_DEVICES, A.REFRESH_NETWORK_DEVICES)
def _refresh_devices(state, payload, context):
    # Device scanning is simulated; a new top-level object still signals the refresh.
    return {**state}


# =============================================================================
# SALES, RETURNS, DUES
# =============================================================================


@_handles(A.CREATE_SALE)
def _create_sale(state, sale, context):
    notifications = _items(state, "notifications")
    sold = _quantities_by_product(sale.get("items"))
    new_notifications = []

    products = []
    for product in _items(state, "products"):
        quantity = sold.get(product.get("id"))
        if quantity is None:
            products.append(product)
            continue
        stock_before = product.get("stock") or 0
        new_stock = stock_before - quantity
        if new_stock < A.LOW_STOCK_THRESHOLD <= stock_before and needs_low_stock_alert(notifications, product):
            new_notifications.append(build_notification(
                A.NOTIFICATION_LOW_STOCK,
                low_stock_metadata(product, new_stock),
                notification_id=context.new_id("notif"),
                date=context.now_iso(),
            ))
        products.append({**product, "stock": new_stock})

    total = sale.get("total") or 0
    if sale.get("paymentMethod") == A.PAYMENT_DUE and total > 0:
        customer_id = sale.get("customerId")
        new_notifications.append(build_notification(
            A.NOTIFICATION_NEW_DUE_SALE,
            {"customerId": customer_id, "customerName": _customer_name(state, customer_id), "amount": total},
            notification_id=context.new_id("notif"),
            date=context.now_iso(),
        ))

    return {
        **state,
        "sales": [*_items(state, "sales"), sale],
        "products": products,
        "notifications": [*new_notifications, *notifications],
    }


@_handles(A.CREATE_SALE_RETURN)
def _create_sale_return(state, sale_return, context):
    returned = _quantities_by_product(sale_return.get("items"))

    products = [
        {**p, "stock": (p.get("stock") or 0) + returned[p.get("id")]} if p.get("id") in returned else p
        for p in _items(state, "products")
    ]

    sales = []
    for sale in _items(state, "sales"):
        if sale.get("id") != sale_return.get("originalSaleId"):
            sales.append(sale)
            continue

        # Each product's returned quantity lands on its first matching line.
        pending = dict(returned)
        items = []
        for line in sale.get("items") or []:
            quantity = pending.pop(line.get("productId"), None)
            if quantity is None:
                items.append(line)
            else:
                items.append({**line, "returnedQuantity": (line.get("returnedQuantity") or 0) + quantity})

        paid_amount = sale.get("paidAmount") or 0
        if sale.get("paymentMethod") == A.PAYMENT_DUE:
            paid_amount += sale_return.get("total") or 0

        sales.append({**sale, "items": items, "paidAmount": paid_amount})

    return {
        **state,
        "products": products,
        "sales": sales,
        "saleReturns": [sale_return, *_items(state, "saleReturns")],
    }


@_handles(A.COLLECT_DUE)
def _collect_due(state, collection, context):
    customer_id = collection.get("customerId")
    amount = collection.get("amount") or 0
    customer_name = _customer_name(state, customer_id)

    sales = list(_items(state, "sales"))
    remaining = amount
    for index in _settlement_order(sales, customer_id):
        if remaining <= 0:
            break
        sale = sales[index]
        due = sale_due(sale)
        if due <= 0:
            continue
        payment = min(remaining, due)
        remaining -= payment
        sales[index] = {**sale, "paidAmount": (sale.get("paidAmount") or 0) + payment}

    new_notifications = [build_notification(
        A.NOTIFICATION_DUE_COLLECTION,
        {"customerId": customer_id, "customerName": customer_name, "amount": amount},
        notification_id=context.new_id("notif"),
        date=context.now_iso(),
    )]

    total_due_after = sum(sale_due(s) for s in sales if s.get("customerId") == customer_id)
    if total_due_after < A.DUE_CLEARED_EPSILON:
        new_notifications.append(build_notification(
            A.NOTIFICATION_DUE_CLEARED,
            {"customerId": customer_id, "customerName": customer_name},
            notification_id=context.new_id("notif"),
            date=context.now_iso(),
        ))

    return {
        **state,
        "sales": sales,
        "dueCollections": [*_items(state, "dueCollections"), collection],
        "notifications": [*new_notifications, *_items(state, "notifications")],
    }


@_handles(A.CREATE_PURCHASE)
def _create_purchase(state, purchase, context):
    purchased = _quantities_by_product(purchase.get("items"))
    products = [
        {**p, "stock": (p.get("stock") or 0) + purchased[p.get("id")]} if p.get("id") in purchased else p
        for p in _items(state, "products")
    ]
    return {**state, "purchases": [*_items(state, "purchases"), purchase], "products": products}


# =============================================================================
# PRODUCTS
# =============================================================================


@_handles(A.EDIT_PRODUCT)
def _edit_product(state, product, context):
    notifications = _items(state, "notifications")
    original = _find(_items(state, "products"), product.get("id"))

    new_stock = product.get("stock") or 0
    if (
        original is not None
        and (original.get("stock") or 0) >= A.LOW_STOCK_THRESHOLD
        and 0 < new_stock < A.LOW_STOCK_THRESHOLD
        and needs_low_stock_alert(notifications, product)
    ):
        notifications = [
            build_notification(
                A.NOTIFICATION_LOW_STOCK,
                low_stock_metadata(product, new_stock),
                notification_id=context.new_id("notif"),
                date=context.now_iso(),
            ),
            *notifications,
        ]

    return {
        **state,
        "products": _replace_by_id(_items(state, "products"), product),
        "notifications": notifications,
    }


@_handles(A.ADD_DAMAGED_PRODUCT)
def _add_damaged_product(state, damaged, context):
    product_id = damaged.get("productId")
    quantity = damaged.get("quantity") or 0
    products = [
        {**p, "stock": max(0, (p.get("stock") or 0) - quantity)} if p.get("id") == product_id else p
        for p in _items(state, "products")
    ]
    return {
        **state,
        "products": products,
        "damagedProducts": [damaged, *_items(state, "damagedProducts")],
    }


# =============================================================================
# USERS & AUTH
# =============================================================================


@_handles(A.ADD_USER)
def _add_user(state, user, context):
    users = _items(state, "users")
    if user.get("role") == A.ROLE_SUPER_USER and _other_super_user_exists(users):
        logger.warning("Rejected ADD_USER %r: a super_user already exists", user.get("id"))
        return state
    return {**state, "users": [*users, user]}


@_handles(A.EDIT_USER)
def _edit_user(state, payload, context):
    original_id = payload.get("originalId")
    updated = payload.get("updatedUser") or {}
    users = _items(state, "users")

    if updated.get("role") == A.ROLE_SUPER_USER and _other_super_user_exists(users, excluding_id=original_id):
        logger.warning("Rejected EDIT_USER %r: a super_user already exists", original_id)
        return state

    password = updated.get("password")
    other_updates = {k: v for k, v in updated.items() if k != "password"}

    def _apply(user: dict) -> dict:
        # Plaintext: a blank password in the edit keeps the stored one.
        return {**user, **other_updates, "password": password or user.get("password")}

    return {**state, "users": [_apply(u) if u.get("id") == original_id else u for u in users]}


@_handles(A.DELETE_USER)
def _delete_user(state, payload, context):
    user_id = payload.get("userId")
    return {**state, "users": [u for u in _items(state, "users") if u.get("id") != user_id]}


@_handles(A.RESET_USER_PASSWORD)
def _reset_user_password(state, payload, context):
    user_id = payload.get("userId")
    new_password = payload.get("newPassword")
    return {
        **state,
        "users": [
            {**u, "password": new_password} if u.get("id") == user_id else u
            for u in _items(state, "users")
        ],
    }


@_handles(A.LOGIN_WITH_PIN)
def _login_with_pin(state, payload, context):
    user = _find(_items(state, "users"), payload.get("userId"))
    if user is None:
        return {**state, "currentUser": None, "loginError": A.LOGIN_ERROR_USER_NOT_FOUND}
    return {**state, "currentUser": user, "loginError": None}


@_handles(A.LOGIN_WITH_PASSWORD)
def _login_with_password(state, payload, context):
    user_id = str(payload.get("userId") or "").strip().lower()
    password = str(payload.get("password") or "").strip()

    user = next((u for u in _items(state, "users") if str(u.get("id", "")).lower() == user_id), None)
    if user is not None and user.get("password") == password:
        return {**state, "currentUser": user, "loginError": None}
    return {**state, "currentUser": None, "loginError": A.LOGIN_ERROR_INVALID_CREDENTIALS}


@_handles(A.CLEAR_LOGIN_ERROR)
def _clear_login_error(state, payload, context):
    return {**state, "loginError": None}


@_handles(A.LOGOUT_USER)
def _logout_user(state, payload, context):
    return {**state, "currentUser": None, "loginError": None}


# =============================================================================
# ATTENDANCE
# =============================================================================


@_handles(A.CLOCK_IN)
def _clock_in(state, payload, context):
    user_id = payload.get("userId")
    now = context.now()
    today = now.date().isoformat()
    attendance = _items(state, "attendance")

    # One record per user per day; a second clock-in is ignored.
    if any(a.get("userId") == user_id and a.get("date") == today for a in attendance):
        return state

    record = {
        "id": context.new_id("att"),
        "userId": user_id,
        "date": today,
        "clockIn": to_utc_z(now),
    }
    return {**state, "attendance": [*attendance, record]}


@_handles(A.CLOCK_OUT)
def _clock_out(state, payload, context):
    user_id = payload.get("userId")
    now = context.now()
    today = now.date().isoformat()
    return {
        **state,
        "attendance": [
            {**a, "clockOut": to_utc_z(now)}
            if a.get("userId") == user_id and a.get("date") == today and not a.get("clockOut")
            else a
            for a in _items(state, "attendance")
        ],
    }


# =============================================================================
# SETTINGS & OFFERS
# =============================================================================


@_handles(A.UPDATE_SETTINGS)
def _update_settings(state, payload, context):
    return {**state, "settings": {**(state.get("settings") or {}), **(payload or {})}}


def _with_offers(state: dict, offers: list[dict]) -> dict:
    return {**state, "settings": {**(state.get("settings") or {}), "specialOffers": offers}}


def _offers(state: dict) -> list[dict]:
    return (state.get("settings") or {}).get("specialOffers") or []


@_handles(A.ADD_OFFER)
def _add_offer(state, offer, context):
    return _with_offers(state, [*_offers(state), offer])


@_handles(A.EDIT_OFFER)
def _edit_offer(state, offer, context):
    return _with_offers(state, _replace_by_id(_offers(state), offer))


@_handles(A.DELETE_OFFER)
def _delete_offer(state, payload, context):
    offer_id = payload.get("offerId")
    return _with_offers(state, [o for o in _offers(state) if o.get("id") != offer_id])


# =============================================================================
# NOTIFICATIONS
# =============================================================================


@_handles(A.ADD_NOTIFICATION)
def _add_notification(state, payload, context):
    notifications = _items(state, "notifications")
    if is_duplicate(notifications, payload.get("type"), payload.get("metadata")):
        return state

    notification = {
        "id": context.new_id("notif"),
        "date": context.now_iso(),
        "isRead": False,
        "metadata": {},
        **payload,
    }
    return {**state, "notifications": [notification, *notifications]}


@_handles(A.DISMISS_NOTIFICATION)
def _dismiss_notification(state, payload, context):
    notification_id = payload.get("notificationId")
    return {
        **state,
        "notifications": [
            {**n, "isRead": True} if n.get("id") == notification_id else n
            for n in _items(state, "notifications")
        ],
    }


@_handles(A.MARK_ALL_NOTIFICATIONS_AS_READ)
def _mark_all_notifications_as_read(state, payload, context):
    return {**state, "notifications": [{**n, "isRead": True} for n in _items(state, "notifications")]}


# =============================================================================
# BACKUP & RESET
# =============================================================================


# Collections a backup must carry; the rest default to empty lists.
BACKUP_REQUIRED_COLLECTIONS = ("products", "customers", "suppliers", "sales", "purchases")
BACKUP_OPTIONAL_COLLECTIONS = (
    "saleReturns",
    "servicePurchases",
    "dueCollections",
    "attendance",
    "attendanceMachines",
    "damagedProducts",
    "printers",
    "cardMachines",
    "usbDevices",
    "bluetoothDevices",
    "networkDevices",
)


@_handles(A.RESTORE_BACKUP)
def _restore_backup(state, backup, context):
    restored = {key: backup.get(key) or [] for key in BACKUP_REQUIRED_COLLECTIONS + BACKUP_OPTIONAL_COLLECTIONS}
    return {
        **state,
        **restored,
        "settings": backup.get("settings") or state.get("settings"),
        "notifications": [],
    }


@_handles(A.CLEAR_ALL_DATA)
def _clear_all_data(state, payload, context):
    return {**context.seed_factory(), "currentUser": None}


_missing = A.ACTION_TYPES - _HANDLERS.keys()
if _missing:
    raise RuntimeError(f"No reducer handler for action types: {sorted(_missing)}")
