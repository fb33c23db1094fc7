# Overview: Action vocabulary and domain constants for the state engine.

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


# Sales returns
CREATE_SALE_RETURN = "CREATE_SALE_RETURN"

# Products
ADD_PRODUCT = "ADD_PRODUCT"
EDIT_PRODUCT = "EDIT_PRODUCT"
DELETE_PRODUCT = "DELETE_PRODUCT"
RESTORE_PRODUCT = "RESTORE_PRODUCT"
BULK_DELETE_PRODUCTS = "BULK_DELETE_PRODUCTS"
ADD_DAMAGED_PRODUCT = "ADD_DAMAGED_PRODUCT"

# Printers
ADD_PRINTER = "ADD_PRINTER"
EDIT_PRINTER = "EDIT_PRINTER"
DELETE_PRINTER = "DELETE_PRINTER"
RESTORE_PRINTER = "RESTORE_PRINTER"

# Card machines
ADD_CARD_MACHINE = "ADD_CARD_MACHINE"
EDIT_CARD_MACHINE = "EDIT_CARD_MACHINE"
DELETE_CARD_MACHINE = "DELETE_CARD_MACHINE"
RESTORE_CARD_MACHINE = "RESTORE_CARD_MACHINE"

# Customers
ADD_CUSTOMER = "ADD_CUSTOMER"
EDIT_CUSTOMER = "EDIT_CUSTOMER"

# Suppliers
ADD_SUPPLIER = "ADD_SUPPLIER"
EDIT_SUPPLIER = "EDIT_SUPPLIER"
DELETE_SUPPLIER = "DELETE_SUPPLIER"

# Users
ADD_USER = "ADD_USER"
EDIT_USER = "EDIT_USER"
DELETE_USER = "DELETE_USER"
RESET_USER_PASSWORD = "RESET_USER_PASSWORD"

# Sales and dues
CREATE_SALE = "CREATE_SALE"
COLLECT_DUE = "COLLECT_DUE"

# Purchases
CREATE_PURCHASE = "CREATE_PURCHASE"
CREATE_SERVICE_PURCHASE = "CREATE_SERVICE_PURCHASE"

# Attendance
CLOCK_IN = "CLOCK_IN"
CLOCK_OUT = "CLOCK_OUT"

# Attendance machines
ADD_ATTENDANCE_MACHINE = "ADD_ATTENDANCE_MACHINE"
EDIT_ATTENDANCE_MACHINE = "EDIT_ATTENDANCE_MACHINE"
DELETE_ATTENDANCE_MACHINE = "DELETE_ATTENDANCE_MACHINE"
RESTORE_ATTENDANCE_MACHINE = "RESTORE_ATTENDANCE_MACHINE"

# Settings
UPDATE_SETTINGS = "UPDATE_SETTINGS"

# Notifications
ADD_NOTIFICATION = "ADD_NOTIFICATION"
DISMISS_NOTIFICATION = "DISMISS_NOTIFICATION"
MARK_ALL_NOTIFICATIONS_AS_READ = "MARK_ALL_NOTIFICATIONS_AS_READ"

# Auth
LOGOUT_USER = "LOGOUT_USER"
LOGIN_WITH_PIN = "LOGIN_WITH_PIN"
LOGIN_WITH_PASSWORD = "LOGIN_WITH_PASSWORD"
CLEAR_LOGIN_ERROR = "CLEAR_LOGIN_ERROR"

# Backup & restore
RESTORE_BACKUP = "RESTORE_BACKUP"
CLEAR_ALL_DATA = "CLEAR_ALL_DATA"

# Devices
REFRESH_USB_DEVICES = "REFRESH_USB_DEVICES"
REFRESH_BLUETOOTH_DEVICES = "REFRESH_BLUETOOTH_DEVICES"
REFRESH_NETWORK_DEVICES = "REFRESH_NETWORK_DEVICES"

# Promotions
ADD_OFFER = "ADD_OFFER"
EDIT_OFFER = "EDIT_OFFER"
DELETE_OFFER = "DELETE_OFFER"

ACTION_TYPES = frozenset({
    CREATE_SALE_RETURN,
    ADD_PRODUCT, EDIT_PRODUCT, DELETE_PRODUCT, RESTORE_PRODUCT,
    BULK_DELETE_PRODUCTS, ADD_DAMAGED_PRODUCT,
    ADD_PRINTER, EDIT_PRINTER, DELETE_PRINTER, RESTORE_PRINTER,
    ADD_CARD_MACHINE, EDIT_CARD_MACHINE, DELETE_CARD_MACHINE, RESTORE_CARD_MACHINE,
    ADD_CUSTOMER, EDIT_CUSTOMER,
    ADD_SUPPLIER, EDIT_SUPPLIER, DELETE_SUPPLIER,
    ADD_USER, EDIT_USER, DELETE_USER, RESET_USER_PASSWORD,
    CREATE_SALE, COLLECT_DUE,
    CREATE_PURCHASE, CREATE_SERVICE_PURCHASE,
    CLOCK_IN, CLOCK_OUT,
    ADD_ATTENDANCE_MACHINE, EDIT_ATTENDANCE_MACHINE,
    DELETE_ATTENDANCE_MACHINE, RESTORE_ATTENDANCE_MACHINE,
    UPDATE_SETTINGS,
    ADD_NOTIFICATION, DISMISS_NOTIFICATION, MARK_ALL_NOTIFICATIONS_AS_READ,
    LOGOUT_USER, LOGIN_WITH_PIN, LOGIN_WITH_PASSWORD, CLEAR_LOGIN_ERROR,
    RESTORE_BACKUP, CLEAR_ALL_DATA,
    REFRESH_USB_DEVICES, REFRESH_BLUETOOTH_DEVICES, REFRESH_NETWORK_DEVICES,
    ADD_OFFER, EDIT_OFFER, DELETE_OFFER,
})

# Actions whose payload is ignored
PAYLOADLESS_ACTIONS = frozenset({
    BULK_DELETE_PRODUCTS,
    MARK_ALL_NOTIFICATIONS_AS_READ,
    CLEAR_LOGIN_ERROR,
    LOGOUT_USER,
    REFRESH_USB_DEVICES,
    REFRESH_BLUETOOTH_DEVICES,
    REFRESH_NETWORK_DEVICES,
    CLEAR_ALL_DATA,
})


NOTIFICATION_LOW_STOCK = "low_stock"
NOTIFICATION_EXPIRY_WARNING = "expiry_warning"
NOTIFICATION_EXPIRY_ALERT = "expiry_alert"
NOTIFICATION_NEW_DUE_SALE = "new_due_sale"
NOTIFICATION_DUE_COLLECTION = "due_collection"
NOTIFICATION_DUE_CLEARED = "due_cleared"
NOTIFICATION_TYPES = frozenset({
    NOTIFICATION_LOW_STOCK,
    NOTIFICATION_EXPIRY_WARNING,
    NOTIFICATION_EXPIRY_ALERT,
    NOTIFICATION_NEW_DUE_SALE,
    NOTIFICATION_DUE_COLLECTION,
    NOTIFICATION_DUE_CLEARED,
})

# At most one unread notification per (type, productId) for these
DEDUP_NOTIFICATION_TYPES = frozenset({
    NOTIFICATION_LOW_STOCK,
    NOTIFICATION_EXPIRY_WARNING,
    NOTIFICATION_EXPIRY_ALERT,
})

ROLE_ADMIN = "admin"
ROLE_STAFF = "staff"
ROLE_SALES_MANAGER = "sales_manager"
ROLE_SUPER_USER = "super_user"
ROLE_MONITOR = "monitor"
VALID_ROLES = frozenset({ROLE_ADMIN, ROLE_STAFF, ROLE_SALES_MANAGER, ROLE_SUPER_USER, ROLE_MONITOR})

PAYMENT_DUE = "due"
COLLECTION_PAYMENT_METHODS = frozenset({"cash", "card", "bKash", "nagad", "rocket", "upay"})
SALE_PAYMENT_METHODS = COLLECTION_PAYMENT_METHODS | {PAYMENT_DUE}

LOW_STOCK_THRESHOLD = 10
DUE_CLEARED_EPSILON = 0.01

LOGIN_ERROR_INVALID_CREDENTIALS = "Invalid User ID or Password."
LOGIN_ERROR_USER_NOT_FOUND = "User not found."


@dataclass(frozen=True)
class Action:
    """A single domain transition request: a type tag plus its payload."""
    type: str
    payload: Any = field(default=None)

    @classmethod
    def from_dict(cls, data: dict) -> "Action":
        return cls(type=str(data.get("type") or ""), payload=data.get("payload"))

    def to_dict(self) -> dict:
        if self.payload is None:
            return {"type": self.type}
        return {"type": self.type, "payload": self.payload}

    @property
    def is_known(self) -> bool:
        return self.type in ACTION_TYPES
