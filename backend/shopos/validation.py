from __future__ import annotations

import re
from dataclasses import dataclass

from .state import actions as A
from .state.actions import Action


class ValidationError(ValueError):
    """400-level input problem."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


class ConflictError(ValueError):
    """409-level business rule conflict (e.g., duplicate user id)."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


@dataclass(frozen=True)
class PayloadPolicy:
    """
    Shape checks for one action payload:
    - required: keys that must be present
    - numeric: keys that must be numbers when present
    - collections: keys that must be lists when present
    - dates: keys that must be ISO date strings when present
    """
    required: frozenset = frozenset()
    numeric: frozenset = frozenset()
    collections: frozenset = frozenset()
    dates: frozenset = frozenset()


def _policy(required=(), numeric=(), collections=(), dates=()) -> PayloadPolicy:
    return PayloadPolicy(frozenset(required), frozenset(numeric), frozenset(collections), frozenset(dates))


_ENTITY = _policy(required=("id",))

PAYLOAD_POLICIES: dict[str, PayloadPolicy] = {
    A.CREATE_SALE_RETURN: _policy(("id", "originalSaleId", "items", "total"), ("total",), ("items",)),
    A.ADD_PRODUCT: _policy(("id", "name", "stock"), ("stock", "price", "purchasePrice"), (), ("expiryDate",)),
    A.EDIT_PRODUCT: _policy(("id", "stock"), ("stock", "price", "purchasePrice"), (), ("expiryDate",)),
    A.DELETE_PRODUCT: _policy(("productId",)),
    A.RESTORE_PRODUCT: _policy(("productId",)),
    A.ADD_DAMAGED_PRODUCT: _policy(("id", "productId", "quantity"), ("quantity",)),
    A.ADD_PRINTER: _ENTITY,
    A.EDIT_PRINTER: _ENTITY,
    A.DELETE_PRINTER: _policy(("printerId",)),
    A.RESTORE_PRINTER: _policy(("printerId",)),
    A.ADD_CARD_MACHINE: _ENTITY,
    A.EDIT_CARD_MACHINE: _ENTITY,
    A.DELETE_CARD_MACHINE: _policy(("machineId",)),
    A.RESTORE_CARD_MACHINE: _policy(("machineId",)),
    A.ADD_CUSTOMER: _ENTITY,
    A.EDIT_CUSTOMER: _ENTITY,
    A.ADD_SUPPLIER: _ENTITY,
    A.EDIT_SUPPLIER: _ENTITY,
    A.DELETE_SUPPLIER: _policy(("supplierId",)),
    A.ADD_USER: _policy(("id", "role")),
    A.EDIT_USER: _policy(("originalId", "updatedUser")),
    A.DELETE_USER: _policy(("userId",)),
    A.RESET_USER_PASSWORD: _policy(("userId", "newPassword")),
    A.CREATE_SALE: _policy(
        ("id", "customerId", "items", "total", "paidAmount", "paymentMethod"),
        ("total", "paidAmount", "subtotal"),
        ("items",),
        ("date",),
    ),
    A.COLLECT_DUE: _policy(("id", "customerId", "amount"), ("amount",), (), ("date",)),
    A.CREATE_PURCHASE: _policy(("id", "items"), ("total",), ("items",), ("date",)),
    A.CREATE_SERVICE_PURCHASE: _policy(("id", "items"), ("total",), ("items",), ("date",)),
    A.CLOCK_IN: _policy(("userId",)),
    A.CLOCK_OUT: _policy(("userId",)),
    A.ADD_ATTENDANCE_MACHINE: _ENTITY,
    A.EDIT_ATTENDANCE_MACHINE: _ENTITY,
    A.DELETE_ATTENDANCE_MACHINE: _policy(("machineId",)),
    A.RESTORE_ATTENDANCE_MACHINE: _policy(("machineId",)),
    A.UPDATE_SETTINGS: _policy(),
    A.ADD_NOTIFICATION: _policy(("type",)),
    A.DISMISS_NOTIFICATION: _policy(("notificationId",)),
    A.LOGIN_WITH_PIN: _policy(("userId",)),
    A.LOGIN_WITH_PASSWORD: _policy(("userId", "password")),
    A.RESTORE_BACKUP: _policy(
        ("products", "customers", "suppliers", "sales", "purchases", "settings"),
        (),
        ("products", "customers", "suppliers", "sales", "purchases"),
    ),
    A.ADD_OFFER: _ENTITY,
    A.EDIT_OFFER: _ENTITY,
    A.DELETE_OFFER: _policy(("offerId",)),
}


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_action(data) -> Action:
    """
    Validates an incoming `{type, payload}` document and returns the Action.

    Only the payload shape is checked here; business rules live in the
    enforce_rules_* helpers.
    """
    if not isinstance(data, dict):
        raise ValidationError("Invalid JSON payload")

    action = Action.from_dict(data)
    if not action.type:
        raise ValidationError("type is required")
    if not action.is_known:
        raise ValidationError(f"Unknown action type: {action.type}")

    if action.type in A.PAYLOADLESS_ACTIONS:
        return action

    payload = action.payload
    if not isinstance(payload, dict):
        raise ValidationError(f"{action.type} requires an object payload")

    policy = PAYLOAD_POLICIES[action.type]
    missing = sorted(k for k in policy.required if k not in payload)
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}", details={"missing": missing})

    for key in policy.numeric:
        if key in payload and payload[key] is not None and not _is_number(payload[key]):
            raise ValidationError(f"{key} must be a number")

    for key in policy.collections:
        if key in payload and not isinstance(payload[key], list):
            raise ValidationError(f"{key} must be a list")

    for key in policy.dates:
        if payload.get(key) is not None and not isinstance(payload[key], str):
            raise ValidationError(f"{key} must be an ISO date string")

    if action.type == A.RESTORE_BACKUP:
        for sale in payload["sales"]:
            if not isinstance(sale, dict):
                raise ValidationError("sales must contain objects")
            if sale.get("date") is not None and not isinstance(sale["date"], str):
                raise ValidationError(f"sale {sale.get('id')!r} date must be an ISO date string")

    if action.type == A.ADD_NOTIFICATION and payload["type"] not in A.NOTIFICATION_TYPES:
        raise ValidationError(f"Unknown notification type: {payload['type']}")

    if action.type == A.CREATE_SALE and payload["paymentMethod"] not in A.SALE_PAYMENT_METHODS:
        raise ValidationError(f"Unknown payment method: {payload['paymentMethod']}")

    if action.type == A.EDIT_USER and not isinstance(payload["updatedUser"], dict):
        raise ValidationError("updatedUser must be an object")

    return action


# =============================================================================
# USER RULES
# =============================================================================


PASSWORD_MIN_LENGTH = 6


def password_policy_errors(password: str) -> list[str]:
    """Return the names of every password rule `password` breaks."""
    errors = []
    if len(password) < PASSWORD_MIN_LENGTH:
        errors.append("password_min_length")
    if not re.search(r"[A-Z]", password):
        errors.append("password_uppercase")
    if not re.search(r"[a-z]", password):
        errors.append("password_lowercase")
    if not re.search(r"\d", password):
        errors.append("password_number")
    if not re.search(r"[^A-Za-z0-9]", password):
        errors.append("password_special")
    if re.search(r"[^ -~]", password):
        errors.append("password_english_only")
    return errors


def validate_password(password) -> None:
    if not isinstance(password, str):
        raise ValidationError("password must be a string")
    errors = password_policy_errors(password)
    if errors:
        raise ValidationError("Password does not meet requirements", details={"rules": errors})


def enforce_rules_user(state: dict, user: dict, original_id: str | None = None) -> None:
    """
    Checks for ADD_USER (original_id None) and EDIT_USER.

    - ids are unique, case-insensitively
    - only one super_user
    - new passwords follow the password policy; an edit may omit it
    """
    users = state.get("users") or []

    role = user.get("role")
    if role is not None and role not in A.VALID_ROLES:
        raise ValidationError(f"Unknown role: {role}")

    new_id = str(user.get("id") or original_id or "").strip()
    if not new_id:
        raise ValidationError("User id is required")
    for existing in users:
        existing_id = str(existing.get("id", ""))
        if existing_id.lower() == new_id.lower() and existing_id != original_id:
            raise ConflictError("User ID already exists", details={"id": new_id})

    if role == A.ROLE_SUPER_USER:
        if any(u.get("role") == A.ROLE_SUPER_USER and u.get("id") != original_id for u in users):
            raise ConflictError("A super user already exists")

    password = user.get("password")
    if original_id is None or password:
        validate_password(password)
