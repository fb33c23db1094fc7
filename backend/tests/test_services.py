"""
Service layer: dues projections, inventory alerts, offer pricing and user
preferences.
"""

from datetime import datetime

import pytest

from shopos.services import alerts_service, dues_service, preferences_service
from shopos.services.pricing_service import calculate_product_price
from shopos.state import Action, MemoryStorageBackend
from shopos.state import actions as A
from shopos.validation import ValidationError

from conftest import FIXED_NOW, make_product, make_sale


# =============================================================================
# DUES
# =============================================================================


@pytest.fixture
def due_state(seed_state):
    customers = [
        {"id": "cust_a", "name": "A"},
        {"id": "cust_b", "name": "B"},
        {"id": "cust_paid", "name": "Paid"},
    ]
    sales = [
        make_sale("s1", "cust_a", [], 100, 30, "due", date="2025-06-03T00:00:00.000Z"),
        make_sale("s2", "cust_a", [], 50, 0, "due", date="2025-06-01T00:00:00.000Z"),
        make_sale("s3", "cust_b", [], 200, 0, "due"),
        make_sale("s4", "cust_paid", [], 80, 80, "cash"),
    ]
    return {**seed_state, "customers": customers, "sales": sales}


def test_customer_total_due(due_state):
    assert dues_service.customer_total_due(due_state, "cust_a") == 120
    assert dues_service.customer_total_due(due_state, "cust_paid") == 0
    assert dues_service.customer_total_due(due_state, "nobody") == 0


def test_outstanding_sales_oldest_first(due_state):
    assert [s["id"] for s in dues_service.outstanding_sales(due_state, "cust_a")] == ["s2", "s1"]


def test_outstanding_sales_with_numeric_date(due_state):
    stamped = make_sale("s5", "cust_a", [], 10, 0, "due", date=1718000000000)
    state = {**due_state, "sales": [*due_state["sales"], stamped]}
    assert [s["id"] for s in dues_service.outstanding_sales(state, "cust_a")] == ["s5", "s2", "s1"]


def test_customers_with_dues_sorted_by_amount(due_state):
    rows = dues_service.customers_with_dues(due_state)
    assert [(r["id"], r["totalDue"]) for r in rows] == [("cust_b", 200), ("cust_a", 120)]


@pytest.mark.parametrize("amount", [0, -5, "10", True])
def test_due_collection_rejects_non_positive_amounts(due_state, amount):
    with pytest.raises(ValidationError):
        dues_service.validate_due_collection(due_state, "cust_a", amount)


def test_due_collection_rejects_overpayment(due_state):
    with pytest.raises(ValidationError) as exc:
        dues_service.validate_due_collection(due_state, "cust_a", 121)
    assert exc.value.details["total_due"] == 120


def test_due_collection_accepts_exact_amount(due_state):
    assert dues_service.validate_due_collection(due_state, "cust_a", 120) == 120


# =============================================================================
# ALERTS
# =============================================================================


def test_alert_actions_cover_stock_and_expiry():
    products = [
        make_product("low", stock=4),
        make_product("empty", stock=0),
        make_product("expired", stock=50, expiryDate="2025-06-01"),
        make_product("expiring", stock=50, expiryDate="2025-07-01"),
        make_product("fresh", stock=50, expiryDate="2026-01-01"),
        make_product("gone", stock=1, isDeleted=True),
        make_product("bad_date", stock=50, expiryDate="not a date"),
        make_product("epoch_date", stock=50, expiryDate=20250101),
    ]
    found = {(a.payload["type"], a.payload["metadata"]["productId"]) for a in alerts_service.alert_actions(products, FIXED_NOW)}
    assert found == {
        (A.NOTIFICATION_LOW_STOCK, "low"),
        (A.NOTIFICATION_EXPIRY_ALERT, "expired"),
        (A.NOTIFICATION_EXPIRY_WARNING, "expiring"),
    }


def test_scan_is_idempotent_while_unread(store):
    store.dispatch(Action(A.ADD_PRODUCT, make_product("low", stock=3)))

    assert alerts_service.scan_inventory_alerts(store, FIXED_NOW) == 1
    assert alerts_service.scan_inventory_alerts(store, FIXED_NOW) == 0

    store.dispatch(Action(A.MARK_ALL_NOTIFICATIONS_AS_READ))
    assert alerts_service.scan_inventory_alerts(store, FIXED_NOW) == 1


# =============================================================================
# PRICING
# =============================================================================


def offer(offer_id, discount_type, value, applies_to="all", target_ids=None, **extra):
    return {
        "id": offer_id,
        "name": offer_id,
        "enabled": True,
        "discountType": discount_type,
        "discountValue": value,
        "appliesTo": applies_to,
        "targetIds": target_ids or [],
        **extra,
    }


def test_best_offer_wins():
    product = make_product("p", price=200, mrp=250)
    settings = {
        "specialOffersEnabled": True,
        "specialOffers": [
            offer("ten_pct", "percentage", 10),
            offer("flat_30", "fixed", 30, "categories", ["cat_beverages"]),
            offer("other_product", "fixed", 100, "products", ["someone_else"]),
        ],
    }
    result = calculate_product_price(product, settings, FIXED_NOW)
    assert result["bestOffer"]["id"] == "flat_30"
    assert result["finalPrice"] == 170
    assert result["saveAmount"] == 80
    assert result["mrp"] == 250


def test_disabled_and_expired_offers_are_skipped():
    product = make_product("p", price=100)
    settings = {
        "specialOffersEnabled": True,
        "specialOffers": [
            offer("off", "fixed", 10, enabled=False),
            offer("old", "fixed", 20, expiryDate="2025-01-01T00:00:00.000Z"),
        ],
    }
    result = calculate_product_price(product, settings, FIXED_NOW)
    assert result["bestOffer"] is None
    assert result["finalPrice"] == 100
    assert result["saveAmount"] == 0


def test_unreadable_offer_expiry_never_expires():
    product = make_product("p", price=100)
    settings = {"specialOffersEnabled": True, "specialOffers": [offer("stamped", "fixed", 15, expiryDate=1718000000000)]}
    result = calculate_product_price(product, settings, FIXED_NOW)
    assert result["bestOffer"]["id"] == "stamped"
    assert result["finalPrice"] == 85


def test_discount_never_below_zero():
    result = calculate_product_price(
        make_product("p", price=40),
        {"specialOffersEnabled": True, "specialOffers": [offer("huge", "fixed", 500)]},
        FIXED_NOW,
    )
    assert result["finalPrice"] == 0


def test_offers_switched_off_globally():
    result = calculate_product_price(
        make_product("p", price=40),
        {"specialOffersEnabled": False, "specialOffers": [offer("ten", "fixed", 10)]},
        datetime(2025, 1, 1),
    )
    assert result["finalPrice"] == 40


# =============================================================================
# PREFERENCES
# =============================================================================


SETTINGS = {"theme": "astra", "language": "en", "currency": "BDT", "timeZone": "Asia/Dhaka"}


def test_preferences_default_to_settings():
    assert preferences_service.load_preferences(MemoryStorageBackend(), "Admin", SETTINGS) == SETTINGS


def test_preferences_are_saved_per_user():
    backend = MemoryStorageBackend()
    saved = preferences_service.save_preferences(backend, "Admin", SETTINGS, {"theme": "dark"})
    assert saved["theme"] == "dark"
    assert "userPrefs_Admin" in backend.records
    assert preferences_service.load_preferences(backend, "Admin", SETTINGS)["theme"] == "dark"
    assert preferences_service.load_preferences(backend, "UID-0002", SETTINGS)["theme"] == "astra"


def test_preferences_reject_unknown_fields():
    with pytest.raises(ValidationError):
        preferences_service.save_preferences(MemoryStorageBackend(), "Admin", SETTINGS, {"password": "x"})


def test_corrupt_preferences_fall_back_to_settings():
    backend = MemoryStorageBackend({"userPrefs_Admin": "{not json"})
    assert preferences_service.load_preferences(backend, "Admin", SETTINGS) == SETTINGS
