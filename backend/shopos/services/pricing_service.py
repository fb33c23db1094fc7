from __future__ import annotations

from datetime import datetime

from ..time_utils import parse_stored_datetime, utcnow


def _offer_expired(offer: dict, now: datetime) -> bool:
    expiry_value = offer.get("expiryDate")
    if not expiry_value:
        return False
    expiry = parse_stored_datetime(expiry_value)
    return expiry is not None and expiry < now


def _offer_applies(offer: dict, product: dict) -> bool:
    applies_to = offer.get("appliesTo")
    targets = offer.get("targetIds") or []
    if applies_to == "all":
        return True
    if applies_to == "categories":
        return product.get("categoryId") in targets
    if applies_to == "products":
        return product.get("id") in targets
    return False


def calculate_product_price(product: dict, settings: dict, now: datetime | None = None) -> dict:
    """
    Price of a product after the single best special offer.

    Offers are skipped when disabled or expired. A discount never takes the
    price below zero. `saveAmount` is measured from the MRP when it is higher
    than the price.
    """
    now = now or utcnow()
    price = product.get("price") or 0
    best_offer = None
    best_discount = 0

    if settings.get("specialOffersEnabled") and settings.get("specialOffers"):
        for offer in settings["specialOffers"]:
            if not offer.get("enabled") or _offer_expired(offer, now):
                continue
            if not _offer_applies(offer, product):
                continue

            value = offer.get("discountValue") or 0
            if offer.get("discountType") == "percentage":
                discount = price * (value / 100)
            else:
                discount = value
            discount = min(discount, price)

            if discount > best_discount:
                best_discount = discount
                best_offer = offer

    final_price = price - best_discount
    mrp = product.get("mrp")
    display_price = mrp if mrp and mrp > price else price
    save_amount = display_price - final_price

    return {
        "originalPrice": price,
        "finalPrice": final_price,
        "bestOffer": best_offer,
        "mrp": mrp,
        "saveAmount": save_amount if save_amount > 0 else 0,
    }
