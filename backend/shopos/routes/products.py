from __future__ import annotations

from flask import Blueprint, jsonify

from ..extensions import state_store
from ..services.pricing_service import calculate_product_price

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.route("/<product_id>/price", methods=["GET"])
def product_price(product_id: str):
    state = state_store.store.state
    product = next((p for p in state.get("products") or [] if p.get("id") == product_id), None)
    if product is None:
        return jsonify({"error": "Not found"}), 404
    result = calculate_product_price(product, state.get("settings") or {})
    return jsonify({"productId": product_id, **result})
