from __future__ import annotations

from flask import Blueprint, jsonify, request, current_app

from ..extensions import state_store
from ..services import dues_service
from ..services.dispatch_service import dispatch_validated
from ..state import actions as A
from ..validation import ValidationError

dues_bp = Blueprint("dues", __name__, url_prefix="/api/dues")


@dues_bp.route("", methods=["GET"])
def list_dues():
    result = dues_service.customers_with_dues(state_store.store.state)
    return jsonify(result)


@dues_bp.route("/<customer_id>", methods=["GET"])
def customer_dues(customer_id: str):
    state = state_store.store.state
    return jsonify({
        "customerId": customer_id,
        "totalDue": dues_service.customer_total_due(state, customer_id),
        "sales": dues_service.outstanding_sales(state, customer_id),
    })


@dues_bp.route("/<customer_id>/collect", methods=["POST"])
def collect_due(customer_id: str):
    data = request.get_json(silent=True) or {}
    if "amount" not in data:
        return jsonify({"error": "Missing required fields: amount"}), 400

    store = state_store.store
    collection = {
        "id": data.get("id") or store.context.new_id("dc"),
        "customerId": customer_id,
        "amount": data["amount"],
        "paymentMethod": data.get("paymentMethod") or "cash",
        "date": data.get("date") or store.context.now_iso(),
    }
    if collection["paymentMethod"] not in A.COLLECTION_PAYMENT_METHODS:
        return jsonify({"error": f"Unknown payment method: {collection['paymentMethod']}"}), 400

    try:
        _, state = dispatch_validated(store, {"type": A.COLLECT_DUE, "payload": collection})
    except ValidationError as e:
        return jsonify({"error": str(e), "details": e.details}), 400
    except Exception:
        current_app.logger.exception("Due collection failed")
        return jsonify({"error": "Failed to collect due"}), 500

    return jsonify({
        "collection": collection,
        "totalDue": dues_service.customer_total_due(state, customer_id),
    }), 201
