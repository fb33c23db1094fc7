# backend/shopos/routes/system.py
"""
System health endpoint.

Reports storage reachability and whether the state tree is loaded.
"""

import time
from flask import Blueprint, current_app
from ..extensions import db, state_store
from ..models import StorageRecord
from ..time_utils import utcnow

system_bp = Blueprint("system", __name__, url_prefix="/api")


def check_storage_health() -> dict:
    """
    Check database connectivity by counting storage records.
    """
    start_time = time.time()
    try:
        record_count = db.session.query(StorageRecord).count()
        elapsed_ms = (time.time() - start_time) * 1000
        return {
            "status": "healthy",
            "latency_ms": round(elapsed_ms, 2),
            "details": {"records": record_count},
        }
    except Exception:
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("Storage health check failed")
        return {
            "status": "unhealthy",
            "latency_ms": round(elapsed_ms, 2),
            "error": "Database error",
        }


def check_state_health() -> dict:
    start_time = time.time()
    try:
        state = state_store.store.state
        elapsed_ms = (time.time() - start_time) * 1000
        return {
            "status": "healthy",
            "latency_ms": round(elapsed_ms, 2),
            "details": {
                "products": len(state.get("products") or []),
                "sales": len(state.get("sales") or []),
                "users": len(state.get("users") or []),
            },
        }
    except Exception:
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("State health check failed")
        return {
            "status": "unhealthy",
            "latency_ms": round(elapsed_ms, 2),
            "error": "State error",
        }


@system_bp.get("/health")
def health():
    """
    Returns:
    - 200: all checks healthy
    - 503: one or more checks unhealthy
    """
    start_time = time.time()

    storage_health = check_storage_health()
    state_health = check_state_health()

    all_checks = [storage_health, state_health]
    healthy = all(check["status"] == "healthy" for check in all_checks)

    total_elapsed_ms = (time.time() - start_time) * 1000

    response = {
        "status": "healthy" if healthy else "unhealthy",
        "timestamp": utcnow().isoformat() + "Z",
        "total_latency_ms": round(total_elapsed_ms, 2),
        "checks": {
            "storage": storage_health,
            "state": state_health,
        },
    }

    return response, 200 if healthy else 503
