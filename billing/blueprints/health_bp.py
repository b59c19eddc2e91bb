"""
Health check blueprint.

Endpoints:
    GET /api/v1/health  - liveness plus a database round trip
"""

import logging
import time

from flask import Blueprint, jsonify

from billing.models import db

logger = logging.getLogger(__name__)

health_bp = Blueprint("health", __name__, url_prefix="/api/v1")


@health_bp.route("/health", methods=["GET"])
def health():
    try:
        t0 = time.perf_counter()
        db.session.execute(db.text("SELECT 1"))
        latency_ms = (time.perf_counter() - t0) * 1000
    except Exception as exc:
        logger.error("Health check: database failed: %s", exc)
        return jsonify({"status": "degraded", "database": {"status": "error"}}), 503
    return jsonify({
        "status": "ok",
        "database": {"status": "ok", "latency_ms": round(latency_ms, 1)},
    }), 200
