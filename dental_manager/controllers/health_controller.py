"""
Health controller - liveness endpoint for monitoring.
"""

import logging
import time
from datetime import datetime, timezone

from flask import Blueprint, jsonify

from dental_manager import __version__
from dental_manager.db.session import check_database_connection

logger = logging.getLogger(__name__)

health_bp = Blueprint("health", __name__, url_prefix="/health")

_STARTED_AT = time.monotonic()


@health_bp.route("", methods=["GET"])
def health_check():
    """
    Report service and database health.

    Returns:
        JSON response with:
        - status: "healthy" or "unhealthy"
        - database: "connected" or "disconnected"
        - version: Package version
        - timestamp: Current UTC time (ISO-8601)
        - uptime_seconds: Seconds since the process imported this module

    Status codes:
        200: Database reachable
        503: Database unreachable

    Note:
        - No authentication required (monitoring endpoint)
    """
    db_ok = check_database_connection()
    body = {
        "status": "healthy" if db_ok else "unhealthy",
        "database": "connected" if db_ok else "disconnected",
        "version": __version__,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime_seconds": round(time.monotonic() - _STARTED_AT, 3),
    }
    if not db_ok:
        logger.warning(
            "Health check failed",
            extra={"context": {"endpoint": "/health", "database": "disconnected"}},
        )
    return jsonify(body), 200 if db_ok else 503
