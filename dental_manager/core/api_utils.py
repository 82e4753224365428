"""
Common API utilities for consistent response formatting across all controllers.
"""

from datetime import date, datetime
from typing import Any, Optional

from flask import g, jsonify, request

from dental_manager.db.session import SessionLocal


def api_response(
    success: bool, message: str, data: Optional[Any] = None, status_code: int = 200
) -> tuple:
    """
    Standardized API response format for all endpoints.

    Args:
        success: Whether the operation was successful
        message: Human-readable message about the operation
        data: Optional data payload
        status_code: HTTP status code

    Returns:
        Tuple of (json_response, status_code)
    """
    response = {"success": success, "message": message}

    if data is not None:
        response["data"] = data

    return jsonify(response), status_code


def parse_iso_datetime(value: Optional[str], field: str) -> datetime:
    """Parse an ISO-8601 string into a naive clinic-local datetime.

    Raises ValueError naming the field when the value is missing, malformed
    or carries a UTC offset.
    """
    if not value:
        raise ValueError(f"{field} is required")
    try:
        parsed = datetime.fromisoformat(value)
    except (TypeError, ValueError):
        raise ValueError(f"{field} must be an ISO-8601 datetime")
    if parsed.tzinfo is not None:
        raise ValueError(f"{field} must not include a timezone offset")
    return parsed


def parse_iso_date(value: Optional[str], field: str) -> Optional[date]:
    """Parse an optional ISO-8601 date (YYYY-MM-DD)."""
    if not value:
        return None
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise ValueError(f"{field} must be an ISO-8601 date")


def get_request_session():
    """Session shared by every repository built during the current request."""
    if "db_session" not in g:
        g.db_session = SessionLocal()
    return g.db_session


def close_request_session(exc=None) -> None:
    """App-context teardown hook closing the request session, if one was opened."""
    db_session = g.pop("db_session", None)
    if db_session is not None:
        db_session.close()


def optional_query_int(name: str) -> Optional[int]:
    """Read an integer query-string argument; absent or empty gives None."""
    value = request.args.get(name)
    if value in (None, ""):
        return None
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer")


def failure_status(message: str) -> int:
    """HTTP status for a failed service result, keyed on its message."""
    if message.endswith("not found."):
        return 404
    if "already exists" in message:
        return 409
    return 400
