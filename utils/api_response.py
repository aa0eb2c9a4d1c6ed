"""
Standardized API response helpers.

Provides consistent JSON response format across all API endpoints:

    Success:  {"success": true, "data": {...}, "message": "..."}
    Error:    {"success": false, "error": "Error message"}
    Booking:  {"success": true, "data": {...session...}, "navigation": [...]}

Usage:
    from utils.api_response import api_success, api_error, api_session

    return api_success(data={'id': rid}, message='Reservation submitted')
    return api_error('Invalid request data', status=400)
    return api_session(session, toast='Press back again to cancel')
"""

from flask import jsonify
from typing import Any


def api_success(
    data: dict | list | None = None,
    message: str | None = None,
    status: int = 200,
    **extra_fields: Any
) -> tuple:
    """
    Build a standardized success JSON response.

    Args:
        data: Optional payload included as 'data'.
        message: Optional success message.
        status: HTTP status code (default 200).
        **extra_fields: Additional top-level fields (e.g., navigation, toast).

    Returns:
        Tuple of (Response, status_code)
    """
    response = {'success': True}

    if data is not None:
        response['data'] = data

    if message:
        response['message'] = message

    if extra_fields:
        response.update(extra_fields)

    return jsonify(response), status


def api_error(error: str, status: int = 400, **extra_fields: Any) -> tuple:
    """
    Build a standardized error JSON response.

    Args:
        error: Error message.
        status: HTTP status code (default 400).
        **extra_fields: Additional top-level fields (e.g., redirect).

    Returns:
        Tuple of (Response, status_code)
    """
    response = {'success': False, 'error': error}

    if extra_fields:
        response.update(extra_fields)

    return jsonify(response), status


def api_session(session, message: str | None = None, error: str | None = None,
                status: int | None = None, **extra_fields: Any) -> tuple:
    """
    Build the response for a booking-session action.

    The session state is always returned, along with the navigation
    instructions queued while handling the request.

    Args:
        session: BookingSession
        message: Optional success message.
        error: Error message; marks the response as failed.
        status: HTTP status code (default 200, or 400 with an error).
        **extra_fields: Additional top-level fields (e.g., toast, outcome).

    Returns:
        Tuple of (Response, status_code)
    """
    extra_fields['navigation'] = session.navigator.drain()
    data = session.to_dict()

    if error:
        return api_error(error, status=status or 400, data=data, **extra_fields)
    return api_success(data=data, message=message, status=status or 200, **extra_fields)
