"""
Standardized API response wrapper.
Every endpoint answers {success, message, data}.
"""
from flask import jsonify


def _envelope(success: bool, message: str, data):
    return {"success": success, "message": message, "data": data if data is not None else {}}


def success_response(data=None, message="", status_code=200):
    """Return standardized success response."""
    return jsonify(_envelope(True, message, data)), status_code


def error_response(message="An error occurred", status_code=400, data=None):
    """Return standardized error response."""
    return jsonify(_envelope(False, message, data)), status_code


def not_found_response(entity: str):
    """404 for a missing well, report or intervention."""
    return error_response(f"{entity} not found", 404)
