"""
Global error handler for Flask application.
"""
import traceback

from werkzeug.exceptions import HTTPException

from .response_wrapper import error_response


def register_error_handlers(app):
    """Register global error handlers."""

    @app.errorhandler(400)
    def bad_request(e):
        return error_response(getattr(e, "description", None) or "Bad request", 400)

    @app.errorhandler(404)
    def not_found(e):
        return error_response("Resource not found", 404)

    @app.errorhandler(405)
    def method_not_allowed(e):
        return error_response("Method not allowed", 405)

    @app.errorhandler(413)
    def too_large(e):
        return error_response("Report exceeds the upload size limit", 413)

    @app.errorhandler(Exception)
    def handle_exception(e):
        if isinstance(e, HTTPException):
            return error_response(e.description or e.name, e.code or 500)
        print(f"[Error] Unhandled {type(e).__name__}: {e}")
        if app.debug:
            traceback.print_exc()
        return error_response(str(e) if str(e) else "An unexpected error occurred", 500)
