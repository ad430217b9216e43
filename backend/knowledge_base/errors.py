from flask import current_app, jsonify
from werkzeug.exceptions import HTTPException
from knowledge_base.exceptions import (
    NotFound,
    PersistenceFailure,
    ValidationError,
)


def _error_response(kind, message, status_code):
    response = jsonify({
        "error": kind,
        "message": message,
    })
    response.status_code = status_code
    return response


def register_error_handlers(app):
    @app.errorhandler(NotFound)
    def handle_not_found(error):
        return _error_response(error.kind, str(error), 404)

    # InvariantViolation is a ValidationError subclass
    @app.errorhandler(ValidationError)
    def handle_validation_error(error):
        return _error_response(error.kind, str(error), 400)

    @app.errorhandler(PersistenceFailure)
    def handle_persistence_failure(error):
        current_app.logger.error("Persistence failure: %s", error)
        return _error_response(error.kind, str(error), 500)

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        kind = error.name.lower().replace(" ", "_")
        return _error_response(kind, error.description, error.code)
