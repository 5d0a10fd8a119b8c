"""Typed error hierarchy shared by services, the migration ledger and the API."""

from __future__ import annotations

from typing import Any, Dict, Optional

from flask import Flask, jsonify


class EvorBrainError(Exception):
    """Base class for errors surfaced to the command layer."""

    code = "internal_error"
    status_code = 500

    def __init__(self, message: str, *, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"ok": False, "error": self.code, "message": self.message}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class ValidationError(EvorBrainError):
    """Input rejected before any database write."""

    code = "validation_error"
    status_code = 400


class NotFoundError(EvorBrainError):
    code = "not_found"
    status_code = 404

    def __init__(self, entity: str, entity_id: Optional[str] = None):
        if entity_id is None:
            message = f"{entity} not found"
        else:
            message = f"{entity} with ID {entity_id} not found"
        super().__init__(message)
        self.entity = entity
        self.entity_id = entity_id


class ConflictError(EvorBrainError):
    """Operation blocked by existing state, e.g. dependents of a hard delete."""

    code = "conflict"
    status_code = 409

    def __init__(self, message: str, *, blocking_count: Optional[int] = None):
        super().__init__(message)
        self.blocking_count = blocking_count

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        if self.blocking_count is not None:
            payload["blocking_count"] = self.blocking_count
        return payload


class SecurityError(EvorBrainError):
    code = "security_error"
    status_code = 403


class DatabaseError(EvorBrainError):
    code = "database_error"


class MigrationError(DatabaseError):
    code = "migration_error"


class DatabaseConnectionError(DatabaseError):
    code = "connection_error"


def register_error_handlers(app: Flask) -> None:
    """JSON responses for typed errors, HTTP errors and anything unexpected."""
    from werkzeug.exceptions import HTTPException

    @app.errorhandler(EvorBrainError)
    def _domain_error(exc: EvorBrainError):
        if exc.status_code >= 500:
            app.logger.error("%s: %s", exc.code, exc.message, exc_info=exc.__cause__ or exc)
        else:
            app.logger.info("%s: %s", exc.code, exc.message)
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        return {"ok": False, "error": exc.name.lower().replace(" ", "_"), "message": exc.description}, exc.code

    @app.errorhandler(Exception)
    def _generic_error(exc: Exception):
        app.logger.exception("Unhandled error: %s", exc)
        # In debug/testing, surface the exception message to speed up diagnosis
        if app.debug or app.testing:
            return {"ok": False, "error": "unexpected_error", "message": str(exc)}, 500
        return {"ok": False, "error": "unexpected_error"}, 500


__all__ = [
    "EvorBrainError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "SecurityError",
    "DatabaseError",
    "MigrationError",
    "DatabaseConnectionError",
    "register_error_handlers",
]
