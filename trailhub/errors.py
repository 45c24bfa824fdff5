"""Error taxonomy shared by the services and the HTTP layer."""

from typing import Any, Dict, Tuple


class TrailhubError(Exception):
    kind = "error"
    status = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_response(self) -> Tuple[Dict[str, Any], int]:
        return {"error": self.message, "kind": self.kind}, self.status


class NotFound(TrailhubError):
    kind = "not_found"
    status = 404


class Conflict(TrailhubError):
    kind = "conflict"
    status = 409


class ValidationError(TrailhubError):
    kind = "validation_error"
    status = 400


def register_error_handlers(bp) -> None:
    """Render :class:`TrailhubError` subclasses as JSON error bodies."""

    @bp.app_errorhandler(TrailhubError)
    def _handle(err: TrailhubError):
        return err.to_response()
