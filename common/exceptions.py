"""Domain exceptions and the API error envelope.

Services raise the exceptions below; views let them propagate and
``api_exception_handler`` (installed as DRF's EXCEPTION_HANDLER) turns them
into ``{"success": false, "message": ...}`` responses.
"""

import logging

from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger("stockmaster.api")


class InventoryError(Exception):
    """Base class for inventory domain failures."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "Unable to complete the operation."):
        super().__init__(message)
        self.message = message


class NotFoundError(InventoryError):
    """A referenced product, warehouse, location or document does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class InvalidStateError(InventoryError):
    """The document's current status does not allow the requested transition."""


class InsufficientStockError(InventoryError):
    """A decrement would take stock at a location below zero."""


class ScopeError(InventoryError):
    """The caller is not allowed to act on the given warehouse."""

    status_code = status.HTTP_403_FORBIDDEN


def _first_message(detail) -> str:
    if isinstance(detail, (list, tuple)) and detail:
        return _first_message(detail[0])
    if isinstance(detail, dict) and detail:
        key, value = next(iter(detail.items()))
        text = _first_message(value)
        return text if key in ("detail", "non_field_errors") else f"{key}: {text}"
    return str(detail)


def api_exception_handler(exc, context):
    """Render domain and DRF exceptions with the ``success``/``message`` envelope."""
    if isinstance(exc, InventoryError):
        view = context.get("view")
        logger.info(
            "request_rejected",
            extra={
                "event": "request_rejected",
                "error": type(exc).__name__,
                "status_code": exc.status_code,
                "view": type(view).__name__ if view is not None else None,
                "reason": exc.message,
            },
        )
        return Response({"success": False, "message": exc.message}, status=exc.status_code)

    response = exception_handler(exc, context)
    if response is None:
        return None

    body = {"success": False, "message": _first_message(response.data)}
    if isinstance(exc, ValidationError):
        body["errors"] = response.data
    response.data = body
    return response
