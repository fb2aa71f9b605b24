"""DRF exception handler shaping every API error as `{"message": ...}`."""

import logging

from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler, set_rollback

logger = logging.getLogger("storefront.api")

GENERIC_ERROR = "Something went wrong, please try again."
UNAUTHORIZED = "Unauthorized."


def _first_message(detail) -> str:
    """Return the first human readable message of a DRF error detail."""
    if isinstance(detail, dict):
        for key, value in detail.items():
            message = _first_message(value)
            if key in ("detail", "non_field_errors", "message"):
                return message
            return f"{key}: {message}"
        return ""
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else ""
    return str(detail)


def storefront_exception_handler(exc, context):
    response = exception_handler(exc, context)
    if response is not None:
        if isinstance(exc, exceptions.ValidationError):
            message = _first_message(exc.detail) or "Invalid request."
        elif isinstance(exc, (exceptions.NotAuthenticated, exceptions.AuthenticationFailed)):
            # Token failures never say which check failed; sign-in keeps its credentials message.
            message = str(exc.detail) if exc.get_codes() == "invalid_credentials" else UNAUTHORIZED
        else:
            message = _first_message(response.data) or str(exc)
        response.data = {"message": message}
        return response

    view = context.get("view")
    logger.exception(
        "api.unhandled_error",
        extra={"event": "api.unhandled_error", "view": view.__class__.__name__ if view else None},
    )
    set_rollback()
    return Response({"message": GENERIC_ERROR}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
