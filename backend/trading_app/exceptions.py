import logging

from django.db import DatabaseError
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from wallets.exceptions import Internal, SettlementError

logger = logging.getLogger(__name__)


def _error_response(exc: SettlementError) -> Response:
    body = {"error": exc.message, "code": exc.code}
    if exc.fields:
        body["fields"] = exc.fields
    return Response(body, status=exc.status_code)


def settlement_exception_handler(exc, context):
    """
    Render every failure as {"error", "code"}.

    Settlement errors carry their own status; persistence failures become
    "internal" (the atomic block has already rolled back, so the client can
    retry the whole request).
    """
    if isinstance(exc, SettlementError):
        return _error_response(exc)

    if isinstance(exc, DatabaseError):
        view = context.get("view")
        logger.exception(f"Persistence failure in {view.__class__.__name__ if view else 'view'}")
        return _error_response(Internal())

    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, (exceptions.NotAuthenticated, exceptions.AuthenticationFailed)):
        response.status_code = status.HTTP_401_UNAUTHORIZED
        response.data = {"error": str(exc.detail), "code": "unauthenticated"}
    elif isinstance(exc, exceptions.ValidationError):
        response.data = {"error": "Invalid request", "code": "invalid_wager", "fields": exc.detail}
    else:
        response.data = {"error": str(getattr(exc, "detail", exc)), "code": getattr(exc, "default_code", "error")}
    return response
