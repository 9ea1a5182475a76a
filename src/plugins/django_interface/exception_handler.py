"""
Tradução de exceções → resposta HTTP padronizada:

    {"error": {"code", "message", "details", "timestamp", "path"}}
"""

from __future__ import annotations

import pydantic
import structlog
from rest_framework import exceptions as drf_exceptions
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from healthhub_core.adapters.context.request_context import get_current_request
from healthhub_core.core.domain.entities._base import utcnow
from healthhub_core.core.domain.exceptions import (
    ConflictError,
    HealthHubError,
    InternalError,
    NotFoundError,
    OperationCancelledError,
    RateLimitError,
    UnauthorizedError,
    ValidationError,
)

logger = structlog.get_logger(__name__)

HTTP_CLIENT_CLOSED_REQUEST = 499

STATUS_BY_ERROR: dict[type[HealthHubError], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    UnauthorizedError: status.HTTP_401_UNAUTHORIZED,
    RateLimitError: status.HTTP_429_TOO_MANY_REQUESTS,
    ConflictError: status.HTTP_409_CONFLICT,
    OperationCancelledError: HTTP_CLIENT_CLOSED_REQUEST,
    InternalError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

CODE_BY_STATUS = {
    status.HTTP_400_BAD_REQUEST: ValidationError.code,
    status.HTTP_401_UNAUTHORIZED: UnauthorizedError.code,
    status.HTTP_403_FORBIDDEN: UnauthorizedError.code,
    status.HTTP_404_NOT_FOUND: NotFoundError.code,
    status.HTTP_429_TOO_MANY_REQUESTS: RateLimitError.code,
}


def error_body(code: str, message: str, details=None, request=None) -> dict:
    request = request or get_current_request()
    return {
        "error": {
            "code": code,
            "message": message,
            "details": details,
            "timestamp": utcnow().isoformat(),
            "path": request.path if request is not None else None,
        }
    }


def api_exception_handler(exc, context):
    request = context.get("request")

    if isinstance(exc, HealthHubError):
        code = STATUS_BY_ERROR.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response(error_body(exc.code, exc.message, exc.details, request), status=code)

    if isinstance(exc, pydantic.ValidationError):
        details = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        return Response(
            error_body(ValidationError.code, "Invalid request payload", details, request),
            status=status.HTTP_400_BAD_REQUEST,
        )

    if isinstance(exc, drf_exceptions.NotAuthenticated | drf_exceptions.AuthenticationFailed):
        return Response(
            error_body(UnauthorizedError.code, str(exc.detail), None, request),
            status=status.HTTP_401_UNAUTHORIZED,
            headers={"WWW-Authenticate": 'Bearer realm="api"'},
        )

    resp = drf_exception_handler(exc, context)
    if resp is None:
        logger.error("api.unhandled_exception", error=str(exc), exc_info=exc)
        return Response(
            error_body(InternalError.code, InternalError().message, None, request),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    # demais exceções do DRF (404, 405, parse error, throttling)
    data = resp.data
    detail = data.get("detail") if isinstance(data, dict) else None
    code = CODE_BY_STATUS.get(resp.status_code, "HTTP_ERROR")
    if detail is not None:
        body = error_body(code, str(detail), None, request)
    else:
        body = error_body(code, resp.status_text, data, request)
    headers = {h: resp[h] for h in ("Allow", "Retry-After") if resp.has_header(h)}
    return Response(body, status=resp.status_code, headers=headers)
